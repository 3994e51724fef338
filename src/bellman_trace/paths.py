from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import CyclicPredecessors
from .graph import Graph, Mode, Node


def reconstruct_single_path(predecessors: Mapping[Node, Optional[Node]], source: Node, target: Node) -> Optional[List[Node]]:
    """Walk the predecessor chain back from ``target`` to ``source``.

    Returns the path source-first, or None when the chain ends before reaching the
    source (target unreachable). Raises CyclicPredecessors if the chain loops.
    """
    path: List[Node] = []
    visited = set()
    cur: Optional[Node] = target
    while cur is not None and cur != source:
        if cur in visited:
            raise CyclicPredecessors(cur)
        visited.add(cur)
        path.append(cur)
        cur = predecessors.get(cur)
    if cur is None:
        return None
    path.append(source)
    path.reverse()
    return path


def _backward_steps(value: Any) -> List[Node]:
    # Single-valued maps hold a node or None; multi-valued maps hold a list of nodes
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def find_all_optimal_paths(
    predecessors: Mapping[Node, Any],
    source: Node,
    target: Node,
    limit: Optional[int] = None,
) -> List[List[Node]]:
    """Enumerate every source->target path consistent with the predecessor relation.

    ``predecessors`` is either the single-valued map of a run (node -> node/None)
    or a multi-valued one such as ``RelaxationResult.optimal_predecessors``
    (node -> list of nodes). Branches that would revisit a node on the current
    path are pruned; if that leaves no path at all, CyclicPredecessors is raised.
    Paths come out in predecessor order; ``limit`` stops after that many paths.
    """
    if target == source:
        return [[source]]

    max_depth = len(predecessors) + 1
    found: List[List[Node]] = []
    seen = set()
    pruned: List[Node] = []

    # Entries are (node, suffix, on_path) to expand, or (None, path, None) for a finished path.
    # Children are pushed in reverse so they pop in predecessor order.
    stack: List[Tuple[Any, Tuple[Node, ...], Optional[frozenset]]] = [(target, (target,), frozenset([target]))]
    while stack:
        if limit is not None and len(found) >= limit:
            break
        node, suffix, on_path = stack.pop()
        if on_path is None:
            if suffix not in seen:
                seen.add(suffix)
                found.append(list(suffix))
            continue
        if len(suffix) > max_depth:
            continue
        children = []
        for prev in _backward_steps(predecessors.get(node)):
            if prev == source:
                children.append((None, (source,) + suffix, None))
            elif prev in on_path:
                pruned.append(prev)
            else:
                children.append((prev, (prev,) + suffix, on_path | {prev}))
        stack.extend(reversed(children))

    if not found and pruned:
        raise CyclicPredecessors(pruned[0])
    return found


def _best_weights(graph: Graph, mode: Mode) -> Dict[Tuple[Node, Node], float]:
    best: Dict[Tuple[Node, Node], float] = {}
    for e in graph.edges:
        key = (e.source, e.target)
        best[key] = mode.better(best[key], e.weight) if key in best else e.weight
    return best


def path_weight(graph: Graph, path: Sequence[Node], mode: Mode = Mode.MINIMIZE) -> float:
    """Sum edge weights along consecutive pairs, taking the best parallel edge for ``mode``."""
    mode = Mode.parse(mode)
    best = _best_weights(graph, mode)
    total = 0.0
    for u, v in zip(path, path[1:]):
        if (u, v) not in best:
            raise ValueError(f"no edge {u!r}->{v!r} in graph")
        total += best[(u, v)]
    return total


def distinct_nodes(paths: Iterable[Sequence[Node]]) -> List[Node]:
    """Nodes appearing on any of ``paths``, in first-seen order (for highlighting)."""
    out: Dict[Node, None] = {}
    for p in paths:
        for n in p:
            out.setdefault(n, None)
    return list(out)
