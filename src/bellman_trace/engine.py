from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .errors import InvalidSource
from .graph import UNREACHED, Edge, Graph, Mode, Node, Value, is_reached


@dataclass(frozen=True)
class EdgeUpdate:
    source: Node
    target: Node
    weight: float
    old_value: Value
    new_value: float


@dataclass(frozen=True)
class TraceRecord:
    iteration: int
    values: Dict[Node, Value]
    updates: Tuple[EdgeUpdate, ...]

    @property
    def changed(self) -> bool:
        return bool(self.updates)


StepSink = Callable[[TraceRecord], None]


@dataclass
class RelaxationResult:
    mode: Mode
    source: Node
    values: Dict[Node, Value]
    predecessors: Dict[Node, Optional[Node]]
    has_cycle: bool
    optimal_predecessors: Dict[Node, List[Node]] = field(default_factory=dict)
    iterations: int = 0

    @property
    def has_negative_cycle(self) -> bool:
        return self.has_cycle and self.mode is Mode.MINIMIZE

    @property
    def has_positive_cycle(self) -> bool:
        return self.has_cycle and self.mode is Mode.MAXIMIZE


def _candidate(values: Dict[Node, Value], edge: Edge) -> Value:
    base = values[edge.source]
    if not is_reached(base):
        return UNREACHED
    return base + edge.weight


def relax(graph: Graph, source: Node, mode: Mode = Mode.MINIMIZE, on_step: Optional[StepSink] = None) -> RelaxationResult:
    """Bellman-Ford relaxation with predecessor tracking, step trace and cycle detection.

    Runs at most |V|-1 passes over the edges in declared order, stopping after the
    first pass that changes nothing. Each executed pass is reported to ``on_step``
    as a TraceRecord. A final read-only scan sets ``has_cycle`` when some edge still
    improves its target (negative cycle for MINIMIZE, positive for MAXIMIZE); the
    values are then a snapshot, not a fixed point.
    """
    mode = Mode.parse(mode)
    if source not in graph:
        raise InvalidSource(source)

    nodes = graph.nodes
    edges = graph.edges
    values: Dict[Node, Value] = {n: UNREACHED for n in nodes}
    pred: Dict[Node, Optional[Node]] = {n: None for n in nodes}
    values[source] = 0.0

    iterations = 0
    for i in range(len(nodes) - 1):
        updates: List[EdgeUpdate] = []
        for e in edges:
            cand = _candidate(values, e)
            if mode.improves(cand, values[e.target]):
                old = values[e.target]
                values[e.target] = cand
                pred[e.target] = e.source
                updates.append(EdgeUpdate(e.source, e.target, e.weight, old, cand))
        iterations = i + 1
        if on_step is not None:
            on_step(TraceRecord(iteration=iterations, values=dict(values), updates=tuple(updates)))
        if not updates:
            break

    has_cycle = any(mode.improves(_candidate(values, e), values[e.target]) for e in edges)

    optimal: Dict[Node, List[Node]] = {n: [] for n in nodes}
    if not has_cycle:
        for e in edges:
            if e.target == source:
                continue
            cand = _candidate(values, e)
            if is_reached(cand) and cand == values[e.target] and e.source not in optimal[e.target]:
                optimal[e.target].append(e.source)

    return RelaxationResult(
        mode=mode,
        source=source,
        values=values,
        predecessors=pred,
        has_cycle=has_cycle,
        optimal_predecessors=optimal,
        iterations=iterations,
    )


def relax_with_trace(graph: Graph, source: Node, mode: Mode = Mode.MINIMIZE) -> Tuple[RelaxationResult, List[TraceRecord]]:
    trace: List[TraceRecord] = []
    result = relax(graph, source, mode, on_step=trace.append)
    return result, trace


def minimize(graph: Graph, source: Node, on_step: Optional[StepSink] = None) -> RelaxationResult:
    return relax(graph, source, Mode.MINIMIZE, on_step)


def maximize(graph: Graph, source: Node, on_step: Optional[StepSink] = None) -> RelaxationResult:
    return relax(graph, source, Mode.MAXIMIZE, on_step)


def detect_any_improving_cycle(graph: Graph, mode: Mode = Mode.MINIMIZE) -> bool:
    # Super-source technique: every node starts at 0 as if fed by a zero-weight edge
    mode = Mode.parse(mode)
    nodes = graph.nodes
    edges = graph.edges
    dist: Dict[Node, float] = {n: 0.0 for n in nodes}

    # The virtual source adds one node, so |V| passes instead of |V|-1
    for _ in range(len(nodes)):
        changed = False
        for e in edges:
            cand = dist[e.source] + e.weight
            if mode.improves(cand, dist[e.target]):
                dist[e.target] = cand
                changed = True
        if not changed:
            return False

    return any(mode.improves(dist[e.source] + e.weight, dist[e.target]) for e in edges)
