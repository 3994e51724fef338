from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, Iterable, List, Sequence, Tuple, Union


Node = Hashable


class Unreached:
    """Tagged "no value yet" marker.

    Reads as +inf under MINIMIZE and -inf under MAXIMIZE; never takes part in arithmetic.
    """

    _instance: "Unreached | None" = None

    def __new__(cls) -> "Unreached":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNREACHED"

    def __str__(self) -> str:
        return "∞"

    def __reduce__(self):
        return (Unreached, ())


UNREACHED = Unreached()

Value = Union[float, Unreached]


def is_reached(value: Value) -> bool:
    return value is not UNREACHED


class Mode(str, Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"

    @classmethod
    def parse(cls, text: Union[str, "Mode"]) -> "Mode":
        if isinstance(text, Mode):
            return text
        key = str(text).strip().lower()
        if key in ("min", "minimize", "shortest"):
            return cls.MINIMIZE
        if key in ("max", "maximize", "longest"):
            return cls.MAXIMIZE
        raise ValueError(f"Unknown mode: {text!r} (expected 'min' or 'max')")

    def improves(self, candidate: Value, current: Value) -> bool:
        """Strict comparison in this mode's direction; any number beats UNREACHED."""
        if candidate is UNREACHED:
            return False
        if current is UNREACHED:
            return True
        if self is Mode.MINIMIZE:
            return candidate < current
        return candidate > current

    def better(self, a: float, b: float) -> float:
        return min(a, b) if self is Mode.MINIMIZE else max(a, b)

    @property
    def cycle_kind(self) -> str:
        return "negative" if self is Mode.MINIMIZE else "positive"


@dataclass(frozen=True)
class Edge:
    source: Node
    target: Node
    weight: float


class Graph:
    """Directed weighted graph: an ordered node set plus an ordered edge list.

    - Nodes: hashable labels (e.g., "x1", "x2"); insertion order is kept for display
    - Edges: (source, target, weight). Parallel edges and self-loops are kept as
      separate entries; edge order is the scan order of every relaxation pass.
    """

    def __init__(self, nodes: Iterable[Node] = ()):
        self._nodes: Dict[Node, None] = {}
        self._edges: List[Edge] = []
        for n in nodes:
            self.add_node(n)

    @classmethod
    def from_edges(cls, nodes: Iterable[Node], edges: Iterable[Sequence]) -> "Graph":
        g = cls(nodes)
        for item in edges:
            if isinstance(item, Edge):
                g.add_edge(item.source, item.target, item.weight)
            else:
                src, dst, w = item
                g.add_edge(src, dst, w)
        return g

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def add_node(self, node: Node) -> None:
        if node in self._nodes:
            raise ValueError(f"duplicate node {node!r}")
        self._nodes[node] = None

    def add_edge(self, source: Node, target: Node, weight: float) -> Edge:
        if source not in self._nodes or target not in self._nodes:
            raise ValueError("source/target must be existing nodes")
        w = float(weight)
        if not math.isfinite(w):
            raise ValueError(f"edge weight must be finite, got {weight!r}")
        edge = Edge(source, target, w)
        self._edges.append(edge)
        return edge

    def __contains__(self, node: object) -> bool:
        return node in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, edges={len(self._edges)})"
