from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List

from .graph import Graph, Node


@dataclass
class Sample:
    name: str
    description: str
    graph: Graph
    source: Node
    target: Node


def _xs(n: int) -> List[str]:
    return [f"x{i}" for i in range(1, n + 1)]


def _basic() -> Sample:
    g = Graph.from_edges(_xs(6), [
        ("x1", "x2", 5), ("x1", "x3", 3), ("x2", "x4", 2), ("x3", "x2", 1),
        ("x3", "x4", 6), ("x3", "x5", 7), ("x4", "x6", 4), ("x5", "x6", 2),
    ])
    return Sample("basic", "6 nodes, 8 edges, non-negative weights", g, "x1", "x6")


def _large() -> Sample:
    g = Graph.from_edges(_xs(16), [
        ("x1", "x2", 4), ("x1", "x3", 2), ("x2", "x4", 5), ("x2", "x5", 3),
        ("x3", "x5", 1), ("x3", "x6", 6), ("x4", "x7", 2), ("x5", "x7", 4),
        ("x5", "x8", 3), ("x6", "x8", 5), ("x7", "x9", 1), ("x7", "x10", 7),
        ("x8", "x10", 2), ("x8", "x11", 3), ("x9", "x12", 4), ("x10", "x12", 6),
        ("x10", "x13", 2), ("x11", "x13", 5), ("x12", "x14", 3), ("x13", "x14", 4),
        ("x13", "x15", 1), ("x14", "x16", 2), ("x15", "x16", 5),
    ])
    return Sample("large", "16 nodes, 23 edges", g, "x1", "x16")


def _stepwise() -> Sample:
    g = Graph.from_edges(_xs(5), [
        ("x1", "x2", 6), ("x1", "x3", 4), ("x2", "x4", 2), ("x3", "x2", -3),
        ("x3", "x4", 8), ("x3", "x5", 5), ("x4", "x5", 3),
    ])
    return Sample("stepwise", "5 nodes with a negative edge, no cycle", g, "x1", "x5")


def _negative_cycle() -> Sample:
    g = Graph.from_edges(["a", "b", "c"], [("a", "b", 1), ("b", "c", 1), ("c", "b", -3)])
    return Sample("negative-cycle", "b <-> c forms a cycle of weight -2", g, "a", "c")


SAMPLES: Dict[str, Callable[[], Sample]] = {
    "basic": _basic,
    "large": _large,
    "stepwise": _stepwise,
    "negative-cycle": _negative_cycle,
}


def get_sample(name: str) -> Sample:
    """Build a fresh copy of a named sample graph; raises KeyError for unknown names."""
    try:
        factory = SAMPLES[name]
    except KeyError:
        raise KeyError(f"unknown sample {name!r}; choose from {', '.join(SAMPLES)}") from None
    return factory()


def list_samples() -> List[Sample]:
    return [factory() for factory in SAMPLES.values()]
