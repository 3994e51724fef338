from __future__ import annotations

from typing import Hashable


class BellmanTraceError(Exception):
    """Base class for errors raised by this package."""


class InvalidSource(BellmanTraceError, ValueError):
    """The source node is not part of the graph; nothing was computed."""

    def __init__(self, source: Hashable):
        super().__init__(f"source node {source!r} is not in the graph")
        self.source = source


class CyclicPredecessors(BellmanTraceError, RuntimeError):
    """A backward walk over a predecessor map came back to a node it already visited."""

    def __init__(self, node: Hashable):
        super().__init__(f"predecessor chain loops back to {node!r}")
        self.node = node
