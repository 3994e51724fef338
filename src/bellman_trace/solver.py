from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .config import load_settings
from .engine import RelaxationResult, StepSink, TraceRecord, relax
from .errors import InvalidSource
from .graph import UNREACHED, Graph, Mode, Node, Value
from .logger import log_event
from .paths import find_all_optimal_paths, reconstruct_single_path


@dataclass
class PathReport:
    ok: bool
    reason: str
    path: List[Node] = field(default_factory=list)
    paths: List[List[Node]] = field(default_factory=list)
    cost: Value = UNREACHED
    result: Optional[RelaxationResult] = None
    trace: List[TraceRecord] = field(default_factory=list)
    paths_truncated: bool = False


def solve(
    graph: Graph,
    source: Node,
    target: Optional[Node] = None,
    mode: Mode = Mode.MINIMIZE,
    on_step: Optional[StepSink] = None,
    log: bool = True,
    max_paths: Optional[int] = None,
) -> PathReport:
    """Run the relaxation and, when it is safe, reconstruct paths to ``target``.

    Path reconstruction is skipped when an improving cycle was detected, since the
    predecessor map may then loop. With no target only the run itself is reported.
    At most ``max_paths`` optimal paths are listed (default: BFT_MAX_PATHS);
    ``paths_truncated`` tells whether more exist.
    """
    mode = Mode.parse(mode)
    if max_paths is None:
        max_paths = load_settings().max_paths
    max_paths = max(1, max_paths)
    trace: List[TraceRecord] = []

    def sink(record: TraceRecord) -> None:
        trace.append(record)
        if on_step is not None:
            on_step(record)

    try:
        result = relax(graph, source, mode, on_step=sink)
    except InvalidSource as exc:
        report = PathReport(False, "invalid source")
        if log:
            log_event("solve", ok=False, reason=report.reason, error=str(exc))
        return report

    report = _paths_report(graph, result, target, trace, max_paths)
    if log:
        log_event(
            "solve",
            ok=report.ok,
            reason=report.reason,
            mode=mode.value,
            source=source,
            target=target,
            iterations=result.iterations,
            path=report.path,
            paths=len(report.paths),
            paths_truncated=report.paths_truncated,
            cost=report.cost,
        )
    return report


def _paths_report(
    graph: Graph, result: RelaxationResult, target: Optional[Node], trace: List[TraceRecord], max_paths: int
) -> PathReport:
    if result.has_cycle:
        return PathReport(False, f"{result.mode.cycle_kind} cycle detected", result=result, trace=trace)
    if target is None:
        return PathReport(True, "ok", result=result, trace=trace)
    if target not in graph:
        return PathReport(False, "invalid target", result=result, trace=trace)

    path = reconstruct_single_path(result.predecessors, result.source, target)
    if path is None:
        return PathReport(False, "unreachable", result=result, trace=trace)
    # one extra path tells whether the list was cut short
    paths = find_all_optimal_paths(result.optimal_predecessors, result.source, target, limit=max_paths + 1)
    truncated = len(paths) > max_paths
    return PathReport(
        True,
        "ok",
        path=path,
        paths=paths[:max_paths] or [path],
        cost=result.values[target],
        result=result,
        trace=trace,
        paths_truncated=truncated,
    )
