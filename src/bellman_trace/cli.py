from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .graph import Graph, Mode
from .logger import log_event
from .render import format_path, format_trace, format_value, format_values
from .samples import SAMPLES, get_sample, list_samples
from .solver import PathReport, solve


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bellman-trace", description="Bellman-Ford relaxation with a per-pass trace")
    sub = p.add_subparsers(dest="cmd", required=True)

    run = sub.add_parser("run", help="Relax a graph given on the command line")
    run.add_argument("--nodes", nargs="+", required=True, help="Node labels, e.g., x1 x2 x3")
    run.add_argument("--edges", nargs="+", required=True, help="Edges of form src:dst:weight, e.g., x1:x2:5 x2:x3:-1")
    run.add_argument("--source", required=True, help="Source node label")
    _add_common(run)

    sample = sub.add_parser("sample", help="Relax one of the built-in sample graphs")
    sample.add_argument("name", choices=sorted(SAMPLES), help="Sample graph name")
    sample.add_argument("--source", help="Override the sample's source node")
    _add_common(sample)

    sub.add_parser("samples", help="List the built-in sample graphs")
    return p


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--target", help="Target node label for path reconstruction")
    p.add_argument("--mode", choices=["min", "max"], default="min", help="Shortest (min) or longest (max) values")
    p.add_argument("--trace", action="store_true", help="Print the per-iteration table")
    p.add_argument("--all-paths", action="store_true", help="Print every optimal path to the target")
    p.add_argument("--max-paths", type=int, default=None, help="Cap on listed optimal paths (default: BFT_MAX_PATHS)")


def parse_edges(edge_specs: List[str]):
    edges = []
    for spec in edge_specs:
        try:
            src, dst, w = spec.rsplit(":", 2)
            edges.append((src, dst, float(w)))
        except ValueError:
            raise SystemExit(f"Invalid edge spec '{spec}'. Expected src:dst:weight")
    return edges


def _print_report(graph: Graph, report: PathReport, target: Optional[str], args: argparse.Namespace) -> None:
    result = report.result
    if result is None:
        print(f"error: {report.reason}")
        return
    if args.trace:
        print(format_trace(report.trace, graph.nodes))
        print()
    label = "Shortest distances" if result.mode is Mode.MINIMIZE else "Maximum values"
    print(f"{label} from {result.source}: {format_values(result.values)}")
    if result.has_cycle:
        print(f"Warning: {report.reason}; values are not final")
        return
    if target is None:
        return
    if not report.ok:
        print(f"No path from {result.source} to {target}: {report.reason}")
        return
    print(f"Path: {format_path(report.path)} (total: {format_value(report.cost)})")
    if args.all_paths:
        print(f"All optimal paths ({len(report.paths)}):")
        for p in report.paths:
            print(f"  {format_path(p)}")
        if report.paths_truncated:
            print("  ... more optimal paths not shown")


def _run(graph: Graph, source: str, args: argparse.Namespace) -> int:
    report = solve(graph, source, args.target, Mode.parse(args.mode), log=False, max_paths=args.max_paths)
    _print_report(graph, report, args.target, args)
    log_event("cli_run", cmd=args.cmd, ok=report.ok, reason=report.reason, path=report.path, cost=report.cost)
    return 0 if report.ok else 2


def cmd_run(args: argparse.Namespace) -> int:
    try:
        graph = Graph.from_edges(args.nodes, parse_edges(args.edges))
    except ValueError as exc:
        raise SystemExit(f"Invalid graph: {exc}")
    return _run(graph, args.source, args)


def cmd_sample(args: argparse.Namespace) -> int:
    sample = get_sample(args.name)
    if args.target is None:
        args.target = sample.target
    return _run(sample.graph, args.source or sample.source, args)


def cmd_samples(args: argparse.Namespace) -> int:
    for s in list_samples():
        print(f"{s.name}: {s.description} (source {s.source}, target {s.target})")
    return 0


def main(argv: List[str] | None = None) -> int:
    p = build_arg_parser()
    args = p.parse_args(argv)
    if args.cmd == "run":
        return cmd_run(args)
    if args.cmd == "sample":
        return cmd_sample(args)
    if args.cmd == "samples":
        return cmd_samples(args)
    return 0

if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
