from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .engine import TraceRecord
from .graph import Node, Unreached, Value


def format_value(value: Optional[Value]) -> str:
    """Render a distance/value for display: UNREACHED is shown as the infinity symbol."""
    if value is None or isinstance(value, Unreached):
        return "∞"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_path(path: Optional[Sequence[Node]]) -> str:
    if not path:
        return "(no path)"
    return " → ".join(str(n) for n in path)


def format_values(values: Dict[Node, Value]) -> str:
    return ", ".join(f"{n}: {format_value(v)}" for n, v in values.items())


def format_trace(trace: Iterable[TraceRecord], nodes: Sequence[Node]) -> str:
    """Text table: one row per pass, one column per node, updates listed underneath."""
    records = list(trace)
    header = ["iter"] + [str(n) for n in nodes]
    rows: List[List[str]] = [[str(r.iteration)] + [format_value(r.values.get(n)) for n in nodes] for r in records]
    widths = [max(len(row[i]) for row in [header] + rows) for i in range(len(header))]

    def line(cells: List[str]) -> str:
        return " | ".join(c.rjust(w) for c, w in zip(cells, widths))

    out = [line(header), "-+-".join("-" * w for w in widths)]
    out.extend(line(r) for r in rows)
    for r in records:
        out.append("")
        out.append(f"Iteration {r.iteration}:")
        if not r.updates:
            out.append("  no updates, converged")
        for u in r.updates:
            out.append(
                f"  {u.target} = {format_value(u.new_value)} via {u.source} "
                f"(weight {format_value(u.weight)}, was {format_value(u.old_value)})"
            )
    return "\n".join(out)


def to_jsonable(obj: Any) -> Any:
    """Plain JSON-ready structure; UNREACHED becomes None in number positions."""
    if isinstance(obj, Unreached):
        return None
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    return obj


def display_values(values: Dict[Node, Value]) -> Dict[str, str]:
    return {str(n): format_value(v) for n, v in values.items()}
