from __future__ import annotations

import json
import os
import sys
from datetime import datetime, timezone
from typing import Any, Mapping

from .config import Settings, load_settings
from .graph import Unreached


REDACT_KEYS = frozenset({"token", "auth", "authorization", "password", "secret", "api_key"})
LOG_FILE = "events.log"


def _scrub(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: "<redacted>" if str(k).lower() in REDACT_KEYS else _scrub(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_scrub(v) for v in value]
    return value


def _encode(obj: Any) -> Any:
    # UNREACHED keeps its display form in the log; anything else exotic is logged by repr
    return str(obj) if isinstance(obj, Unreached) else repr(obj)


def _append_line(line: str, settings: Settings) -> None:
    """Append to <log_dir>/events.log, shifting events.log.N up when it grows past log_max_bytes."""
    path = os.path.join(settings.log_dir, LOG_FILE)
    try:
        os.makedirs(settings.log_dir, exist_ok=True)
        if os.path.exists(path) and os.path.getsize(path) > settings.log_max_bytes:
            names = [path] + [f"{path}.{i}" for i in range(1, settings.log_backups + 1)]
            if os.path.exists(names[-1]):
                os.remove(names[-1])
            for newer, older in reversed(list(zip(names, names[1:]))):
                if os.path.exists(newer):
                    os.replace(newer, older)
        with open(path, "a", encoding="utf-8") as f:
            f.write(line + "\n")
    except OSError:
        # a broken log file must not break a run
        pass


def log_event(event: str, **fields: Any) -> str:
    """Emit one JSON line to stdout and the rotating events.log; returns the line."""
    settings = load_settings()
    record = {"ts": datetime.now(timezone.utc).isoformat(), "event": event, **_scrub(fields)}
    line = json.dumps(record, ensure_ascii=False, default=_encode)
    if settings.log_stdout:
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    _append_line(line, settings)
    return line
