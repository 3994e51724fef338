from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field
from typing import Mapping, Optional


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Settings:
    log_dir: str = ".logs"
    log_max_bytes: int = 1_048_576  # 1MB
    log_backups: int = 5
    log_stdout: bool = True
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    max_nodes: int = 500
    max_paths: int = 100


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Read BFT_* environment variables; malformed numbers fall back to defaults."""
    env = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        log_dir=env.get("BFT_LOG_DIR", defaults.log_dir),
        log_max_bytes=_int_env(env, "BFT_LOG_MAX_BYTES", defaults.log_max_bytes),
        log_backups=_int_env(env, "BFT_LOG_BACKUPS", defaults.log_backups),
        log_stdout=env.get("BFT_LOG_STDOUT", "1").strip().lower() not in ("0", "false", "no", "off"),
        run_id=env.get("BFT_RUN_ID") or defaults.run_id,
        max_nodes=_int_env(env, "BFT_MAX_NODES", defaults.max_nodes),
        max_paths=max(1, _int_env(env, "BFT_MAX_PATHS", defaults.max_paths)),
    )
