from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TODOLIST"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return None
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path
    data_file: str | None
    log_level: str
    log_file: Path | None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ

    data_dir = _env(env, _k("DATA_DIR"))
    log_file = _env(env, _k("LOG_FILE"))
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else Path("."),
        # no fallback filename: an unset value is rejected by the store
        data_file=_env(env, _k("FILE")),
        log_level=(_env(env, _k("LOG_LEVEL")) or "WARNING").upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
    )
