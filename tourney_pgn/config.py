from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    db_path: Path
    default_table: str
    workers: int
    log_level: str


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from e


def _level_env(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    # getLevelName maps known names to their numeric level, anything else to a string.
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name such as DEBUG or INFO, got {raw!r}.")
    return level


def get_settings() -> Settings:
    db_path = Path(os.environ.get("TOURNEY_PGN_DB_PATH", "data/tourney_pgn.sqlite3"))
    default_table = os.environ.get("TOURNEY_PGN_TABLE", "tournament_games")
    workers = _int_env("TOURNEY_PGN_WORKERS", os.cpu_count() or 1)
    log_level = _level_env("TOURNEY_PGN_LOG_LEVEL", "WARNING")
    return Settings(db_path=db_path, default_table=default_table, workers=workers, log_level=log_level)
