"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

SCHOLARS_MATE = """[Event "Spring Open 2025"]
[Site "Nairobi"]
[Date "2025.03.01"]
[Round "1"]
[White "Smith, John"]
[Black "Lee, Ann"]
[Result "1-0"]

1. e4 e5 2. Qh5 Nc6 3. Bc4 Nf6 4. Qxf7# 1-0"""

FOOLS_MATE = """[Event "Spring Open 2025"]
[Site "Nairobi"]
[Date "2025.03.01"]
[Round "2"]
[White "Jones"]
[Black "Otieno"]
[Result "0-1"]

1. f3 e5 2. g4 Qh4# 0-1"""

QUIET_DRAW = """[Event "rated blitz game"]
[Site "https://lichess.org/abcd1234"]
[Date "2025.03.02"]
[White "Wanjiru"]
[Black "Kamau"]
[Result "1/2-1/2"]
[UTCDate "2025.03.02"]
[TimeControl "180+2"]

1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 1/2-1/2"""


@pytest.fixture
def scholars_mate() -> str:
    return SCHOLARS_MATE


@pytest.fixture
def fools_mate() -> str:
    return FOOLS_MATE


@pytest.fixture
def quiet_draw() -> str:
    return QUIET_DRAW


@pytest.fixture
def three_games() -> list[str]:
    return [SCHOLARS_MATE, FOOLS_MATE, QUIET_DRAW]


@pytest.fixture
def db_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings at a throwaway SQLite file."""
    db_path = tmp_path / "games.sqlite3"
    monkeypatch.setenv("TOURNEY_PGN_DB_PATH", str(db_path))
    monkeypatch.setenv("TOURNEY_PGN_TABLE", "spring_open_2025")
    monkeypatch.setenv("TOURNEY_PGN_WORKERS", "2")
    return db_path
