from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path


SCHEMA = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS games (
  id INTEGER PRIMARY KEY,
  table_name TEXT NOT NULL,              -- tournament table, e.g. 'spring_open_2025_games'
  title TEXT NOT NULL,
  pgn TEXT NOT NULL,                     -- canonical or repaired PGN text
  created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_games_table_name ON games(table_name);
"""


@dataclass(frozen=True)
class Db:
    path: Path

    def connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn


def init_db(db: Db) -> None:
    with db.connect() as conn:
        conn.executescript(SCHEMA)
