from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from .headers import decode
from .names import match_score, normalize_table_name


@dataclass(frozen=True)
class Game:
    id: int
    table_name: str
    title: str
    pgn: str
    created_at: str

    @property
    def headers(self) -> dict[str, str]:
        return decode(self.pgn)


def _row_to_game(row: sqlite3.Row) -> Game:
    return Game(
        id=row["id"],
        table_name=row["table_name"],
        title=row["title"],
        pgn=row["pgn"],
        created_at=row["created_at"],
    )


def add_game(conn: sqlite3.Connection, *, table_name: str, title: str, pgn: str) -> Game:
    if not title or not title.strip():
        raise ValueError("Title is required.")
    if not pgn or not pgn.strip():
        raise ValueError("Cannot add an empty game. Please make at least one move.")

    cur = conn.execute(
        """
        INSERT INTO games (table_name, title, pgn) VALUES (?, ?, ?)
        RETURNING id, table_name, title, pgn, created_at
        """,
        (normalize_table_name(table_name), title.strip(), pgn),
    )
    row = cur.fetchone()
    assert row is not None
    return _row_to_game(row)


def get_game(conn: sqlite3.Connection, game_id: int) -> Game | None:
    cur = conn.execute(
        "SELECT id, table_name, title, pgn, created_at FROM games WHERE id = ?",
        (game_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return _row_to_game(row)


def list_games(conn: sqlite3.Connection, table_name: str) -> list[Game]:
    """Games of one tournament table, newest first."""
    cur = conn.execute(
        """
        SELECT id, table_name, title, pgn, created_at
        FROM games
        WHERE table_name = ?
        ORDER BY created_at DESC, id DESC
        """,
        (normalize_table_name(table_name),),
    )
    return [_row_to_game(r) for r in cur.fetchall()]


def delete_game(conn: sqlite3.Connection, game_id: int) -> bool:
    cur = conn.execute("DELETE FROM games WHERE id = ?", (game_id,))
    return cur.rowcount > 0


def find_games_by_player(
    conn: sqlite3.Connection,
    name: str,
    *,
    table_name: str | None = None,
    threshold: float = 0.85,
) -> list[tuple[Game, float]]:
    """Games where White or Black fuzzily matches ``name``, best match first."""
    games = list_games(conn, table_name) if table_name else [
        _row_to_game(r)
        for r in conn.execute(
            "SELECT id, table_name, title, pgn, created_at FROM games ORDER BY id ASC"
        ).fetchall()
    ]

    hits: list[tuple[Game, float]] = []
    for g in games:
        headers = g.headers
        score = max(match_score(name, headers.get("White", "")), match_score(name, headers.get("Black", "")))
        if score >= threshold:
            hits.append((g, score))
    hits.sort(key=lambda h: (-h[1], h[0].id))
    return hits
