"""Tests for the SQLite game store."""

import sqlite3
from pathlib import Path

import pytest

from tourney_pgn.db import Db, init_db
from tourney_pgn.games import add_game, delete_game, find_games_by_player, get_game, list_games


@pytest.fixture
def conn(tmp_path: Path) -> sqlite3.Connection:
    db = Db(tmp_path / "nested" / "games.sqlite3")
    init_db(db)
    return db.connect()


class TestGameStore:
    def test_add_and_get(self, conn: sqlite3.Connection, scholars_mate: str) -> None:
        game = add_game(conn, table_name="spring_open_2025", title=" Round 1 ", pgn=scholars_mate)
        assert game.id > 0
        assert game.title == "Round 1"
        assert get_game(conn, game.id) == game
        assert game.headers["White"] == "Smith, John"

    def test_table_name_normalized(self, conn: sqlite3.Connection, scholars_mate: str) -> None:
        game = add_game(conn, table_name="Spring Open 2025", title="R1", pgn=scholars_mate)
        assert game.table_name == "spring_open_2025"
        assert list_games(conn, "spring_open_2025") == [game]

    @pytest.mark.parametrize(
        "title,pgn,message",
        [
            ("", "1. e4 *", "Title is required."),
            ("   ", "1. e4 *", "Title is required."),
            ("R1", "  ", "Cannot add an empty game"),
        ],
    )
    def test_required_fields(self, conn: sqlite3.Connection, title: str, pgn: str, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            add_game(conn, table_name="t", title=title, pgn=pgn)

    def test_list_newest_first_and_per_table(
        self, conn: sqlite3.Connection, scholars_mate: str, fools_mate: str
    ) -> None:
        first = add_game(conn, table_name="open", title="A", pgn=scholars_mate)
        second = add_game(conn, table_name="open", title="B", pgn=fools_mate)
        add_game(conn, table_name="blitz", title="C", pgn=fools_mate)
        assert [g.id for g in list_games(conn, "open")] == [second.id, first.id]
        assert [g.title for g in list_games(conn, "blitz")] == ["C"]

    def test_delete(self, conn: sqlite3.Connection, scholars_mate: str) -> None:
        game = add_game(conn, table_name="open", title="A", pgn=scholars_mate)
        assert delete_game(conn, game.id) is True
        assert get_game(conn, game.id) is None
        assert delete_game(conn, game.id) is False

    def test_find_by_player(self, conn: sqlite3.Connection, scholars_mate: str, fools_mate: str) -> None:
        smith = add_game(conn, table_name="open", title="A", pgn=scholars_mate)
        add_game(conn, table_name="open", title="B", pgn=fools_mate)

        hits = find_games_by_player(conn, "John Smith")
        assert [(g.id, score) for g, score in hits] == [(smith.id, 0.96)]

        assert find_games_by_player(conn, "Otieno", table_name="open")[0][1] == 1.0
        assert find_games_by_player(conn, "Carlsen") == []
