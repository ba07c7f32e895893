"""Tests for the HTTP API."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from web.server import app

ILLEGAL = """[Event "Club Night"]
[White "Mwangi"]
[Black "Achieng"]

1. e4 e5 2. Ke3 *"""

GAMES_URL = "/api/tournaments/spring_open_2025/games"


@pytest.fixture
def client(db_env: Path) -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_preview(client: TestClient, scholars_mate: str, quiet_draw: str) -> None:
    r = client.post("/api/pgn/preview", json={"pgn": "\n\n".join([scholars_mate, ILLEGAL, quiet_draw])})
    assert r.status_code == 200
    body = r.json()
    assert [g["index"] for g in body] == [1, 2, 3]
    assert [g["valid"] for g in body] == [True, False, True]
    assert body[1]["error"]
    assert body[2]["title"] == "Wanjiru vs Kamau (2025.03.02)"
    assert body[0]["headers"]["Round"] == "1"


class TestCanonical:
    def test_moves_and_overrides(self, client: TestClient) -> None:
        r = client.post(
            "/api/pgn/canonical",
            json={"moves": "1. e4 e5 *", "overrides": {"white": "Achieng", "black": "Mwangi"}},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["title"] == "Achieng vs Mwangi"
        assert body["pgn"].startswith('[Event ""]\r\n')
        assert body["pgn"].endswith("\r\n\r\n1. e4 e5 *")

    def test_pasted_headers_are_fallbacks(self, client: TestClient, quiet_draw: str) -> None:
        r = client.post(
            "/api/pgn/canonical",
            json={"pgn": quiet_draw, "overrides": {"event": "Spring Open 2025", "black": " "}},
        )
        body = r.json()
        assert body["headers"]["Event"] == "Spring Open 2025"
        assert body["headers"]["Black"] == "Kamau"
        assert body["title"] == "Spring Open 2025: Wanjiru vs Kamau"
        assert body["pgn"].endswith("1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 1/2-1/2")


class TestTournamentGames:
    def test_add_and_list(self, client: TestClient, three_games: list[str]) -> None:
        r = client.post(GAMES_URL, json={"pgn": "\n\n".join(three_games)})
        assert r.status_code == 200
        body = r.json()
        assert [a["index"] for a in body["added"]] == [1, 2, 3]
        assert body["failures"] == []

        listed = client.get(GAMES_URL).json()
        assert [g["id"] for g in listed] == [3, 2, 1]
        assert listed[0]["white"] == "Wanjiru"
        assert listed[0]["result"] == "1/2-1/2"

    def test_partial_failure(self, client: TestClient, fools_mate: str) -> None:
        r = client.post(GAMES_URL, json={"pgn": fools_mate + "\n\n" + ILLEGAL, "title": "ignored"})
        body = r.json()
        assert [a["title"] for a in body["added"]] == ["Spring Open 2025: Jones vs Otieno"]
        assert body["failures"][0]["index"] == 2
        assert body["failures"][0]["message"].startswith("Game 2 (Club Night: Mwangi vs Achieng): ")

    def test_single_game_title(self, client: TestClient, fools_mate: str) -> None:
        r = client.post(GAMES_URL, json={"pgn": fools_mate, "title": "Board 1"})
        assert r.json()["added"][0]["title"] == "Board 1"

    def test_canonical_storage(self, client: TestClient, fools_mate: str) -> None:
        client.post(GAMES_URL, json={"pgn": fools_mate, "canonical": True})
        stored = client.get(GAMES_URL).json()[0]["pgn"]
        assert "\r\n" in stored
        assert '[Opening ""]' in stored

    def test_empty_input(self, client: TestClient) -> None:
        r = client.post(GAMES_URL, json={"pgn": "  "})
        assert r.status_code == 400
        assert r.json()["detail"] == {"error": "PGN cannot be empty", "kind": "empty_input"}

    @pytest.mark.parametrize("table_name", ["Spring-Open", "UPPER", "with%20space"])
    def test_invalid_table_name(self, client: TestClient, table_name: str) -> None:
        r = client.get(f"/api/tournaments/{table_name}/games")
        assert r.status_code == 400
        assert r.json()["detail"] == {"error": "Invalid tournament table name"}

    def test_tables_are_separate(self, client: TestClient, fools_mate: str) -> None:
        client.post("/api/tournaments/club_night/games", json={"pgn": fools_mate})
        assert client.get(GAMES_URL).json() == []


class TestDelete:
    def test_delete(self, client: TestClient, fools_mate: str) -> None:
        game_id = client.post(GAMES_URL, json={"pgn": fools_mate}).json()["added"][0]["id"]
        assert client.delete(f"/api/games/{game_id}").json() == {"success": True}
        assert client.get(GAMES_URL).json() == []

    def test_missing(self, client: TestClient) -> None:
        assert client.delete("/api/games/999").status_code == 404
