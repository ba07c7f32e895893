"""HTTP API for previewing, canonicalizing and storing tournament games."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from tourney_pgn.canonical import MetadataOverride, canonicalize, merge_headers
from tourney_pgn.config import get_settings
from tourney_pgn.db import Db, init_db
from tourney_pgn.games import add_game, delete_game, list_games
from tourney_pgn.headers import decode, strip_headers
from tourney_pgn.ingest import ingest
from tourney_pgn.names import TABLE_NAME_RE
from tourney_pgn.repair import repair
from tourney_pgn.segment import segment
from tourney_pgn.titles import derive_title
from tourney_pgn.validate import validate

logger = logging.getLogger(__name__)


class PgnRequest(BaseModel):
    pgn: str


class OverridesModel(BaseModel):
    event: str | None = None
    date: str | None = None
    white: str | None = None
    black: str | None = None
    result: str | None = None
    elo_white: str | None = None
    elo_black: str | None = None
    time_control: str | None = None
    opening: str | None = None


class CanonicalRequest(BaseModel):
    moves: str = ""
    pgn: str = ""  # optional pasted PGN whose headers act as fallbacks
    overrides: OverridesModel = Field(default_factory=OverridesModel)


class AddGamesRequest(BaseModel):
    pgn: str
    title: str | None = None
    canonical: bool = False


class PreviewGame(BaseModel):
    index: int
    title: str
    valid: bool
    error: str | None
    headers: dict[str, str]


class CanonicalResponse(BaseModel):
    pgn: str
    title: str
    headers: dict[str, str]


def _db() -> Db:
    settings = get_settings()
    return Db(settings.db_path)


def _check_table(table_name: str) -> str:
    if not TABLE_NAME_RE.match(table_name):
        raise HTTPException(status_code=400, detail={"error": "Invalid tournament table name"})
    return table_name


app = FastAPI(title="Tourney PGN", description="Split, validate and store tournament games")


@app.get("/api/health")
async def api_health() -> dict:
    """Health check; verifies API is reachable."""
    return {"status": "ok"}


@app.post("/api/pgn/preview", response_model=list[PreviewGame])
async def api_preview(req: PgnRequest) -> list[PreviewGame]:
    """Split pasted text into games and report title and validity of each."""
    out: list[PreviewGame] = []
    for i, block in enumerate(segment(req.pgn), start=1):
        result = validate(block)
        headers = decode(repair(block))
        out.append(
            PreviewGame(
                index=i,
                title=derive_title(headers),
                valid=result.ok,
                error=result.error.reason if result.error else None,
                headers=headers,
            )
        )
    return out


@app.post("/api/pgn/canonical", response_model=CanonicalResponse)
async def api_canonical(req: CanonicalRequest) -> CanonicalResponse:
    """Merge form fields over the pasted headers and return the canonical PGN."""
    pasted = repair(req.pgn)
    parsed = decode(pasted)
    moves = req.moves if req.moves.strip() else strip_headers(pasted)
    overrides = MetadataOverride.from_mapping(req.overrides.model_dump())
    merged = merge_headers(overrides, parsed)
    return CanonicalResponse(
        pgn=canonicalize(moves, overrides, parsed),
        title=derive_title(merged),
        headers=merged,
    )


@app.get("/api/tournaments/{table_name}/games")
async def api_list_games(table_name: str) -> list[dict]:
    """Games of one tournament, newest first, with player fields pulled from the PGN."""
    db = _db()
    init_db(db)
    with db.connect() as conn:
        games = list_games(conn, _check_table(table_name))
    out = []
    for g in games:
        h = g.headers
        out.append(
            {
                "id": g.id,
                "title": g.title,
                "pgn": g.pgn,
                "white": h.get("White") or "Unknown",
                "black": h.get("Black") or "Unknown",
                "event": h.get("Event") or "",
                "result": h.get("Result") or "*",
            }
        )
    return out


@app.post("/api/tournaments/{table_name}/games")
async def api_add_games(table_name: str, req: AddGamesRequest) -> dict:
    """Ingest one or many games; valid ones are stored, failures are reported per game."""
    _check_table(table_name)
    report = ingest(req.pgn, canonical=req.canonical, workers=get_settings().workers)
    if report.error is not None:
        raise HTTPException(status_code=400, detail={"error": report.error.reason, "kind": report.error.kind.value})

    single_title = (req.title or "").strip() if len(report.games) == 1 and not report.failures else ""
    added = []
    db = _db()
    init_db(db)
    with db.connect() as conn:
        for g in report.games:
            stored = add_game(conn, table_name=table_name, title=single_title or g.title, pgn=g.pgn)
            added.append({"id": stored.id, "index": g.index, "title": stored.title})
    logger.info("Stored %d game(s) in %s", len(added), table_name)

    return {
        "added": added,
        "failures": [
            {"index": f.index, "title": f.title, "error": f.error.reason, "message": f.message}
            for f in report.failures
        ],
    }


@app.delete("/api/games/{game_id:int}")
async def api_delete_game(game_id: int) -> dict:
    db = _db()
    init_db(db)
    with db.connect() as conn:
        deleted = delete_game(conn, game_id)
    if not deleted:
        raise HTTPException(status_code=404, detail={"error": f"No game with id {game_id}"})
    return {"success": True}


def main() -> None:
    uvicorn.run(
        "web.server:app",
        host="127.0.0.1",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
