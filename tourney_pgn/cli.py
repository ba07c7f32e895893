from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .canonical import MetadataOverride, canonicalize
from .config import get_settings
from .db import Db, init_db
from .games import add_game, delete_game, find_games_by_player, get_game, list_games
from .headers import decode, strip_headers
from .ingest import ingest
from .log import setup_logging
from .names import normalize_table_name
from .repair import repair
from .rules import PgnLoadError, load_pgn, mainline_fens, mainline_sans
from .segment import segment
from .titles import derive_title
from .validate import validate


app = typer.Typer(add_completion=False, help="Split, validate and store tournament PGN games.")
console = Console()


def _db() -> Db:
    s = get_settings()
    return Db(s.db_path)


def _table(name: str) -> str:
    try:
        return normalize_table_name(name)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--table") from e


def _read_pgn(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise typer.BadParameter(f"Cannot read {path}: {e.strerror}") from e


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    try:
        settings = get_settings()
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    setup_logging(logging.DEBUG if verbose else settings.log_level)


@app.command()
def init() -> None:
    """Initialize the SQLite database."""
    db = _db()
    init_db(db)
    console.print(f"[green]Initialized[/green] {db.path}")


@app.command()
def split(path: Path = typer.Argument(..., help="PGN file with one or more games")) -> None:
    """Preview how a file splits into games, without storing anything."""
    blocks = segment(_read_pgn(path))
    if not blocks:
        console.print("[yellow]No games found.[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title=f"{len(blocks)} game(s) in {path.name}")
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Valid")
    table.add_column("Problem")
    for i, block in enumerate(blocks, start=1):
        result = validate(block)
        title = derive_title(decode(repair(block)))
        table.add_row(
            str(i),
            escape(title) or "[dim](untitled)[/dim]",
            "[green]yes[/green]" if result.ok else "[red]no[/red]",
            escape(result.error.reason) if result.error else "",
        )
    console.print(table)


@app.command("import")
def import_cmd(
    path: Path = typer.Argument(..., help="PGN file with one or more games"),
    table_name: str | None = typer.Option(None, "--table", help="Tournament table (default: TOURNEY_PGN_TABLE)"),
    canonical: bool = typer.Option(False, "--canonical", help="Store games in canonical header form"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate only, do not insert"),
) -> None:
    """Import every valid game from a (multi-game) PGN file."""
    settings = get_settings()
    target = _table(table_name or settings.default_table)
    report = ingest(_read_pgn(path), canonical=canonical, workers=settings.workers)
    if report.error is not None:
        console.print(f"[red]{escape(report.error.reason)}[/red]")
        raise typer.Exit(code=1)

    if not dry_run and report.games:
        db = Db(settings.db_path)
        init_db(db)
        with db.connect() as conn:
            for g in report.games:
                add_game(conn, table_name=target, title=g.title, pgn=g.pgn)

    for g in report.games:
        verb = "OK (validated)" if dry_run else "ADDED"
        console.print(f"[green]{verb}[/green] {g.index}: {escape(g.title)}")
    for f in report.failures:
        console.print(f"[red]FAIL[/red] {escape(f.message)}")

    console.print(
        f"\nDone. imported={0 if dry_run else len(report.games)} "
        f"valid={len(report.games)} failed={len(report.failures)} table={target}"
    )
    if report.failures and not report.games:
        raise typer.Exit(code=1)


@app.command()
def add(
    path: Path = typer.Argument(..., help="PGN file (or moves only) for a single game"),
    title: str | None = typer.Option(None, "--title", help="Display title (default: derived from headers)"),
    event: str | None = typer.Option(None, "--event"),
    date: str | None = typer.Option(None, "--date"),
    white: str | None = typer.Option(None, "--white"),
    black: str | None = typer.Option(None, "--black"),
    result: str | None = typer.Option(None, "--result"),
    white_elo: str | None = typer.Option(None, "--white-elo"),
    black_elo: str | None = typer.Option(None, "--black-elo"),
    time_control: str | None = typer.Option(None, "--time-control"),
    opening: str | None = typer.Option(None, "--opening"),
    table_name: str | None = typer.Option(None, "--table", help="Tournament table (default: TOURNEY_PGN_TABLE)"),
) -> None:
    """
    Add one game, with form-style metadata overriding the file's own headers.
    The game is stored in canonical form.
    """
    settings = get_settings()
    target = _table(table_name or settings.default_table)
    text = repair(_read_pgn(path))
    check = validate(text)
    if check.error is not None:
        raise typer.BadParameter(f"Invalid PGN: {check.error.reason}")

    overrides = MetadataOverride(
        event=event,
        date=date,
        white=white,
        black=black,
        result=result,
        elo_white=white_elo,
        elo_black=black_elo,
        time_control=time_control,
        opening=opening,
    )
    pgn = canonicalize(strip_headers(text), overrides, decode(text))
    rewritten = validate(pgn)
    if rewritten.error is not None:
        raise typer.BadParameter(f"Canonical form does not load: {rewritten.error.reason}")
    game_title = (title or "").strip() or derive_title(decode(pgn))
    if not game_title:
        raise typer.BadParameter("Title is required (no players in the PGN to derive one from).")

    db = Db(settings.db_path)
    init_db(db)
    with db.connect() as conn:
        game = add_game(conn, table_name=target, title=game_title, pgn=pgn)
    console.print(f"[green]Added[/green] #{game.id} {escape(game.title)}")


@app.command("list")
def list_cmd(
    table_name: str | None = typer.Option(None, "--table", help="Tournament table (default: TOURNEY_PGN_TABLE)"),
) -> None:
    """List stored games, newest first."""
    settings = get_settings()
    target = _table(table_name or settings.default_table)
    db = Db(settings.db_path)
    init_db(db)
    with db.connect() as conn:
        games = list_games(conn, target)

    table = Table(title=f"Games ({target})")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("White")
    table.add_column("Black")
    table.add_column("Result")
    for g in games:
        h = g.headers
        table.add_row(
            str(g.id),
            escape(g.title),
            escape(h.get("White") or "Unknown"),
            escape(h.get("Black") or "Unknown"),
            h.get("Result") or "*",
        )
    console.print(table)


@app.command()
def show(game_id: int) -> None:
    """Show one stored game: headers, moves and final position."""
    db = _db()
    init_db(db)
    with db.connect() as conn:
        game = get_game(conn, game_id)
    if game is None:
        raise typer.BadParameter(f"No game with id {game_id}.")

    console.print(f"[bold]{escape(game.title)}[/bold]  [dim]({game.table_name})[/dim]")
    for tag, value in game.headers.items():
        if value:
            console.print(f"[dim]{tag}[/dim]: {escape(value)}")

    try:
        parsed = load_pgn(game.pgn)
    except PgnLoadError as e:
        console.print(f"\n[red]Cannot replay stored game:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    sans = mainline_sans(parsed)
    moves = [f"{i // 2 + 1}. {san}" if i % 2 == 0 else san for i, san in enumerate(sans)]
    console.print("\n" + (" ".join(moves) if moves else "[dim](no moves)[/dim]"))
    console.print(f"FEN: {mainline_fens(parsed)[-1]}")


@app.command()
def delete(game_id: int) -> None:
    """Delete a stored game."""
    db = _db()
    init_db(db)
    with db.connect() as conn:
        deleted = delete_game(conn, game_id)
    if not deleted:
        raise typer.BadParameter(f"No game with id {game_id}.")
    console.print(f"[green]Deleted[/green] #{game_id}")


@app.command()
def search(
    name: str,
    table_name: str | None = typer.Option(None, "--table", help="Limit to one tournament table"),
    threshold: float = typer.Option(0.85, "--threshold", min=0.0, max=1.0),
) -> None:
    """Find games by player name, tolerating typos, accents and 'Last First' order."""
    if table_name is not None:
        table_name = _table(table_name)
    db = _db()
    init_db(db)
    with db.connect() as conn:
        hits = find_games_by_player(conn, name, table_name=table_name, threshold=threshold)

    if not hits:
        console.print(f"[yellow]No games found[/yellow] for '{escape(name)}'.")
        return

    table = Table(title=f"Games matching '{escape(name)}'")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Table")
    table.add_column("Score", style="cyan")
    for g, score in hits:
        table.add_row(str(g.id), escape(g.title), g.table_name, f"{score:.2f}")
    console.print(table)


if __name__ == "__main__":
    app()
