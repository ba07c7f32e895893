from __future__ import annotations

import io
import re

import chess.pgn

RESULT_TOKENS = frozenset({"1-0", "0-1", "1/2-1/2", "*"})

_TAG_LINE_RE = re.compile(r'^\s*\[\w+\s+"', re.MULTILINE)
_EMPTY_VARIANT_RE = re.compile(r'^[^\S\n]*\[Variant\s+""\][^\S\n]*\r?$\n?', re.MULTILINE)


class PgnLoadError(ValueError):
    """python-chess could not load the text as a game."""


def _is_misterminated(value: str) -> bool:
    # '[TimeControl "30\'+30""]' reaches us as the value '30\'+30"'.
    return value.endswith('"') and not value.endswith('\\"')


def load_pgn(text: str) -> chess.pgn.Game:
    # Canonical games always carry a Variant tag, empty when unknown; python-chess
    # would treat '' as an unsupported variant name.
    text = _EMPTY_VARIANT_RE.sub("", text)
    game = chess.pgn.read_game(io.StringIO(text))
    if game is None:
        raise PgnLoadError("No game found in PGN text.")
    if game.errors:
        # python-chess collects SAN/parse problems instead of raising.
        raise PgnLoadError(str(game.errors[0]))
    for name, value in game.headers.items():
        if _is_misterminated(value):
            raise PgnLoadError(f"Malformed {name} tag: {value!r}")
    if game.next() is None and not _TAG_LINE_RE.search(text) and text.strip() not in RESULT_TOKENS:
        # python-chess silently skips tokens it does not recognise.
        raise PgnLoadError("No tags or moves found.")
    return game


def mainline_sans(game: chess.pgn.Game) -> list[str]:
    board = game.board()
    sans: list[str] = []
    for move in game.mainline_moves():
        sans.append(board.san(move))
        board.push(move)
    return sans


def mainline_fens(game: chess.pgn.Game) -> list[str]:
    """FEN before the first move and after every mainline move."""
    board = game.board()
    fens = [board.fen()]
    for move in game.mainline_moves():
        board.push(move)
        fens.append(board.fen())
    return fens
