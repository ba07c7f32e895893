from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    EMPTY_INPUT = "empty_input"
    MALFORMED_PGN = "malformed_pgn"
    NO_GAMES_FOUND = "no_games_found"


@dataclass(frozen=True)
class IngestError:
    kind: ErrorKind
    reason: str

    @classmethod
    def empty_input(cls) -> IngestError:
        return cls(ErrorKind.EMPTY_INPUT, "PGN cannot be empty")

    @classmethod
    def malformed(cls, reason: str | None = None) -> IngestError:
        return cls(ErrorKind.MALFORMED_PGN, reason or "Invalid PGN format")

    @classmethod
    def no_games_found(cls) -> IngestError:
        return cls(ErrorKind.NO_GAMES_FOUND, "No games found in PGN text")
