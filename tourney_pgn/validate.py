from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import IngestError
from .repair import repair
from .rules import PgnLoadError, load_pgn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    error: IngestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def validate(block: str) -> ValidationResult:
    """
    Check that python-chess can load ``block``, retrying once on a repaired copy.
    The caller's text is never changed; call ``repair`` to get the fixed version.
    """
    if not block.strip():
        return ValidationResult(IngestError.empty_input())

    try:
        load_pgn(block)
        return ValidationResult()
    except PgnLoadError as first:
        logger.debug("Initial load failed (%s); retrying with repaired headers", first)

    try:
        load_pgn(repair(block))
        return ValidationResult()
    except PgnLoadError as e:
        return ValidationResult(IngestError.malformed(str(e)))
