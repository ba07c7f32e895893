"""Batch ingestion: one pasted or uploaded PGN text in, a report of storable games out."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial

from .canonical import MetadataOverride, canonicalize, merge_headers
from .errors import IngestError
from .headers import decode, strip_headers
from .repair import repair
from .segment import segment
from .titles import derive_title
from .validate import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestedGame:
    index: int  # 1-based position in the input
    title: str
    pgn: str
    headers: dict[str, str]


@dataclass(frozen=True)
class IngestFailure:
    index: int
    title: str
    error: IngestError

    @property
    def message(self) -> str:
        where = f"Game {self.index} ({self.title})" if self.title else f"Game {self.index}"
        return f"{where}: {self.error.reason}"


@dataclass(frozen=True)
class IngestReport:
    games: list[IngestedGame] = field(default_factory=list)
    failures: list[IngestFailure] = field(default_factory=list)
    error: IngestError | None = None  # whole-input problem (blank input, nothing segmented)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures

    @property
    def total(self) -> int:
        return len(self.games) + len(self.failures)

    @property
    def messages(self) -> list[str]:
        if self.error is not None:
            return [self.error.reason]
        return [f.message for f in self.failures]


def _process_block(
    index: int,
    block: str,
    *,
    canonical: bool,
    overrides: MetadataOverride,
) -> IngestedGame | IngestFailure:
    fixed = repair(block)
    headers = decode(fixed)
    title = derive_title(headers)

    result = validate(block)
    if result.error is not None:
        return IngestFailure(index=index, title=title, error=result.error)

    if not canonical:
        return IngestedGame(index=index, title=title or f"Game {index}", pgn=fixed, headers=headers)

    merged = merge_headers(overrides, headers)
    pgn = canonicalize(strip_headers(fixed), overrides, headers)
    rewritten = validate(pgn)
    if rewritten.error is not None:
        # e.g. a SetUp/FEN game: the canonical tag set cannot carry its start position.
        error = IngestError.malformed(f"Canonical form does not load: {rewritten.error.reason}")
        return IngestFailure(index=index, title=title, error=error)
    title = derive_title(merged) or f"Game {index}"
    return IngestedGame(index=index, title=title, pgn=pgn, headers=merged)


def _run(jobs: list[Callable[[], IngestedGame | IngestFailure]], workers: int) -> list[IngestedGame | IngestFailure]:
    if workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order, which keeps preview numbering stable.
            return list(executor.map(lambda job: job(), jobs))
    return [job() for job in jobs]


def ingest(
    raw: str,
    *,
    canonical: bool = False,
    overrides: MetadataOverride | None = None,
    workers: int = 1,
) -> IngestReport:
    """
    Segment ``raw`` and validate every game independently.

    Valid games carry the repaired text (or the canonical form when
    ``canonical`` is set); invalid ones are reported with their 1-based index
    and derived title. A bad game never stops its siblings from being ingested.
    """
    if not raw.strip():
        return IngestReport(error=IngestError.empty_input())

    blocks = segment(raw)
    if not blocks:
        return IngestReport(error=IngestError.no_games_found())

    meta = overrides or MetadataOverride()
    jobs = [
        partial(_process_block, i, b, canonical=canonical, overrides=meta)
        for i, b in enumerate(blocks, start=1)
    ]
    outcomes = _run(jobs, workers)

    games = [o for o in outcomes if isinstance(o, IngestedGame)]
    failures = [o for o in outcomes if isinstance(o, IngestFailure)]
    logger.info("Ingested %d game(s), %d failed", len(games), len(failures))
    return IngestReport(games=games, failures=failures)
