"""Splitting of multi-game PGN text into single-game blocks.

Games are delimited by ``[Event "`` tag lines. Inside each candidate the game
ends at the first result marker that sits in move text (not in a tag line and
not in a ``{...}`` comment), optionally followed by one trailing comment, and
followed by a blank line or the end of the candidate.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_EVENT_LINE_RE = re.compile(r'^[^\S\n]*\[Event\s+"', re.MULTILINE)
_GAME_END_RE = re.compile(
    r"(?<![\w/-])(?:1-0|0-1|1/2-1/2|\*)"  # result marker
    r"\s*(?:\{[^}]*\})?"  # optional trailing annotation, possibly after blank lines
    r"(?:[^\S\n]*\n[^\S\n]*\n|\s*\Z)"  # blank line or end of candidate
)
_COMMENT_RE = re.compile(r"\{[^}]*\}?|;[^\n]*")
_TAG_LINE_RE = re.compile(r"^[^\S\n]*\[[^\n]*$", re.MULTILINE)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _opaque_spans(text: str) -> list[tuple[int, int]]:
    """Spans where a result-like token is not a real result: comments and tag lines."""
    spans = [m.span() for m in _COMMENT_RE.finditer(text)]
    spans.extend(m.span() for m in _TAG_LINE_RE.finditer(text))
    return spans


def _find_game_end(candidate: str) -> int | None:
    spans = _opaque_spans(candidate)
    pos = 0
    while True:
        m = _GAME_END_RE.search(candidate, pos)
        if m is None:
            return None
        if not any(lo <= m.start() < hi for lo, hi in spans):
            return m.end()
        pos = m.start() + 1


def _cut(candidate: str) -> str:
    end = _find_game_end(candidate)
    if end is not None:
        return candidate[:end]
    # No result marker: stop at the next "[Event" after our own tag.
    own = candidate.find("[Event")
    next_event = candidate.find("[Event", own + len("[Event"))
    if next_event > 0:
        logger.debug("No result marker; truncating candidate at offset %d", next_event)
        return candidate[:next_event]
    return candidate


def segment(raw: str) -> list[str]:
    """Split ``raw`` into trimmed single-game blocks, in input order."""
    text = normalize_newlines(raw)
    starts = [m.start() for m in _EVENT_LINE_RE.finditer(text)]
    if not starts:
        stripped = text.strip()
        return [stripped] if stripped else []

    preamble = text[: starts[0]].strip()
    if preamble:
        logger.debug("Dropping %d chars before the first Event tag", len(preamble))

    blocks: list[str] = []
    bounds = starts[1:] + [len(text)]
    for start, stop in zip(starts, bounds):
        block = _cut(text[start:stop]).strip()
        if block:
            blocks.append(block)
    return blocks
