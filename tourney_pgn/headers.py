"""Reading and writing of PGN tag pairs.

``decode`` is deliberately forgiving: it only looks at the header run at the
top of a block and skips tag lines it cannot parse. ``encode`` is strict: it
always writes the full canonical tag set, in order, with CRLF terminators.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

CANONICAL_TAGS: tuple[str, ...] = (
    "Event",
    "Site",
    "Date",
    "Round",
    "White",
    "Black",
    "Result",
    "GameId",
    "UTCDate",
    "UTCTime",
    "WhiteElo",
    "BlackElo",
    "WhiteRatingDiff",
    "BlackRatingDiff",
    "Variant",
    "TimeControl",
    "ECO",
    "Opening",
    "Termination",
)

CRLF = "\r\n"

_TAG_RE = re.compile(r'\[\s*([A-Za-z0-9_]+)\s+"((?:[^"\\]|\\.)*)"\s*\]')
# Taken literally when the escape-aware form fails, as in [Site "C:\"].
_LOOSE_TAG_RE = re.compile(r'\[\s*([A-Za-z0-9_]+)\s+"([^"]*)"\s*\]')
_ESCAPE_RE = re.compile(r"\\(.)")
_LEADING_HEADERS_RE = re.compile(r"\A(?:[^\S\n]*\n|[^\S\n]*\[[^\n]*\][^\S\n]*(?:\n|\Z))+")


def _unescape(value: str) -> str:
    return _ESCAPE_RE.sub(r"\1", value)


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def decode(block: str) -> dict[str, str]:
    """Parse the header run at the top of ``block`` into an ordered tag map."""
    headers: dict[str, str] = {}
    for raw_line in block.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        if not line.startswith("["):
            break
        found = False
        for m in _TAG_RE.finditer(line):
            headers[m.group(1)] = _unescape(m.group(2))
            found = True
        if not found:
            for m in _LOOSE_TAG_RE.finditer(line):
                headers[m.group(1)] = m.group(2)
                found = True
        if not found:
            logger.debug("Skipping unparsable header line: %r", line)
    return headers


def encode(
    headers: Mapping[str, str],
    order: Sequence[str] = CANONICAL_TAGS,
    move_text: str = "",
) -> str:
    """Serialize ``headers`` as one tag line per entry of ``order``, then a blank line and the moves."""
    lines = [f'[{tag} "{_escape(headers.get(tag) or "")}"]' for tag in order]
    return CRLF.join(lines) + CRLF + CRLF + move_text


def strip_headers(text: str) -> str:
    """Drop one or more header lines at the start of ``text`` and trim what remains."""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return _LEADING_HEADERS_RE.sub("", normalized, count=1).strip()
