"""Merging of form-entered metadata with parsed headers into one canonical PGN."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields

from .headers import CANONICAL_TAGS, encode


@dataclass(frozen=True)
class MetadataOverride:
    event: str | None = None
    date: str | None = None
    white: str | None = None
    black: str | None = None
    result: str | None = None
    elo_white: str | None = None
    elo_black: str | None = None
    time_control: str | None = None
    opening: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, str | None]) -> MetadataOverride:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown metadata field(s): {', '.join(sorted(unknown))}")
        return cls(**data)


# override field -> header tags to fall back on, in order
OVERRIDE_TAGS: dict[str, tuple[str, ...]] = {
    "event": ("Event",),
    "date": ("Date", "UTCDate"),
    "white": ("White",),
    "black": ("Black",),
    "result": ("Result",),
    "elo_white": ("WhiteElo",),
    "elo_black": ("BlackElo",),
    "time_control": ("TimeControl",),
    "opening": ("Opening",),
}


def _first_present(headers: Mapping[str, str], tags: tuple[str, ...]) -> str:
    for tag in tags:
        value = headers.get(tag)
        if value:
            return value
    return ""


def merge_headers(overrides: MetadataOverride, parsed_headers: Mapping[str, str]) -> dict[str, str]:
    """Canonical tag map: non-blank override, else parsed header, else empty string."""
    merged = {tag: parsed_headers.get(tag) or "" for tag in CANONICAL_TAGS}
    for field_name, tags in OVERRIDE_TAGS.items():
        value = getattr(overrides, field_name)
        if value is not None and value.strip():
            merged[tags[0]] = value.strip()
        else:
            merged[tags[0]] = _first_present(parsed_headers, tags)
    return merged


def canonicalize(
    move_text: str,
    overrides: MetadataOverride,
    parsed_headers: Mapping[str, str],
) -> str:
    """
    Build a canonical PGN document. ``move_text`` must already be free of tag
    lines (see ``headers.strip_headers``); a blank one becomes ``*``.
    """
    moves = move_text.strip() or "*"
    return encode(merge_headers(overrides, parsed_headers), CANONICAL_TAGS, moves)
