from __future__ import annotations

from collections.abc import Mapping

# Defaults injected by some export tools; they say nothing about the game.
PLACEHOLDER_EVENTS = frozenset({"?", "rated blitz game"})
PLACEHOLDER_DATE = "????.??.??"


def derive_title(headers: Mapping[str, str]) -> str:
    white = headers.get("White") or ""
    black = headers.get("Black") or ""
    if not white and not black:
        return ""

    event = headers.get("Event")
    date = headers.get("Date")
    if event and event not in PLACEHOLDER_EVENTS:
        return f"{event}: {white} vs {black}"
    if date and date != PLACEHOLDER_DATE:
        return f"{white} vs {black} ({date})"
    return f"{white} vs {black}"
