from __future__ import annotations

import re

# [TimeControl "30'+30""] and [TimeControl "30'+30\""] as produced by some
# over-the-board export tools. Only the doubled closing quote form is touched.
_BROKEN_TIME_CONTROL_RE = re.compile(
    r"""\[TimeControl\s+"(?P<value>[^"\\\]\n]*['′’][^"\\\]\n]*)\\?""\s*\]"""
)
_PRIME_RE = re.compile(r"['′’]\+?")


def _fix(m: re.Match[str]) -> str:
    value = _PRIME_RE.sub("+", m.group("value"))
    return f'[TimeControl "{value}"]'


def repair(text: str) -> str:
    """Rewrite the known broken TimeControl encoding; anything else is returned unchanged."""
    return _BROKEN_TIME_CONTROL_RE.sub(_fix, text)
