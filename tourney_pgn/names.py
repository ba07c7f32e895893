"""Normalization and fuzzy matching of player names and tournament table names."""

from __future__ import annotations

import re
import unicodedata

TABLE_NAME_RE = re.compile(r"^[a-z0-9_]+$")


def normalize_name(s: str | None) -> str:
    decomposed = unicodedata.normalize("NFD", (s or "").lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = re.sub(r"[^a-z0-9\s]", "", without_marks)
    return re.sub(r"\s+", " ", cleaned).strip()


def levenshtein(a: str, b: str) -> int:
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost))
        prev = cur
    return prev[-1]


def _similarity(na: str, nb: str) -> float:
    max_len = max(len(na), len(nb))
    if max_len == 0:
        return 0.0
    return max(0.0, 1 - levenshtein(na, nb) / max_len)


def fuzzy_score(a: str, b: str) -> float:
    na, nb = normalize_name(a), normalize_name(b)
    if not na or not nb:
        return 0.0
    if na == nb:
        return 1.0
    if na in nb or nb in na:
        return 0.95
    return _similarity(na, nb)


def _initials(n: str) -> str:
    return "".join(t[0] for t in n.split())


def _reversed(n: str) -> str:
    return " ".join(reversed(n.split()))


def match_score(a: str, b: str) -> float:
    """
    Score how likely two spellings name the same player, in [0, 1].

    Handles "Last First" ordering, initials ("J Smith" / "John Smith") and
    partial token overlap before falling back to edit distance.
    """
    na, nb = normalize_name(a), normalize_name(b)
    if not na or not nb:
        return 0.0
    if na == nb:
        return 1.0
    if na in nb or nb in na:
        return 0.98
    if na == _reversed(nb) or nb == _reversed(na):
        return 0.96
    if _initials(na) == _initials(nb):
        return 0.9

    ta, tb = na.split(), nb.split()
    overlap = sum(1 for t in ta if t in tb)
    ratio = overlap / min(len(ta), len(tb))
    if ratio >= 0.66:
        return max(0.9, 0.9 * ratio)
    return max(_similarity(na, nb), ratio * 0.85)


def normalize_table_name(name: str) -> str:
    """'Spring Open 2025' -> 'spring_open_2025'; raises ValueError if nothing usable is left."""
    slug = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")
    if not TABLE_NAME_RE.match(slug):
        raise ValueError(f"Invalid tournament table name: {name!r}")
    return slug
