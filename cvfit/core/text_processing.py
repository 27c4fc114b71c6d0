from __future__ import annotations

import math
import re
import unicodedata
from typing import Iterable, List

# NOTE: This module is shared infrastructure.
# Normalization, requirement extraction, gap analysis and the scorers all
# depend on it rather than re-implementing string handling.

# Keyword-density tokenizer: any non-word, non-space char becomes a space.
_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)

# Minimum token length (exclusive) for keyword density.
DENSITY_MIN_TOKEN_LEN = 4


def normalize_text(text: str) -> str:
    """
    Deterministic normalization for display strings.

    - remove unicode quirks (smart quotes, non-breaking spaces)
    - collapse whitespace

    Scoring never runs on normalized text: substring rules operate on the
    raw lowercased input so that offsets and punctuation are unchanged.
    """
    if not text:
        return ""
    t = unicodedata.normalize("NFKC", text)
    t = t.replace("\u00a0", " ")
    t = " ".join(t.split())
    return t


def lower(text: object) -> str:
    """Lowercase anything string-like; everything else becomes ''."""
    if isinstance(text, str):
        return text.lower()
    return ""


def round_half_up(x: float) -> int:
    """
    Round .5 away from zero for non-negative inputs.

    Python's round() uses banker's rounding (round(16.5) == 16); point
    scores must round 16.5 up to 17.
    """
    return int(math.floor(x + 0.5))


def contains_any(haystack: str, needles: Iterable[str]) -> bool:
    return any(n in haystack for n in needles)


def count_mentions(haystack: str, needle: str) -> int:
    """Non-overlapping occurrences of a literal needle."""
    if not needle:
        return 0
    return len(re.findall(re.escape(needle), haystack))


def density_tokens(text: str) -> List[str]:
    """
    Ordered token stream for keyword density.

    - lowercased
    - punctuation stripped (replaced by whitespace)
    - tokens of length <= 4 dropped
    """
    if not text:
        return []
    cleaned = _NON_WORD_RE.sub(" ", text.lower())
    return [t for t in cleaned.split() if len(t) > DENSITY_MIN_TOKEN_LEN]


def dedupe_first_seen(items: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for it in items:
        if it and it not in seen:
            out.append(it)
            seen.add(it)
    return out
