from __future__ import annotations

from cvfit.core.text_processing import (
    count_mentions,
    contains_any,
    dedupe_first_seen,
    density_tokens,
    lower,
    normalize_text,
    round_half_up,
)


def test_normalize_text_is_deterministic_and_removes_nbsp() -> None:
    raw = "Senior\u00a0Product  Manager\n\tPayments"
    norm = normalize_text(raw)
    assert "  " not in norm
    assert "\u00a0" not in norm
    assert norm == "Senior Product Manager Payments"


def test_round_half_up_differs_from_bankers_rounding() -> None:
    assert round_half_up(16.5) == 17
    assert round_half_up(13.5) == 14
    assert round_half_up(21.06) == 21
    assert round_half_up(0.49) == 0
    assert round_half_up(0) == 0


def test_lower_tolerates_non_strings() -> None:
    assert lower("ABC") == "abc"
    assert lower(None) == ""
    assert lower(42) == ""


def test_count_mentions_is_literal() -> None:
    # regex metacharacters in skill names must not be interpreted
    assert count_mentions("c++ and c++ and c", "c++") == 2
    assert count_mentions("node.js nodexjs", "node.js") == 1
    assert count_mentions("anything", "") == 0


def test_contains_any() -> None:
    assert contains_any("head of product", ("director", "head"))
    assert not contains_any("engineer", ("director", "head"))


def test_density_tokens_strip_punctuation_and_short_words() -> None:
    tokens = density_tokens("Build APIs, ship product-roadmaps; scale! (fast)")
    assert tokens == ["build", "product", "roadmaps", "scale"]


def test_density_tokens_keep_duplicates_in_order() -> None:
    assert density_tokens("roadmap, ROADMAP roadmap") == ["roadmap", "roadmap", "roadmap"]
    assert density_tokens("") == []


def test_dedupe_first_seen_is_case_sensitive() -> None:
    assert dedupe_first_seen(["SQL", "sql", "SQL", "", "Go"]) == ["SQL", "sql", "Go"]
