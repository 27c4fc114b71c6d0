# cvfit/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

# --- Scoring engine ---
# The engine reads nothing from the environment: vocabularies, weights and
# caps live in cvfit.vocab (MatchVocabulary / ScoreWeights).

# --- Auto-apply gate (defaults) ---

DEFAULT_AUTO_APPLY_MIN_SCORE = 70
DEFAULT_MAX_APPLICATIONS_PER_DAY = 5

# --- CLI ---

DEFAULT_TOP_K = 10

# Prefix for every diagnostic line written to stderr.
LOG_PREFIX = "[CVFit]"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class AutoApplyConfig:
    min_score: int
    max_applications: int


def load_auto_apply_config() -> AutoApplyConfig:
    """Read the auto-apply gate from the environment (re-read on every call)."""
    return AutoApplyConfig(
        min_score=_env_int("CVFIT_AUTO_APPLY_MIN_SCORE", DEFAULT_AUTO_APPLY_MIN_SCORE),
        max_applications=_env_int("CVFIT_MAX_APPLICATIONS_PER_DAY", DEFAULT_MAX_APPLICATIONS_PER_DAY),
    )


def default_top_k() -> int:
    return _env_int("CVFIT_TOP_K", DEFAULT_TOP_K)
