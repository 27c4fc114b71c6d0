from __future__ import annotations

from typing import Collection, List, Optional, Sequence

from cvfit import config
from cvfit.matching.types import MatchBreakdown, ScoredJob


def passes_auto_apply(breakdown: MatchBreakdown, min_score: Optional[int] = None) -> bool:
    threshold = config.load_auto_apply_config().min_score if min_score is None else min_score
    return breakdown.total >= threshold


def select_auto_apply(
        scored: Sequence[ScoredJob],
        *,
        min_score: Optional[int] = None,
        max_applications: Optional[int] = None,
        applied_ids: Collection[str] = (),
) -> List[ScoredJob]:
    """
    Jobs eligible for bulk auto-apply.

    - total >= min_score
    - not already applied to (matched on JobPosting.job_id)
    - best first, at most max_applications

    Unset limits come from config.load_auto_apply_config().
    """
    cfg = config.load_auto_apply_config()
    threshold = cfg.min_score if min_score is None else min_score
    limit = cfg.max_applications if max_applications is None else max_applications
    if limit <= 0:
        return []

    applied = set(applied_ids or ())
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)

    out: List[ScoredJob] = []
    for item in ranked:
        if item.score < threshold:
            continue
        if item.job.job_id is not None and item.job.job_id in applied:
            continue
        out.append(item)
        if len(out) >= limit:
            break
    return out
