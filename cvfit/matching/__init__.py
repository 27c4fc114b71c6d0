from .engine import compute_match, match_quality, rank_jobs, score_job
from .types import MatchBreakdown, MatchDetail, ScoredJob, SkillMatch

__all__ = [
    "compute_match",
    "match_quality",
    "rank_jobs",
    "score_job",
    "MatchBreakdown",
    "MatchDetail",
    "ScoredJob",
    "SkillMatch",
]
