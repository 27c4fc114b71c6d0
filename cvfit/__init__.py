from cvfit.matching import MatchBreakdown, ScoredJob, compute_match, match_quality, rank_jobs
from cvfit.models import Importance, JobPosting, MatchQuality, MissingSkill

__version__ = "0.1.0"

__all__ = [
    "compute_match",
    "match_quality",
    "rank_jobs",
    "Importance",
    "JobPosting",
    "MatchBreakdown",
    "MatchQuality",
    "MissingSkill",
    "ScoredJob",
]
