from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from cvfit.models import JobPosting, MatchQuality, MissingSkill


@dataclass(frozen=True)
class MatchDetail:
    """One audit-trail line, rendered by the UI as-is."""
    category: str
    score: int
    max: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "score": self.score,
            "max": self.max,
            "description": self.description,
        }


@dataclass(frozen=True)
class SkillMatch:
    raw_score: int  # 0..40, before scaling
    matched: Tuple[str, ...]
    missing: Tuple[MissingSkill, ...]
    inferred: Tuple[str, ...]


@dataclass(frozen=True)
class MatchBreakdown:
    """
    Fit score for one (candidate, job) pair.

    Sub-score maxima: skills 30, experience 35, title 20, domain 15,
    description 10. total == min(100, sum of the five).
    """
    skills_match: int = 0
    experience_match: int = 0
    title_match: int = 0
    domain_match: int = 0
    description_match: int = 0
    total: int = 0
    matched_skills: Tuple[str, ...] = ()
    missing_skills: Tuple[MissingSkill, ...] = ()
    details: Tuple[MatchDetail, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "MatchBreakdown":
        """The documented "no signal" result."""
        return cls()

    @property
    def sub_scores(self) -> Tuple[int, int, int, int, int]:
        return (
            self.skills_match,
            self.experience_match,
            self.title_match,
            self.domain_match,
            self.description_match,
        )

    def to_dict(self) -> Dict[str, Any]:
        # Keys follow the external (UI) contract.
        return {
            "skillsMatch": self.skills_match,
            "experienceMatch": self.experience_match,
            "titleMatch": self.title_match,
            "domainMatch": self.domain_match,
            "descriptionMatch": self.description_match,
            "total": self.total,
            "matchedSkills": list(self.matched_skills),
            "missingSkills": [m.to_dict() for m in self.missing_skills],
            "details": [d.to_dict() for d in self.details],
        }


@dataclass(frozen=True)
class ScoredJob:
    job: JobPosting
    breakdown: MatchBreakdown
    quality: MatchQuality

    @property
    def score(self) -> int:
        return self.breakdown.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job": self.job.to_dict(),
            "score": self.score,
            "quality": {"label": self.quality.value, "color": self.quality.color},
            "breakdown": self.breakdown.to_dict(),
        }
