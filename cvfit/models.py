from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, Flag
from typing import Any, Dict, Mapping, Optional


class RoleKind(Flag):
    """
    Which skill vocabularies a job title unlocks.

    A title may be both (e.g. "AI Product Engineer"); NONE means only the
    universal soft skills are scanned.
    """
    NONE = 0
    TECHNICAL = 1
    PRODUCT = 2


class Importance(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    NICE_TO_HAVE = "nice-to-have"


class MatchQuality(str, Enum):
    EXCELLENT = "Excellent Match"
    GOOD = "Good Match"
    FAIR = "Fair Match"
    POOR = "Poor Match"

    @property
    def color(self) -> str:
        return _QUALITY_COLORS[self]


_QUALITY_COLORS = {
    MatchQuality.EXCELLENT: "green",
    MatchQuality.GOOD: "blue",
    MatchQuality.FAIR: "yellow",
    MatchQuality.POOR: "red",
}


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class JobPosting:
    """
    The job record consumed by the scoring engine.

    Strings are kept verbatim (no whitespace normalization): every scorer
    works on substrings of the raw lowercased text.
    """
    title: str = ""
    description: str = ""
    company: str = ""

    # Provenance (optional; not used for scoring)
    job_id: Optional[str] = None
    url: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "title", _as_text(self.title))
        object.__setattr__(self, "description", _as_text(self.description))
        object.__setattr__(self, "company", _as_text(self.company))

    @classmethod
    def coerce(cls, job: Any) -> "JobPosting":
        """
        Accept a JobPosting, a mapping, or any object with title/description
        attributes. Missing or non-string fields become "".
        """
        if isinstance(job, JobPosting):
            return job
        if isinstance(job, Mapping):
            get = job.get
        else:
            def get(key: str, default: Any = None) -> Any:
                return getattr(job, key, default)
        raw_id = get("id")
        if raw_id is None:
            raw_id = get("job_id")
        return cls(
            title=get("title", ""),
            description=get("description", ""),
            company=get("company", ""),
            job_id=str(raw_id) if raw_id is not None else None,
            url=get("url") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MissingSkill:
    """A job skill the candidate does not show, with gap text for the UI."""
    skill: str
    explanation: str
    importance: Importance

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill": self.skill,
            "explanation": self.explanation,
            "importance": self.importance.value,
        }
