from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from cvfit.core.text_processing import contains_any, lower
from cvfit.vocab import DEFAULT_VOCABULARY, MatchVocabulary
from cvfit.models import JobPosting, RoleKind


def classify_role(title: str, description: str = "", vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> RoleKind:
    """
    Decide which skill vocabularies apply to a job, from its title.

    - TECHNICAL: title mentions engineer / developer / architect / devops
    - PRODUCT: title mentions a product-management role, or is a "head of ..."
      title whose description mentions product
    Both flags can be set at once.
    """
    t = lower(title)
    d = lower(description)

    kind = RoleKind.NONE
    if contains_any(t, vocab.technical_title_markers):
        kind |= RoleKind.TECHNICAL
    if contains_any(t, vocab.product_title_markers) or (
        vocab.head_of_marker in t and vocab.head_of_description_marker in d
    ):
        kind |= RoleKind.PRODUCT
    return kind


def extract_job_skills(description: str, title: str = "", vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> List[str]:
    """
    Role-aware skill keywords found in a job description.

    Keywords are matched as substrings of the lowercased description (never the
    title). Output is de-duplicated and keeps vocabulary order:
    technical (if TECHNICAL), product (if PRODUCT), then universal soft skills.
    """
    d = lower(description)
    return _scan_skills(d, classify_role(title, d, vocab), vocab)


def _scan_skills(d: str, kind: RoleKind, vocab: MatchVocabulary) -> List[str]:
    vocabularies: List[Tuple[str, ...]] = []
    if kind & RoleKind.TECHNICAL:
        vocabularies.append(vocab.technical_skills)
    if kind & RoleKind.PRODUCT:
        vocabularies.append(vocab.product_skills)
    vocabularies.append(vocab.universal_skills)

    out: List[str] = []
    seen = set()
    for words in vocabularies:
        for skill in words:
            if skill in d and skill not in seen:
                out.append(skill)
                seen.add(skill)
    return out


def required_years(description: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> Optional[int]:
    """First "N years" / "N+ years" figure in the description, or None."""
    m = re.search(vocab.required_years_pattern, lower(description), re.IGNORECASE)
    if not m:
        return None
    return int(m.group(1))


@dataclass(frozen=True)
class JobRequirements:
    """
    Everything the scorers need to know about a job, extracted once.

    title / description are lowercased copies of the posting fields.
    """
    title: str
    description: str
    role: RoleKind
    skills: List[str]
    years: Optional[int]


def extract_job_requirements(job: JobPosting, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> JobRequirements:
    title = lower(job.title)
    description = lower(job.description)
    role = classify_role(title, description, vocab)
    return JobRequirements(
        title=title,
        description=description,
        role=role,
        skills=_scan_skills(description, role, vocab),
        years=required_years(description, vocab),
    )
