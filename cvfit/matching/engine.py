from __future__ import annotations

from typing import Any, Iterable, List, Optional

from cvfit.core.text_processing import round_half_up
from cvfit.models import JobPosting, MatchQuality
from cvfit.profile import NormalizedProfile, normalize_profile
from cvfit.requirements import extract_job_requirements
from cvfit.vocab import DEFAULT_VOCABULARY, DEFAULT_WEIGHTS, MatchVocabulary, ScoreWeights

from .scoring import (
    domain_alignment_score,
    experience_match_score,
    identify_job_domain,
    keyword_density_score,
    skill_match_score,
    title_match_score,
)
from .types import MatchBreakdown, MatchDetail, ScoredJob

# Matched skills listed by name in the audit trail before "...".
DETAIL_SKILL_PREVIEW = 5

# Quality bands, highest first.
QUALITY_BANDS = (
    (80, MatchQuality.EXCELLENT),
    (60, MatchQuality.GOOD),
    (40, MatchQuality.FAIR),
)


def match_quality(total: int) -> MatchQuality:
    for floor, quality in QUALITY_BANDS:
        if total >= floor:
            return quality
    return MatchQuality.POOR


def _skills_description(matched: List[str], inferred: List[str]) -> str:
    if matched:
        preview = ", ".join(matched[:DETAIL_SKILL_PREVIEW])
        more = "..." if len(matched) > DETAIL_SKILL_PREVIEW else ""
        return f"{len(matched)} matching skills: {preview}{more}"
    return f"Skills inferred from work history: {', '.join(inferred)}"


def _domain_description(domain: Optional[str]) -> str:
    if domain:
        return f"CV experience aligns with the {domain} domain"
    return "CV mentions tools named in the job description"


def _as_profile(profile: Any) -> NormalizedProfile:
    if isinstance(profile, NormalizedProfile):
        return profile
    return normalize_profile(profile)


def compute_match(
        profile: Any,
        job: Any,
        *,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        current_year: Optional[int] = None,
) -> MatchBreakdown:
    """
    Score one candidate against one job posting.

    profile: raw candidate record (mapping or object) or a NormalizedProfile
    job: JobPosting, mapping or object with title/description

    Pure and exception-free: a missing profile or job yields MatchBreakdown.empty().
    current_year only affects "present"/"current" date ranges (default: today).
    """
    if profile is None or job is None:
        return MatchBreakdown.empty()

    candidate = _as_profile(profile)
    posting = JobPosting.coerce(job)
    req = extract_job_requirements(posting, vocab)
    experience = candidate.experience_text

    skills = skill_match_score(
        candidate.skills,
        req.description,
        req.title,
        experience,
        job_skills=req.skills,
        vocab=vocab,
        weights=weights,
    )
    skills_match = min(weights.skill_max, round_half_up(skills.raw_score * weights.skill_scale))

    exp_raw = experience_match_score(
        experience,
        req.description,
        req.title,
        current_year=current_year,
        years_required=req.years,
        vocab=vocab,
        weights=weights,
    )
    experience_match = min(weights.experience_max, round_half_up(exp_raw * weights.experience_scale))

    title_match = min(weights.title_max, title_match_score(experience, req.title, vocab=vocab, weights=weights))
    domain_match = domain_alignment_score(experience, req.description, req.title, vocab=vocab, weights=weights)
    description_match = keyword_density_score(experience, req.description, weights=weights)

    details: List[MatchDetail] = []
    if skills_match > 0:
        details.append(MatchDetail(
            "Skills Match", skills_match, weights.skill_max,
            _skills_description(list(skills.matched), list(skills.inferred)),
        ))
    if experience_match > 0:
        details.append(MatchDetail(
            "Experience Match", experience_match, weights.experience_max, "Relevant experience found in CV",
        ))
    if title_match > 0:
        details.append(MatchDetail("Title Match", title_match, weights.title_max, "Similar role in work history"))
    if domain_match > 0:
        details.append(MatchDetail(
            "Domain Match", domain_match, weights.domain_max,
            _domain_description(identify_job_domain(req.description, req.title, vocab)),
        ))
    if description_match > 0:
        details.append(MatchDetail(
            "Keyword Match", description_match, weights.description_max, "CV keywords match job description",
        ))

    total = min(
        weights.total_max,
        skills_match + experience_match + title_match + domain_match + description_match,
    )

    return MatchBreakdown(
        skills_match=skills_match,
        experience_match=experience_match,
        title_match=title_match,
        domain_match=domain_match,
        description_match=description_match,
        total=total,
        matched_skills=skills.matched,
        missing_skills=skills.missing,
        details=tuple(details),
    )


def score_job(profile: Any, job: Any, **kwargs: Any) -> ScoredJob:
    posting = JobPosting.coerce(job)
    breakdown = compute_match(profile, posting, **kwargs)
    return ScoredJob(job=posting, breakdown=breakdown, quality=match_quality(breakdown.total))


def rank_jobs(profile: Any, jobs: Iterable[Any], top_n: Optional[int] = None, **kwargs: Any) -> List[ScoredJob]:
    """Score every job and sort by total, best first (ties keep input order)."""
    candidate = _as_profile(profile) if profile is not None else None
    scored = [score_job(candidate, j, **kwargs) for j in jobs if j is not None]
    scored.sort(key=lambda x: x.score, reverse=True)
    return scored if top_n is None else scored[:top_n]
