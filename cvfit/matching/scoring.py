from __future__ import annotations

import re
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

from cvfit.core.text_processing import contains_any, density_tokens, dedupe_first_seen, lower, round_half_up
from cvfit.gap import find_missing_skills
from cvfit.matching.types import SkillMatch
from cvfit.requirements import extract_job_skills, required_years
from cvfit.vocab import DEFAULT_VOCABULARY, DEFAULT_WEIGHTS, MatchVocabulary, OrderedTable, ScoreWeights

# Default for experience_match_score(years_required=...): parse the description.
_FROM_DESCRIPTION: Any = object()


# ---------------------------------------------------------------------------
# Seniority helpers (shared by the experience and title scorers)
# ---------------------------------------------------------------------------

def detect_seniority(job_title: str, table: OrderedTable) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """First (level, equivalents) whose level is a substring of the title; table order decides."""
    t = lower(job_title)
    for level, equivalents in table:
        if level in t:
            return level, equivalents
    return None


def is_step_up(experience_text: str, job_title: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> bool:
    """Candidate sits one notch below the job (e.g. senior -> principal, lead -> principal)."""
    e = lower(experience_text)
    t = lower(job_title)
    return any(marker in e and contains_any(t, job_markers) for marker, job_markers in vocab.step_up_rules)


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

def infer_skills(experience_text: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> List[str]:
    """
    Skills assumed from the roles a candidate has held.

    - product manager / head of product  -> product management, roadmap
    - any seniority or leadership marker -> leadership, communication
    """
    e = lower(experience_text)
    inferred: List[str] = []
    if contains_any(e, vocab.product_role_markers):
        inferred.extend(vocab.product_inferred_skills)
    if contains_any(e, vocab.leadership_markers):
        inferred.extend(vocab.leadership_inferred_skills)
    return dedupe_first_seen(inferred)


def skill_match_score(
        candidate_skills: Sequence[str],
        job_description: str,
        job_title: str,
        experience_text: str,
        *,
        job_skills: Optional[Sequence[str]] = None,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> SkillMatch:
    """
    Compare candidate skills (explicit + inferred) with the job's skills.

    matched: explicit skills (as written) that appear in the description
    missing: job skills the candidate lacks, minus the always-inferred ones
    raw_score (0..40):
      - 0 when nothing matches
      - max(15, 8 per match), where inferred skills the job asks for count as matches
      - +5 per inferred PM competency for AI / crypto jobs
      - +round((ratio - 0.5) * 20) when more than half the job skills match
    """
    d = lower(job_description)
    t = lower(job_title)

    inferred = infer_skills(experience_text, vocab)
    if job_skills is None:
        job_skills = extract_job_skills(d, t, vocab)
    job_skill_set = {lower(s) for s in job_skills}

    matched = tuple(s for s in candidate_skills if lower(s) in d)
    missing = find_missing_skills(
        job_skills=job_skills,
        candidate_skills=[*candidate_skills, *inferred],
        job_title=t,
        job_description=d,
        vocab=vocab,
    )

    total_matched = len(matched) + sum(1 for s in inferred if s in job_skill_set)

    score = 0
    if total_matched > 0:
        score = max(weights.skill_floor, total_matched * weights.skill_points_per_match)

        specialized = contains_any(t, vocab.specialized_title_markers) or contains_any(
            d, vocab.specialized_description_markers
        )
        if specialized and inferred:
            competencies = sum(1 for s in inferred if s in vocab.pm_competencies)
            score += competencies * weights.skill_competency_bonus

        ratio = total_matched / len(job_skills) if job_skills else 0.0
        if ratio > weights.skill_ratio_threshold:
            score += round_half_up((ratio - weights.skill_ratio_threshold) * weights.skill_ratio_multiplier)

    return SkillMatch(
        raw_score=min(weights.skill_raw_cap, score),
        matched=matched,
        missing=tuple(missing),
        inferred=tuple(inferred),
    )


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------

def estimate_years_of_experience(
        experience_text: str,
        *,
        current_year: Optional[int] = None,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
) -> int:
    """
    Sum of (end - start) over every "YYYY - YYYY|present|current" range.

    Overlapping ranges are summed, not merged: two concurrent 2019-2021
    roles count as 4 years.
    """
    if not experience_text:
        return 0
    year_now = current_year if current_year is not None else date.today().year
    total = 0
    for m in re.finditer(vocab.tenure_pattern, experience_text, re.IGNORECASE):
        start = int(m.group(1))
        end = int(m.group(2)) if m.group(2).isdigit() else year_now
        total += end - start
    return total


def experience_match_score(
        experience_text: str,
        job_description: str,
        job_title: str,
        *,
        current_year: Optional[int] = None,
        years_required: Optional[int] = _FROM_DESCRIPTION,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """
    Seniority, industry and tenure fit (0..30, scaled by the caller).

    years_required: the job's "N years" figure when already extracted
    (None = no requirement); by default it is read from the description.

    Seniority:
      - job title has no seniority token             -> 15
      - candidate lacks an equivalent token          -> 12
      - both sides executive (head/director/vp/chief) -> 22
      - step-up                                      -> 18
      - otherwise                                    -> 20
    +8 for an industry named in both texts.
    +6 when estimated tenure meets the "N years" requirement, +8 when it
    exceeds it by more than 3 years.
    """
    e = lower(experience_text)
    d = lower(job_description)
    t = lower(job_title)

    score = 0
    found = detect_seniority(t, vocab.experience_seniority)
    if found is None:
        score += weights.experience_no_seniority
    else:
        _, equivalents = found
        if contains_any(e, equivalents):
            if contains_any(t, vocab.executive_markers) and contains_any(e, vocab.executive_markers):
                score += weights.experience_executive
            elif is_step_up(e, t, vocab):
                score += weights.experience_step_up
            else:
                score += weights.experience_equivalent
        else:
            score += weights.experience_other_seniority

    if any(industry in d and industry in e for industry in vocab.industries):
        score += weights.experience_industry_bonus

    if years_required is _FROM_DESCRIPTION:
        years_required = required_years(d, vocab)
    if years_required is not None:
        years = estimate_years_of_experience(experience_text, current_year=current_year, vocab=vocab)
        if years >= years_required:
            if years > years_required + weights.experience_years_margin:
                score += weights.experience_years_exceeded_bonus
            else:
                score += weights.experience_years_bonus

    return min(weights.experience_raw_cap, score)


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------

def find_core_role(job_title: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> Optional[str]:
    t = lower(job_title)
    return next((role for role in vocab.core_roles if role in t), None)


def title_match_score(
        experience_text: str,
        job_title: str,
        *,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """
    Has the candidate held the job's core role, at a comparable level?

    - same core role, equivalent seniority -> 18 (15 on a step-up)
    - same core role, other seniority      -> 12
    - same core role, title names no level -> 15
    - a long word of some core role in both title and CV -> 10
    - otherwise 0
    """
    e = lower(experience_text)
    t = lower(job_title)

    core_role = find_core_role(t, vocab)
    if core_role and core_role in e:
        found = detect_seniority(t, vocab.title_seniority)
        if found is None:
            return weights.title_no_seniority
        _, equivalents = found
        if contains_any(e, equivalents):
            return weights.title_step_up if is_step_up(e, t, vocab) else weights.title_equivalent
        return weights.title_other_seniority

    min_len = vocab.partial_role_min_word_len
    for role in vocab.core_roles:
        for word in role.split(" "):
            if len(word) > min_len and word in t and word in e:
                return weights.title_partial
    return 0


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------

def identify_job_domain(
        job_description: str,
        job_title: str,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
) -> Optional[str]:
    """Cluster with the most keyword hits in title + description; ties keep the earlier cluster."""
    d = lower(job_description)
    t = lower(job_title)
    best: Optional[str] = None
    best_hits = 0
    for name, keywords in vocab.domain_clusters:
        hits = sum(1 for k in keywords if k in d or k in t)
        if hits > best_hits:
            best, best_hits = name, hits
    return best


def extract_vendor_keywords(job_description: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> List[str]:
    """Named frameworks, payment vendors and analytics tools in the description."""
    d = lower(job_description)
    found: List[str] = []
    for pattern in vocab.vendor_patterns:
        found.extend(re.findall(pattern, d))
    return dedupe_first_seen(found)


def domain_alignment_score(
        experience_text: str,
        job_description: str,
        job_title: str,
        *,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """
    How much of the job's domain vocabulary the CV uses (0..15).

    round(cv_hits / min(cluster_size, 8) * 15), plus one point per vendor
    named in both texts (max 3), capped at 15.
    """
    e = lower(experience_text)

    score = 0
    domain = identify_job_domain(job_description, job_title, vocab)
    if domain is not None:
        keywords = vocab.cluster(domain)
        cv_hits = sum(1 for k in keywords if k in e)
        ratio = cv_hits / min(len(keywords), vocab.domain_keyword_cap)
        score = round_half_up(ratio * weights.domain_max)

    vendor_hits = sum(1 for v in extract_vendor_keywords(job_description, vocab) if v in e)
    if vendor_hits > 0:
        score += min(weights.vendor_bonus_cap, vendor_hits)

    return min(weights.domain_max, score)


# ---------------------------------------------------------------------------
# Keyword density
# ---------------------------------------------------------------------------

def keyword_density_score(
        experience_text: str,
        job_description: str,
        *,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """
    Share of long description tokens (> 4 chars) that also occur in the CV, scaled to 10.

    Description tokens are counted with repetition; CV tokens are a set.
    """
    cv_tokens = set(density_tokens(experience_text))
    desc_tokens = density_tokens(job_description)
    if not desc_tokens:
        return 0
    hits = sum(1 for tok in desc_tokens if tok in cv_tokens)
    return round_half_up(hits / len(desc_tokens) * weights.description_max)
