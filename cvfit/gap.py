from __future__ import annotations

from typing import Iterable, List, Sequence

from cvfit.core.text_processing import count_mentions, lower
from cvfit.models import Importance, MissingSkill
from cvfit.vocab import DEFAULT_VOCABULARY, MatchVocabulary


def explain_skill_gap(skill: str, job_title: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> str:
    """Templated gap text for a missing skill; unknown skills get the generic message."""
    template = vocab.skill_gap_explanations.get(lower(skill))
    if template is None:
        return vocab.generic_gap_explanation.format(skill=skill)
    return template.format(title=lower(job_title), skill=skill)


def skill_importance(skill: str, job_description: str, vocab: MatchVocabulary = DEFAULT_VOCABULARY) -> Importance:
    """
    Importance tier from how the description talks about the skill.

    - critical: mentioned more than twice, or the description states requirements
    - important: mentioned twice, or the description lists responsibilities
    - nice-to-have: otherwise

    Requirement / responsibility markers are checked against the whole
    description, not a window around the skill.
    """
    d = lower(job_description)
    s = lower(skill)
    mentions = count_mentions(d, s)
    present = s in d

    if mentions > 2 or (present and vocab.requirement_marker in d):
        return Importance.CRITICAL
    if mentions > 1 or (present and vocab.responsibility_marker in d):
        return Importance.IMPORTANT
    return Importance.NICE_TO_HAVE


def find_missing_skills(
        *,
        job_skills: Sequence[str],
        candidate_skills: Iterable[str],
        job_title: str,
        job_description: str,
        vocab: MatchVocabulary = DEFAULT_VOCABULARY,
) -> List[MissingSkill]:
    """
    Job skills the candidate lacks, in job-skill order.

    candidate_skills should already include inferred skills; the skills in
    vocab.unreported_skills are never reported because they are assumed, not
    verifiable.
    """
    have = {lower(s) for s in candidate_skills}
    unreported = set(vocab.unreported_skills)

    out: List[MissingSkill] = []
    for skill in job_skills:
        s = lower(skill)
        if s in have or s in unreported:
            continue
        out.append(
            MissingSkill(
                skill=skill,
                explanation=explain_skill_gap(skill, job_title, vocab),
                importance=skill_importance(skill, job_description, vocab),
            )
        )
    return out
