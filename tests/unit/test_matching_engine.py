import copy
import json
from dataclasses import dataclass, replace

import pytest

from cvfit.matching.engine import compute_match, match_quality, rank_jobs, score_job
from cvfit.matching.types import MatchBreakdown
from cvfit.models import Importance, JobPosting, MatchQuality
from cvfit.vocab import DEFAULT_VOCABULARY, DEFAULT_WEIGHTS, MatchVocabulary


@dataclass
class Job:
    title: str
    description: str


def test_senior_pm_applying_to_principal_pm():
    profile = {"skills": ["Python", "Leadership"], "experience": "Senior Product Manager at Acme, 2019–2023"}
    job = Job(
        title="Principal Product Manager",
        description="Experience with python is a plus. Own the roadmap and evolve the roadmap quarterly.",
    )

    b = compute_match(profile, job)

    assert b.skills_match == 30
    assert b.experience_match == 21
    # senior -> principal is a step-up
    assert b.title_match == 15
    assert b.domain_match == 0
    assert b.description_match == 0
    assert b.total == 66
    assert b.matched_skills == ("Python",)
    assert b.missing_skills == ()
    assert [d.category for d in b.details] == ["Skills Match", "Experience Match", "Title Match"]
    assert b.details[0].description == "1 matching skills: Python"


def test_years_requirement_met_and_exceeded():
    job = Job(
        title="Senior Software Engineer",
        description="We require 5+ years of Python experience building APIs.",
    )
    b = compute_match({"skills": [], "experience": "Software Engineer at Initech 2015–2023"}, job)
    # 12 (no equivalent seniority) + 6 (years met), scaled by 1.17
    assert b.experience_match == 21

    b = compute_match({"skills": [], "experience": "Software Engineer at Initech 2010–2023"}, job)
    assert b.experience_match == 23


def test_domain_zero_when_cv_lacks_domain_vocabulary():
    job = Job(title="Product Manager, Payments", description=" ".join(["fintech payments"] * 5))
    b = compute_match({"skills": [], "experience": "Teacher at a public school."}, job)
    assert b.domain_match == 0
    assert "Domain Match" not in [d.category for d in b.details]


def test_empty_profile_scores_experience_baseline_only():
    b = compute_match({}, Job(title="Product Manager", description="Own the roadmap."))
    assert b.sub_scores == (0, 18, 0, 0, 0)
    assert b.total == 18
    assert b.matched_skills == ()

    b = compute_match({}, Job(title="Senior Product Manager", description="Own the roadmap."))
    assert b.experience_match == 14
    assert b.total == 14


def test_missing_profile_or_job_yields_empty_breakdown():
    job = Job(title="Engineer", description="python")
    assert compute_match(None, job) == MatchBreakdown.empty()
    assert compute_match({"skills": ["python"]}, None) == MatchBreakdown.empty()
    assert MatchBreakdown.empty().total == 0


def test_job_fields_of_wrong_type_are_treated_as_empty():
    b = compute_match({"skills": ["SQL"], "experience": "Analyst"}, {"title": 42, "description": None})
    assert b.skills_match == 0
    assert b.description_match == 0
    assert b.experience_match == 18


def test_mid_level_title_accepts_any_candidate():
    job = Job(title="Mid-level Software Engineer", description="")
    b = compute_match({"experience": "Software Engineer at Initech"}, job)
    assert b.title_match == 18


def test_cv_json_profile_against_fixture_jobs(cv_json_profile, jobs):
    ranked = rank_jobs(cv_json_profile, jobs)
    assert [s.job.job_id for s in ranked] == ["j1", "j3", "j2"]

    top = ranked[0]
    b = top.breakdown
    assert b.sub_scores == (22, 35, 18, 4, 3)
    assert b.total == 82
    assert top.quality is MatchQuality.EXCELLENT
    assert b.matched_skills == ("SQL", "Jira", "A/B testing")
    assert [(m.skill, m.importance) for m in b.missing_skills] == [
        ("fintech", Importance.CRITICAL),
        ("payments", Importance.CRITICAL),
    ]

    assert [s.score for s in ranked[1:]] == [18, 14]
    assert ranked[-1].quality is MatchQuality.POOR


def test_adding_a_requested_skill_does_not_lower_skills_match():
    job = Job(title="Data Engineer", description="python and sql pipelines")
    before = compute_match({"skills": ["SQL"], "experience": ""}, job)
    after = compute_match({"skills": ["SQL", "Python"], "experience": ""}, job)
    assert after.skills_match >= before.skills_match
    assert after.skills_match > before.skills_match


def test_fifth_explicit_skill_turns_off_cv_skill_merge():
    # Fewer than 5 explicit skills pull in the CV skills; a 5th explicit skill
    # stops the merge, so adding a skill can lower skills_match.
    cv = json.dumps({"summary": "Engineer", "skills": ["Python", "SQL", "Docker"]})
    job = Job(title="Backend Engineer", description="python, sql, docker and aws")
    explicit = ["Cobol", "Fortran", "Pascal", "Lisp"]

    merged = compute_match({"skills": explicit, "experience": cv}, job)
    assert merged.matched_skills == ("Python", "SQL", "Docker")
    assert merged.skills_match == 22

    unmerged = compute_match({"skills": explicit + ["AWS"], "experience": cv}, job)
    assert unmerged.matched_skills == ("AWS",)
    assert unmerged.skills_match == 11


def test_inputs_and_vocabulary_are_not_mutated():
    profile = {
        "skills": {"technical": ["SQL", "Python"], "soft": "Leadership"},
        "experience": json.dumps({"work_experience": [{"title": "Senior Data Engineer"}], "skills": ["Docker"]}),
    }
    job = {"id": "j1", "title": "Senior Data Engineer", "description": "We require python, sql and docker. 5 years."}
    profile_before = copy.deepcopy(profile)
    job_before = copy.deepcopy(job)
    vocab_before = MatchVocabulary()
    assert DEFAULT_VOCABULARY == vocab_before

    compute_match(profile, job)
    rank_jobs(profile, [job, job])

    assert profile == profile_before
    assert job == job_before
    assert DEFAULT_VOCABULARY == vocab_before


def test_custom_weights_are_honoured():
    job = Job(title="Data Analyst", description="")
    profile = {"experience": "Data Scientist"}
    assert compute_match(profile, job).title_match == 10
    weights = replace(DEFAULT_WEIGHTS, title_partial=4)
    assert compute_match(profile, job, weights=weights).title_match == 4


def test_current_year_pins_open_ended_ranges():
    job = Job(title="Software Engineer", description="5 years of experience")
    profile = {"experience": "Software Engineer, 2021 - present"}
    early = compute_match(profile, job, current_year=2024)
    late = compute_match(profile, job, current_year=2026)
    # 15 flat vs 15 + 6 years bonus
    assert early.experience_match == 18
    assert late.experience_match == 25


def test_breakdown_to_dict_uses_camel_case_keys():
    job = Job(title="Data Engineer", description="We require sql and python.")
    d = compute_match({"skills": ["SQL"], "experience": "Data Engineer"}, job).to_dict()
    assert list(d) == [
        "skillsMatch",
        "experienceMatch",
        "titleMatch",
        "domainMatch",
        "descriptionMatch",
        "total",
        "matchedSkills",
        "missingSkills",
        "details",
    ]
    assert d["matchedSkills"] == ["SQL"]
    assert d["missingSkills"][0]["skill"] == "python"
    assert d["missingSkills"][0]["importance"] == "critical"
    assert set(d["details"][0]) == {"category", "score", "max", "description"}


# ------------------------------------------------------------------
# Properties over a handful of realistic pairs
# ------------------------------------------------------------------

PROFILES = [
    {},
    {"skills": ["Python", "Docker", "AWS", "SQL"], "experience": "Senior Software Engineer, SaaS platform, 2012 - 2024"},
    {"skills": {"pm": ["Roadmap", "Jira", "Figma"]}, "experience": "Head of Product, fintech payments wallet, 2015 - present"},
    {"skills": '["Leadership"]', "experience": "Lead Designer at a healthcare provider"},
]

JOBS = [
    Job(title="Senior Software Engineer", description="We require 5+ years of Python, Docker and AWS on our SaaS platform."),
    Job(title="Head of Product", description="Fintech payments wallet. Roadmap, Jira, Figma, leadership. 8 years."),
    Job(title="Principal Designer", description="Healthcare patient experience; figma responsibilities."),
    Job(title="", description=""),
]

MAXIMA = (30, 35, 20, 15, 10)


@pytest.mark.parametrize("profile", PROFILES)
@pytest.mark.parametrize("job", JOBS)
def test_breakdown_invariants(profile, job):
    b = compute_match(profile, job, current_year=2025)

    assert 0 <= b.total <= 100
    assert b.total == min(100, sum(b.sub_scores))
    for score, cap in zip(b.sub_scores, MAXIMA):
        assert 0 <= score <= cap

    missing = {m.skill.lower() for m in b.missing_skills}
    assert missing.isdisjoint(s.lower() for s in b.matched_skills)
    assert all(d.score > 0 for d in b.details)

    # pure: same inputs, same output
    assert compute_match(profile, job, current_year=2025) == b


# ------------------------------------------------------------------
# Quality bands and ranking
# ------------------------------------------------------------------

@pytest.mark.parametrize(
    "total, expected",
    [
        (100, MatchQuality.EXCELLENT),
        (80, MatchQuality.EXCELLENT),
        (79, MatchQuality.GOOD),
        (60, MatchQuality.GOOD),
        (40, MatchQuality.FAIR),
        (39, MatchQuality.POOR),
        (0, MatchQuality.POOR),
    ],
)
def test_match_quality_bands(total, expected):
    assert match_quality(total) is expected


def test_quality_colors():
    assert MatchQuality.EXCELLENT.color == "green"
    assert MatchQuality.POOR.color == "red"


def test_score_job_coerces_mapping_and_keeps_id():
    scored = score_job({"skills": ["SQL"]}, {"id": 7, "title": "Analyst", "description": "sql"})
    assert isinstance(scored.job, JobPosting)
    assert scored.job.job_id == "7"

    # falsy ids are still ids
    assert score_job({}, {"id": 0, "title": "Analyst"}).job.job_id == "0"
    assert score_job({}, {"job_id": "x9", "title": "Analyst"}).job.job_id == "x9"
    assert scored.to_dict()["quality"] == {"label": scored.quality.value, "color": scored.quality.color}


def test_rank_jobs_top_n_and_stable_ties():
    jobs = [
        {"id": "a", "title": "Barista", "description": "coffee"},
        {"id": "b", "title": "Cook", "description": "food"},
        {"id": "c", "title": "Software Engineer", "description": "python"},
    ]
    ranked = rank_jobs({"skills": ["Python"], "experience": "Software Engineer"}, jobs, top_n=2)
    assert [s.job.job_id for s in ranked] == ["c", "a"]
