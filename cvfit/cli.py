from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from cvfit import config
from cvfit.autoapply import select_auto_apply
from cvfit.core.text_processing import normalize_text
from cvfit.io.resume_loader import load_resume_text
from cvfit.matching.engine import rank_jobs
from cvfit.matching.types import ScoredJob
from cvfit.models import JobPosting
from cvfit.profile import NormalizedProfile, ParseIssue, normalize_profile


class InputFileError(Exception):
    """A profile or jobs file is missing or is not the expected JSON shape."""


@dataclass(frozen=True)
class MatchReport:
    considered_jobs: int
    skipped_jobs: int
    ranked: List[ScoredJob]
    auto_apply: List[ScoredJob]
    min_score: int
    profile_issues: List[ParseIssue]
    duration_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "considered_jobs": self.considered_jobs,
            "skipped_jobs": self.skipped_jobs,
            "ranked": [s.to_dict() for s in self.ranked],
            "auto_apply": {
                "min_score": self.min_score,
                "job_ids": [s.job.job_id for s in self.auto_apply],
                "titles": [s.job.title for s in self.auto_apply],
            },
            "profile_issues": [{"field": i.field, "reason": i.reason} for i in self.profile_issues],
            "duration_ms": self.duration_ms,
        }


def _warn(message: str) -> None:
    print(f"{config.LOG_PREFIX} WARNING: {message}", file=sys.stderr)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise InputFileError(f"file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        raise InputFileError(f"could not read {path}: {exc}") from exc


def load_profile(path: Path) -> Dict[str, Any]:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise InputFileError(f"{path}: profile must be a JSON object")
    return data


def load_jobs(path: Path) -> List[Any]:
    """A JSON list of job objects, or an object with a "jobs" list."""
    data = _read_json(path)
    if isinstance(data, Mapping):
        data = data.get("jobs")
    if not isinstance(data, list):
        raise InputFileError(f"{path}: expected a list of jobs or an object with a 'jobs' list")
    return data


def _has_experience(profile: Mapping[str, Any]) -> bool:
    return any(profile.get(k) for k in ("experience", "master_experience", "cv"))


def run_match(
        *,
        profile: Mapping[str, Any],
        jobs: Sequence[Any],
        top_k: Optional[int] = None,
        min_score: Optional[int] = None,
        applied_ids: Sequence[str] = (),
) -> MatchReport:
    start = time.time()

    normalized: NormalizedProfile = normalize_profile(profile)

    postings: List[JobPosting] = []
    skipped = 0
    for idx, raw in enumerate(jobs):
        if not isinstance(raw, Mapping):
            _warn(f"skipping job #{idx}: not a JSON object")
            skipped += 1
            continue
        postings.append(JobPosting.coerce(raw))

    ranked = rank_jobs(normalized, postings)
    threshold = config.load_auto_apply_config().min_score if min_score is None else min_score
    auto = select_auto_apply(ranked, min_score=threshold, applied_ids=applied_ids)

    return MatchReport(
        considered_jobs=len(postings),
        skipped_jobs=skipped,
        ranked=ranked if top_k is None else ranked[:top_k],
        auto_apply=auto,
        min_score=threshold,
        profile_issues=list(normalized.issues),
        duration_ms=int((time.time() - start) * 1000),
    )


def print_human_summary(report: MatchReport) -> None:
    print("\n=== CVFit Job Matches ===")
    print(f"Jobs considered: {report.considered_jobs} | skipped: {report.skipped_jobs}")
    print(f"Duration: {report.duration_ms}ms")

    for idx, item in enumerate(report.ranked, start=1):
        j = item.job
        b = item.breakdown
        company = f" @ {normalize_text(j.company)}" if j.company else ""
        print(f"\n{idx}) {normalize_text(j.title)}{company}")
        print(f"   score: {b.total}/100  [{item.quality.value}]")
        print(
            f"   skills {b.skills_match}/30 | experience {b.experience_match}/35 | "
            f"title {b.title_match}/20 | domain {b.domain_match}/15 | keywords {b.description_match}/10"
        )
        if b.matched_skills:
            print(f"   matched skills: {', '.join(b.matched_skills[:5])}")
        if b.missing_skills:
            gaps = ", ".join(f"{m.skill} ({m.importance.value})" for m in b.missing_skills[:5])
            print(f"   missing skills: {gaps}")

    print(f"\nAuto-apply candidates (score >= {report.min_score}):")
    if not report.auto_apply:
        print("   -")
    for item in report.auto_apply:
        print(f"   - {normalize_text(item.job.title)} ({item.score})")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="CVFit: rank job postings against a candidate profile")
    parser.add_argument("--profile", type=str, required=True, help="Path to a profile.json")
    parser.add_argument("--jobs", type=str, required=True, help="Path to a jobs.json (list of {title, description, ...})")
    parser.add_argument("--resume-text", type=str, default="", help="Optional CV .txt used when the profile has no experience")
    parser.add_argument("--resume-pdf", type=str, default="", help="Optional CV .pdf used when the profile has no experience")
    parser.add_argument("--top-k", type=int, default=None, help="How many matches to print")
    parser.add_argument("--min-score", type=int, default=None, help="Auto-apply threshold (default from CVFIT_AUTO_APPLY_MIN_SCORE)")
    parser.add_argument("--applied", action="append", default=[], help="Job id already applied to (repeatable)")
    parser.add_argument("--json", action="store_true", help="Print JSON only (machine-readable)")
    args = parser.parse_args(argv)

    try:
        profile = load_profile(Path(args.profile))
        jobs = load_jobs(Path(args.jobs))
    except InputFileError as exc:
        print(f"{config.LOG_PREFIX} {exc}", file=sys.stderr)
        raise SystemExit(2)

    if not _has_experience(profile):
        loaded = load_resume_text(
            resume_text_path=args.resume_text or None,
            resume_pdf_path=args.resume_pdf or None,
        )
        if loaded.found:
            profile = {**profile, "experience": loaded.text}

    report = run_match(
        profile=profile,
        jobs=jobs,
        top_k=args.top_k if args.top_k is not None else config.default_top_k(),
        min_score=args.min_score,
        applied_ids=args.applied,
    )

    for issue in report.profile_issues:
        _warn(f"profile field '{issue.field}': {issue.reason}")

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_human_summary(report)


if __name__ == "__main__":
    main()
