from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from cvfit.core.text_processing import dedupe_first_seen

# Profile fields that may hold the CV / work-history text (first non-empty wins).
EXPERIENCE_FIELDS = ("experience", "master_experience", "cv")

# Keys tried, in order, for the work-history list inside a CV JSON document.
WORK_HISTORY_KEYS = ("work_experience", "workExperience", "experience")
WORK_ENTRY_FIELDS = ("title", "company", "description", "responsibilities")
EDUCATION_FIELDS = ("degree", "field")
SUMMARY_FIELDS = ("summary", "objective", "professional_summary")

# Below this many explicit skills, skills embedded in the CV JSON are merged in.
MIN_EXPLICIT_SKILLS = 5


@dataclass(frozen=True)
class ParseIssue:
    field: str
    reason: str


@dataclass(frozen=True)
class ParseResult:
    """A parsed value plus whatever went wrong on the way (never raised)."""
    value: Any
    issues: Tuple[ParseIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues


@dataclass(frozen=True)
class NormalizedProfile:
    """
    Canonical candidate shape consumed by the scorers.

    skills: ordered, de-duplicated, case preserved (lowercased only when compared)
    experience_text: one free-text blob, possibly empty
    issues: normalization problems that were collapsed to a conservative default
    """
    skills: Tuple[str, ...] = ()
    experience_text: str = ""
    issues: Tuple[ParseIssue, ...] = field(default_factory=tuple)


def _field(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _decode_json(raw: str, field_name: str) -> ParseResult:
    try:
        return ParseResult(json.loads(raw))
    except (ValueError, RecursionError) as exc:
        return ParseResult(None, (ParseIssue(field_name, f"invalid JSON: {exc}"),))


def _strings(items: Any) -> List[str]:
    return [s for s in items if isinstance(s, str) and s.strip()]


def normalize_skills(raw: Any, *, field_name: str = "skills") -> ParseResult:
    """
    Coerce any accepted skills shape into an ordered list of skill strings.

    Accepted shapes:
      - None                        -> []
      - ["a", "b"]                  -> as-is
      - [["a", "b"], ["c"]]         -> flattened one level
      - {"technical": [...], ...}   -> union of all groups (a bare string counts as one skill)
      - '<JSON of any of the above>'
    Non-string entries are discarded. Anything else degrades to [] with an issue.
    """
    if raw is None:
        return ParseResult([])

    if isinstance(raw, str):
        if not raw.strip():
            return ParseResult([])
        decoded = _decode_json(raw, field_name)
        if not decoded.ok:
            return ParseResult([], decoded.issues)
        if isinstance(decoded.value, str):
            # A JSON string literal is not a skills container.
            return ParseResult([], (ParseIssue(field_name, "JSON value is not a list or object"),))
        return normalize_skills(decoded.value, field_name=field_name)

    out: List[str] = []
    if isinstance(raw, Mapping):
        for group in raw.values():
            if isinstance(group, str):
                if group.strip():
                    out.append(group)
            elif isinstance(group, (list, tuple)):
                out.extend(_strings(group))
        return ParseResult(dedupe_first_seen(out))

    if isinstance(raw, (list, tuple)):
        for item in raw:
            if isinstance(item, str):
                if item.strip():
                    out.append(item)
            elif isinstance(item, (list, tuple)):
                out.extend(_strings(item))
        return ParseResult(dedupe_first_seen(out))

    return ParseResult([], (ParseIssue(field_name, f"unsupported type {type(raw).__name__}"),))


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(_strings(value))
    return ""


def extract_cv_text(cv: Mapping[str, Any]) -> str:
    """
    Flatten a structured CV document into one text blob.

    Order: work history (title, company, description, responsibilities),
    education (degree, field), then summary/objective/professional_summary.
    """
    parts: List[str] = []

    work = None
    for key in WORK_HISTORY_KEYS:
        work = cv.get(key)
        if work:
            break
    if isinstance(work, list):
        for entry in work:
            if isinstance(entry, Mapping):
                parts.extend(_as_text(entry.get(f)) for f in WORK_ENTRY_FIELDS)

    education = cv.get("education")
    if isinstance(education, list):
        for entry in education:
            if isinstance(entry, Mapping):
                parts.extend(_as_text(entry.get(f)) for f in EDUCATION_FIELDS)

    parts.extend(_as_text(cv.get(f)) for f in SUMMARY_FIELDS)
    return "\n".join(p for p in parts if p)


def parse_cv_json(raw: str, *, field_name: str = "experience") -> ParseResult:
    """
    Parse a CV text field that looks like a JSON object.

    Returns ParseResult(value=dict) on success. On failure value is None and
    the caller keeps the original string unchanged.
    """
    decoded = _decode_json(raw, field_name)
    if not decoded.ok:
        return decoded
    if not isinstance(decoded.value, Mapping):
        return ParseResult(None, (ParseIssue(field_name, "JSON value is not an object"),))
    return ParseResult(dict(decoded.value))


def _raw_experience(profile: Any) -> Tuple[str, Any]:
    for name in EXPERIENCE_FIELDS:
        value = _field(profile, name)
        if value:
            return name, value
    return EXPERIENCE_FIELDS[0], None


def normalize_profile(profile: Any) -> NormalizedProfile:
    """
    Turn a duck-typed candidate record (mapping or object) into a NormalizedProfile.

    Never raises: malformed fields degrade to the most conservative reading
    (no skills / the original experience string) and are recorded in .issues.
    """
    if profile is None:
        return NormalizedProfile()

    issues: List[ParseIssue] = []

    skills_result = normalize_skills(_field(profile, "skills"))
    issues.extend(skills_result.issues)
    skills: List[str] = list(skills_result.value)

    field_name, raw_experience = _raw_experience(profile)
    experience_text = ""
    cv: Optional[Dict[str, Any]] = None

    if isinstance(raw_experience, str):
        experience_text = raw_experience
        if raw_experience.strip().startswith("{"):
            parsed = parse_cv_json(raw_experience, field_name=field_name)
            issues.extend(parsed.issues)
            if parsed.ok:
                cv = parsed.value
    elif isinstance(raw_experience, Mapping):
        cv = dict(raw_experience)
    elif isinstance(raw_experience, list):
        # A bare work-history list.
        cv = {"work_experience": raw_experience}
    elif raw_experience is not None:
        issues.append(ParseIssue(field_name, f"unsupported type {type(raw_experience).__name__}"))

    if cv is not None:
        experience_text = extract_cv_text(cv)
        if len(skills) < MIN_EXPLICIT_SKILLS and cv.get("skills"):
            cv_skills = normalize_skills(cv.get("skills"), field_name=f"{field_name}.skills")
            issues.extend(cv_skills.issues)
            skills = dedupe_first_seen(skills + list(cv_skills.value))

    return NormalizedProfile(
        skills=tuple(skills),
        experience_text=experience_text,
        issues=tuple(issues),
    )
