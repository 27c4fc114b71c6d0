from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

# Ordered (label, tokens) table. Order is significant wherever "first match wins".
OrderedTable = Tuple[Tuple[str, Tuple[str, ...]], ...]


_TECHNICAL_SKILLS = (
    "javascript", "typescript", "python", "java", "c++", "c#", "ruby", "go", "rust", "php",
    "react", "vue", "angular", "node.js", "express", "django", "flask",
    "sql", "postgresql", "mysql", "mongodb", "docker", "kubernetes", "aws", "azure",
)

_PRODUCT_SKILLS = (
    "product management", "agile", "scrum", "roadmap", "analytics", "jira", "figma",
    "user research", "a/b testing", "metrics", "kpis", "fintech", "payments",
    # crypto
    "crypto", "cryptocurrency", "blockchain", "defi", "bitcoin", "ethereum", "web3",
    "onchain", "smart contracts", "dao", "nft", "viral growth", "virality",
    "referral programs", "social engagement", "consumer growth",
    # AI / ML product
    "artificial intelligence", "ai", "machine learning", "ml", "data science",
    "predictive modeling", "ai algorithms", "ml frameworks", "ai products",
    "ai strategy", "ai governance", "ai ethics", "data analytics", "ai platform",
    "generative ai", "gen ai", "llm", "natural language processing", "computer vision",
)

_UNIVERSAL_SKILLS = ("leadership", "communication", "problem solving", "teamwork", "data analysis")

_SKILL_GAP_EXPLANATIONS = {
    "fintech": (
        "Experience in financial technology is highly valued for this {title} role. "
        "Consider highlighting any work with financial products, payments, or banking systems."
    ),
    "payments": (
        "Payments expertise is crucial for this role. Consider gaining experience with "
        "payment systems, transaction processing, or financial services."
    ),
    "metrics": (
        "Strong analytical skills with metrics and KPIs are essential. Consider showcasing "
        "experience with data analysis, A/B testing, or performance measurement."
    ),
    "a/b testing": (
        "A/B testing experience is important for product optimization. Consider learning "
        "about experimentation frameworks and statistical analysis."
    ),
    "user research": (
        "User research skills are valuable for understanding customer needs. Consider "
        "experience with user interviews, surveys, or usability testing."
    ),
    "figma": (
        "Design collaboration tools like Figma are commonly used. Consider familiarizing "
        "yourself with design tools and working with design teams."
    ),
    "jira": (
        "Project management tools like Jira are standard in most organizations. Consider "
        "gaining experience with agile project management platforms."
    ),
    "kpis": (
        "Key Performance Indicator (KPI) definition and tracking is essential for measuring "
        "product success. Consider experience with metrics and analytics."
    ),
    "data analysis": (
        "Data analysis skills are increasingly important for product decisions. Consider "
        "strengthening your analytical and statistical skills."
    ),
}

_GENERIC_GAP_EXPLANATION = (
    "{skill} appears to be important for this role based on the job description. "
    "Consider adding this skill to strengthen your profile."
)

# Experience scorer: iteration order decides which title token wins.
_EXPERIENCE_SENIORITY: OrderedTable = (
    ("senior", ("senior", "sr", "sr.", "lead", "group", "staff", "principal")),
    ("lead", ("lead", "senior", "sr", "group", "staff", "principal")),
    ("group", ("group", "senior", "sr", "lead", "staff", "principal")),
    ("staff", ("staff", "senior", "sr", "lead", "group", "principal")),
    ("principal", ("principal", "staff", "senior", "sr", "lead", "group")),
    ("junior", ("junior", "jr", "jr.", "associate", "entry")),
    ("director", ("director", "head", "vp")),
    ("head", ("head", "director", "vp", "chief")),
)

# Title scorer: director/head classes are wider than for the experience scorer.
_TITLE_SENIORITY: OrderedTable = (
    ("senior", ("senior", "sr", "sr.", "lead", "group", "staff", "principal")),
    ("lead", ("lead", "senior", "sr", "group", "staff", "principal")),
    ("group", ("group", "senior", "sr", "lead", "staff", "principal")),
    ("staff", ("staff", "senior", "sr", "lead", "group", "principal")),
    ("principal", ("principal", "staff", "senior", "sr", "lead", "group")),
    ("director", ("director", "head", "vp", "vice president", "principal", "senior")),
    ("head", ("head", "director", "vp", "principal", "senior", "lead")),
    ("junior", ("junior", "jr", "jr.", "associate", "entry")),
    # "" matches any text: a mid-level title accepts every candidate.
    ("mid", ("mid", "intermediate", "")),
)

_DOMAIN_CLUSTERS: OrderedTable = (
    ("fintech", (
        "fintech", "financial", "banking", "payments", "transactions", "money", "currency",
        "wallet", "credit", "debit", "fraud", "compliance", "pci", "kyc", "aml",
    )),
    ("payments", (
        "payments", "checkout", "billing", "invoicing", "revenue", "cashier", "pos",
        "terminal", "gateway", "processor", "merchant", "acquirer",
    )),
    ("government", (
        "government", "public sector", "municipal", "federal", "state", "civic", "policy",
        "regulation", "compliance", "procurement", "grants",
    )),
    ("saas", (
        "saas", "cloud", "subscription", "multi-tenant", "api", "integration", "platform",
        "enterprise", "b2b", "scalability",
    )),
    ("ecommerce", (
        "ecommerce", "retail", "marketplace", "shopping", "cart", "inventory", "fulfillment",
        "logistics", "b2c", "consumer",
    )),
    ("healthcare", (
        "healthcare", "medical", "patient", "clinical", "hipaa", "ehr", "telemedicine",
        "pharma", "hospital", "provider",
    )),
    ("crypto", (
        "crypto", "blockchain", "bitcoin", "ethereum", "defi", "nft", "web3",
        "smart contracts", "consensus", "mining",
    )),
)

_VENDOR_PATTERNS = (
    r"\b(react|vue|angular|node\.js|python|java|kubernetes|docker|aws|azure|gcp)\b",
    r"\b(stripe|paypal|square|plaid|twilio|salesforce|hubspot|zendesk)\b",
    r"\b(jira|confluence|figma|sketch|tableau|looker|mixpanel|amplitude)\b",
)


@dataclass(frozen=True)
class MatchVocabulary:
    """
    Every word list the scorers consult.

    Read-only and shared across calls. Tests substitute a smaller table with
    dataclasses.replace(DEFAULT_VOCABULARY, ...).
    """
    # --- role classification (title substrings) ---
    technical_title_markers: Tuple[str, ...] = ("engineer", "developer", "architect", "devops")
    product_title_markers: Tuple[str, ...] = (
        "product manager", "product lead", "head of product", "director of product",
        "head of ai", "ai product",
    )
    # "head of ..." titles count as product roles when the description talks about product.
    head_of_marker: str = "head of"
    head_of_description_marker: str = "product"

    # --- job skill vocabularies (description substrings) ---
    technical_skills: Tuple[str, ...] = _TECHNICAL_SKILLS
    product_skills: Tuple[str, ...] = _PRODUCT_SKILLS
    universal_skills: Tuple[str, ...] = _UNIVERSAL_SKILLS

    # --- skill inference from experience text ---
    product_role_markers: Tuple[str, ...] = ("product manager", "head of product")
    product_inferred_skills: Tuple[str, ...] = ("product management", "roadmap")
    leadership_markers: Tuple[str, ...] = ("senior", "lead", "principal", "director", "head")
    leadership_inferred_skills: Tuple[str, ...] = ("leadership", "communication")
    # Never reported as missing: these are assumed, not verifiable.
    unreported_skills: Tuple[str, ...] = ("product management", "roadmap", "leadership", "communication")
    pm_competencies: Tuple[str, ...] = ("product management", "leadership", "roadmap")
    specialized_title_markers: Tuple[str, ...] = ("ai", "crypto")
    specialized_description_markers: Tuple[str, ...] = ("artificial intelligence", "cryptocurrency")

    # --- gap explanations ---
    skill_gap_explanations: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(_SKILL_GAP_EXPLANATIONS))
    )
    generic_gap_explanation: str = _GENERIC_GAP_EXPLANATION
    requirement_marker: str = "require"
    responsibility_marker: str = "responsib"

    # --- seniority ---
    experience_seniority: OrderedTable = _EXPERIENCE_SENIORITY
    title_seniority: OrderedTable = _TITLE_SENIORITY
    executive_markers: Tuple[str, ...] = ("head", "director", "vp", "chief")
    # (candidate marker, job title markers): candidate one notch below the job.
    step_up_rules: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
        ("senior", ("principal", "group")),
        ("lead", ("principal",)),
    )

    # --- experience ---
    industries: Tuple[str, ...] = (
        "fintech", "healthcare", "e-commerce", "saas", "b2b", "b2c", "enterprise",
        "cpg", "retail", "food", "consumer goods", "ai", "artificial intelligence",
        "machine learning", "data science",
    )
    required_years_pattern: str = r"(\d+)\+?\s*years?"
    tenure_pattern: str = r"(\d{4})\s*[-–]\s*(\d{4}|present|current)"

    # --- titles ---
    core_roles: Tuple[str, ...] = (
        "product manager", "software engineer", "data scientist", "designer",
        "developer", "analyst", "engineer", "architect", "researcher",
    )
    partial_role_min_word_len: int = 3

    # --- domains ---
    domain_clusters: OrderedTable = _DOMAIN_CLUSTERS
    domain_keyword_cap: int = 8
    vendor_patterns: Tuple[str, ...] = _VENDOR_PATTERNS

    def cluster(self, name: str) -> Tuple[str, ...]:
        for label, keywords in self.domain_clusters:
            if label == name:
                return keywords
        return ()


@dataclass(frozen=True)
class ScoreWeights:
    """Point values and caps. Each sub-score maximum is documented in MatchBreakdown."""
    # skills
    skill_floor: int = 15
    skill_points_per_match: int = 8
    skill_competency_bonus: int = 5
    skill_ratio_threshold: float = 0.5
    skill_ratio_multiplier: int = 20
    skill_raw_cap: int = 40
    skill_scale: float = 0.75
    skill_max: int = 30

    # experience
    experience_executive: int = 22
    experience_step_up: int = 18
    experience_equivalent: int = 20
    experience_other_seniority: int = 12
    experience_no_seniority: int = 15
    experience_industry_bonus: int = 8
    experience_years_bonus: int = 6
    experience_years_exceeded_bonus: int = 8
    experience_years_margin: int = 3
    experience_raw_cap: int = 30
    experience_scale: float = 1.17
    experience_max: int = 35

    # title
    title_equivalent: int = 18
    title_step_up: int = 15
    title_other_seniority: int = 12
    title_no_seniority: int = 15
    title_partial: int = 10
    title_max: int = 20

    # domain
    domain_max: int = 15
    vendor_bonus_cap: int = 3

    # keyword density
    description_max: int = 10

    total_max: int = 100


DEFAULT_VOCABULARY = MatchVocabulary()
DEFAULT_WEIGHTS = ScoreWeights()
