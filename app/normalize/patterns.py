from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from app.core.config import settings

ROLE_TITLE_KEYWORDS = (
    "manager",
    "analyst",
    "engineer",
    "consultant",
    "officer",
    "specialist",
    "assistant",
    "developer",
    "director",
    "coordinator",
    "administrator",
    "executive",
    "advisor",
    "adviser",
    "associate",
    "supervisor",
    "head of",
    "designer",
    "architect",
    "accountant",
    "technician",
    "intern",
    "representative",
    "scientist",
    "teacher",
    "nurse",
)

LOCALITY_KEYWORDS = (
    "linkedin",
    "london",
    "uk",
    "united kingdom",
    "manchester",
    "birmingham",
    "leeds",
    "glasgow",
    "edinburgh",
    "bristol",
)

# Heading phrases per segmenter state, compared against the lower-cased line
# with "&" read as "and".
SECTION_HEADINGS: dict[str, tuple[str, ...]] = {
    "summary": (
        "summary",
        "professional summary",
        "profile",
        "profile summary",
        "personal profile",
        "personal statement",
        "career summary",
        "about me",
        "objective",
        "career objective",
    ),
    "experience": (
        "experience",
        "work experience",
        "professional experience",
        "relevant experience",
        "employment",
        "employment history",
        "work history",
        "career history",
        "employment experience",
        "employment and experience",
        "work experience and achievements",
        "professional experience and achievements",
        "experience and achievements",
        "career experience",
        "professional background",
    ),
    "education": (
        "education",
        "academic",
        "academic background",
        "academic qualifications",
        "qualifications",
        "education and training",
        "education and qualifications",
        "qualifications and education",
        "education and certifications",
    ),
    "skills": (
        "skills",
        "key skills",
        "core skills",
        "technical skills",
        "core competencies",
    ),
    "projects": (
        "projects",
        "selected projects",
        "project highlights",
        "key projects",
    ),
    "certifications": (
        "certifications",
        "certificates",
        "licenses",
        "licences",
        "training",
        "courses",
    ),
}

DEGREE_KEYWORDS = (
    "bsc",
    "ba",
    "beng",
    "msc",
    "ma",
    "meng",
    "mba",
    "phd",
    "llb",
    "bachelor",
    "master",
    "diploma",
    "degree",
    "certificate",
    "hnd",
    "hnc",
    "btec",
    "a-levels",
    "a levels",
    "gcse",
    "gcses",
    "nvq",
)

KNOWN_SKILLS = (
    "Python",
    "SQL",
    "Excel",
    "Power BI",
    "Tableau",
    "JavaScript",
    "TypeScript",
    "React",
    "Java",
    "AWS",
    "Azure",
    "Docker",
    "Kubernetes",
    "Salesforce",
    "CRM",
    "SAP",
    "Agile",
    "Scrum",
    "Project Management",
    "Stakeholder Management",
    "Budgeting",
    "Forecasting",
    "Data Analysis",
    "Reporting",
    "Negotiation",
    "Account Management",
    "Business Development",
    "Customer Service",
    "Recruitment",
    "Marketing",
    "Social Media",
    "SEO",
    "Leadership",
    "Team Management",
    "Communication",
    "Problem Solving",
    "Compliance",
    "Risk Management",
    "Procurement",
    "Logistics",
    "Sales",
)

DEFAULT_SKILLS = (
    "Customer Service",
    "Stakeholder Management",
    "Time Management",
    "Problem Solving",
)


@dataclass(frozen=True)
class HeuristicConfig:
    role_keywords: tuple[str, ...] = ROLE_TITLE_KEYWORDS
    locality_keywords: tuple[str, ...] = LOCALITY_KEYWORDS
    contact_scan_lines: int = 6
    max_name_chars: int = 80
    max_date_line_chars: int = 40
    max_header_chars: int = 80


def _merge(base: tuple[str, ...], extra: tuple[str, ...]) -> tuple[str, ...]:
    merged = list(base)
    for item in extra:
        value = item.strip().lower()
        if value and value not in merged:
            merged.append(value)
    return tuple(merged)


@lru_cache(maxsize=1)
def default_heuristics() -> HeuristicConfig:
    return HeuristicConfig(
        role_keywords=_merge(ROLE_TITLE_KEYWORDS, settings.extra_role_keywords),
        locality_keywords=_merge(LOCALITY_KEYWORDS, settings.extra_locality_keywords),
    )
