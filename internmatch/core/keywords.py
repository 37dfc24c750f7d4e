"""Keyword lookup tables used to categorize titles and match profiles.

These are plain substring heuristics over lower-cased text, not a classifier.
Rules are evaluated in order; where a table maps to a single category the
first matching rule wins.
"""

# (qualification keyword, job-title keywords)
EDUCATION_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("engineering", ("engineer", "civil", "it")),
    ("computer", ("it",)),
    ("finance", ("finance",)),
    ("social", ("social",)),
]

# (skill keyword, job-title keyword). Each matching pair is worth a fixed bonus.
SKILL_RULES: list[tuple[str, str]] = [
    ("programming", "it"),
    ("finance", "finance"),
    ("social", "social"),
    ("communication", "media"),
    ("data", "data"),
]

# Scoring sector derived from the job title.
SECTOR_RULES: list[tuple[tuple[str, ...], str]] = [
    (("it", "software", "data"), "technology"),
    (("finance",), "finance"),
    (("engineer",), "engineering"),
    (("social",), "social work"),
    (("urban",), "urban planning"),
]
DEFAULT_SECTOR = "general"

# Display sector for the legacy record projection.
DISPLAY_SECTOR_RULES: list[tuple[tuple[str, ...], str]] = [
    (("it", "software", "data", "tech"), "Information Technology"),
    (("finance", "account"), "Banking & Finance"),
    (("civil", "engineer"), "Engineering"),
    (("social", "community"), "Social Work"),
    (("urban", "planning"), "Urban Planning"),
    (("media", "communication"), "Media & Communication"),
]
DEFAULT_DISPLAY_SECTOR = "General"

# Skills implied by a job title. Unlike the sector tables, every matching rule contributes.
TITLE_SKILL_RULES: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (("it", "software"), ("Programming", "Software Development")),
    (("data",), ("Data Analysis", "Database Management")),
    (("finance",), ("Financial Analysis", "Accounting")),
    (("civil",), ("Civil Engineering", "Construction Management")),
    (("social",), ("Community Development", "Social Work")),
    (("urban",), ("Urban Planning", "Project Management")),
    (("media",), ("Communication", "Social Media")),
]
DEFAULT_TITLE_SKILLS = "Professional Skills"


def _first_match(
    text: str,
    rules: list[tuple[tuple[str, ...], str]],
    default: str,
) -> str:
    lowered = text.lower()
    for keywords, label in rules:
        if any(kw in lowered for kw in keywords):
            return label
    return default


def categorize_title(title: str) -> str:
    """Return the scoring sector for a job title."""
    return _first_match(title, SECTOR_RULES, DEFAULT_SECTOR)


def display_sector(title: str) -> str:
    """Return the human-facing sector label for a job title."""
    return _first_match(title, DISPLAY_SECTOR_RULES, DEFAULT_DISPLAY_SECTOR)


def skills_from_title(title: str) -> str:
    """Return a comma-separated list of skills implied by a job title."""
    lowered = title.lower()
    skills: list[str] = []
    for keywords, implied in TITLE_SKILL_RULES:
        if any(kw in lowered for kw in keywords):
            skills.extend(implied)
    return ", ".join(skills) or DEFAULT_TITLE_SKILLS
