"""Core data models for the internship match engine."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from internmatch.core.keywords import categorize_title, display_sector

UNPAID = "Unpaid"


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


class Internship(BaseModel):
    """A catalog internship in canonical form.

    Frozen. ``is_paid``, ``location``, ``sector`` and ``display_sector`` are
    derived once from the stored fields when the record is built, so scoring
    never re-derives them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    company: str = ""
    city: str = ""
    state: str = ""
    stipend: str = UNPAID
    duration: str = ""
    start_date: str = ""
    posted_date: str = ""
    apply_by: str = ""
    total_openings: int | None = None
    remaining_slots: int | None = None
    job_type: str = ""
    is_top_company: bool = False

    is_paid: bool = False
    location: str = ""
    sector: str = ""
    display_sector: str = ""

    @model_validator(mode="before")
    @classmethod
    def derive_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        stipend = _text(data.get("stipend")) or UNPAID
        title = _text(data.get("title"))
        city = _text(data.get("city"))
        state = _text(data.get("state"))
        data.update(stipend=stipend, title=title, city=city, state=state)
        data["is_paid"] = stipend.lower() != UNPAID.lower()
        data["location"] = ", ".join(part for part in (city, state) if part)
        data["sector"] = categorize_title(title)
        data["display_sector"] = display_sector(title)
        return data

    @property
    def capacity_ratio(self) -> float | None:
        """remaining/total, or None when either side is unknown."""
        if self.remaining_slots is None or not self.total_openings:
            return None
        return self.remaining_slots / self.total_openings


class UserProfile(BaseModel):
    """Applicant profile supplied with each recommendation request.

    Accepts both snake_case and the camelCase keys used by the web forms.
    Missing fields default to empty strings and score neutrally.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(default="", validation_alias=AliasChoices("name", "candidateName", "candidate_name"))
    qualification: str = ""
    course: str = ""
    specialization: str = ""
    skills: str = ""
    preferred_location: str = Field(
        default="", validation_alias=AliasChoices("preferred_location", "preferredLocation"),
    )
    preferred_industry: str = Field(
        default="", validation_alias=AliasChoices("preferred_industry", "preferredIndustry"),
    )
    state: str = ""
    category: str = ""
    district: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class LegacyInternship(BaseModel):
    """Projection of an internship into the older portal record shape."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: str
    company: str
    location: str
    state: str
    district: str
    sector: str
    area: str
    opportunities: int
    description: str
    qualifications: str = "As per job requirements"
    skills: str
    salary: str
    duration: str
    type: str
    preferred_gender: str = "Any"
    company_logo: str
    applied: int = 0
    created_at: datetime = Field(default_factory=datetime.now)


class ScoredRecommendation(BaseModel):
    """An internship paired with its ranking outcome.

    Frozen. Enrichment produces a copy via ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    internship: Internship
    compatibility_score: int | None = Field(default=None, ge=0, le=100)
    ai_match_score: int = Field(default=0, ge=0, le=100)
    ai_reasoning: str = ""
    ai_benefits: tuple[str, ...] = ()
    ai_key_benefits: tuple[str, ...] = ()
    ai_rank: int = Field(default=1, ge=1)
    recommended_by_ai: bool = False

    application_deadline: str = ""
    start_date: str = ""
    openings_available: int = 1
    is_immediate_start: bool = False
    converted_format: LegacyInternship | None = None


class CatalogStats(BaseModel):
    """Aggregate statistics over the loaded catalog."""

    total: int
    paid: int
    unpaid: int
    full_time: int
    part_time: int
    states: int
    companies: int
    avg_stipend: int


class EngineStatus(BaseModel):
    """Snapshot of the recommendation engine state."""

    initialized: bool
    external_service_available: bool
    data_loaded: bool
    recommendations_count: int
    has_cache: bool
    cache_age_seconds: float
