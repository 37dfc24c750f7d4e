"""Tests for core schemas: Internship, UserProfile, ScoredRecommendation."""

import pytest
from pydantic import ValidationError

from internmatch.core.schemas import Internship, ScoredRecommendation, UserProfile


def _make_internship(**overrides: object) -> Internship:
    defaults: dict[str, object] = {
        "id": "AICTE_1",
        "title": "DATA SCIENCE INTERN",
        "company": "Tech Solutions India",
        "city": "Bangalore",
        "state": "Karnataka",
        "stipend": "15000 /month",
    }
    defaults.update(overrides)
    return Internship(**defaults)  # type: ignore[arg-type]


class TestInternship:
    def test_derived_fields(self) -> None:
        i = _make_internship()
        assert i.is_paid is True
        assert i.location == "Bangalore, Karnataka"
        assert i.sector == "technology"
        assert i.display_sector == "Information Technology"

    def test_unpaid_sentinel(self) -> None:
        assert _make_internship(stipend="Unpaid").is_paid is False
        assert _make_internship(stipend="unpaid").is_paid is False

    def test_missing_stipend_is_unpaid(self) -> None:
        i = _make_internship(stipend="")
        assert i.stipend == "Unpaid"
        assert i.is_paid is False

    def test_location_without_city(self) -> None:
        assert _make_internship(city="").location == "Karnataka"

    def test_numeric_text_inputs(self) -> None:
        i = _make_internship(stipend=12000, city=560001, title=None)
        assert i.stipend == "12000"
        assert i.is_paid is True
        assert i.location == "560001, Karnataka"
        assert i.title == ""
        assert i.sector == "general"

    def test_derived_fields_not_overridable(self) -> None:
        i = _make_internship(stipend="Unpaid", is_paid=True, sector="finance")
        assert i.is_paid is False
        assert i.sector == "technology"

    def test_frozen_model(self) -> None:
        i = _make_internship()
        with pytest.raises(ValidationError):
            i.title = "New Title"  # type: ignore[misc]

    def test_capacity_ratio(self) -> None:
        assert _make_internship(total_openings=10, remaining_slots=2).capacity_ratio == 0.2
        assert _make_internship(total_openings=10).capacity_ratio is None
        assert _make_internship(remaining_slots=2).capacity_ratio is None


class TestUserProfile:
    def test_camel_case_aliases(self) -> None:
        p = UserProfile.model_validate({
            "candidateName": "Ravi",
            "preferredLocation": "Pune",
            "preferredIndustry": "Finance",
        })
        assert p.name == "Ravi"
        assert p.preferred_location == "Pune"
        assert p.preferred_industry == "Finance"

    def test_snake_case_names(self) -> None:
        p = UserProfile(name="Ravi", preferred_location="Pune")
        assert p.name == "Ravi"
        assert p.preferred_location == "Pune"

    def test_none_becomes_empty(self) -> None:
        p = UserProfile.model_validate({"skills": None, "category": None})
        assert p.skills == ""
        assert p.category == ""

    def test_all_optional(self) -> None:
        p = UserProfile()
        assert p.qualification == ""
        assert p.district == ""


class TestScoredRecommendation:
    def test_defaults(self) -> None:
        r = ScoredRecommendation(internship=_make_internship())
        assert r.compatibility_score is None
        assert r.ai_benefits == ()
        assert r.openings_available == 1
        assert r.converted_format is None
        assert r.recommended_by_ai is False

    def test_score_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ScoredRecommendation(internship=_make_internship(), ai_match_score=101)

    def test_rank_is_one_based(self) -> None:
        with pytest.raises(ValidationError):
            ScoredRecommendation(internship=_make_internship(), ai_rank=0)

    def test_frozen(self) -> None:
        r = ScoredRecommendation(internship=_make_internship())
        with pytest.raises(ValidationError):
            r.ai_rank = 2  # type: ignore[misc]
