"""Tests for LLM-assisted ranking: prompt building, response parsing, fail-open."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from internmatch.core.config import LLMConfig, RecommendationConfig
from internmatch.core.schemas import Internship, UserProfile
from internmatch.pipeline.llm_ranker import LLMRanker, build_prompt, parse_ranking_response

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_profile(**overrides: object) -> UserProfile:
    defaults: dict[str, object] = {
        "name": "Asha Nair",
        "qualification": "B.Tech",
        "course": "Computer Science Engineering",
        "skills": "programming, data",
        "preferred_location": "Bangalore",
        "preferred_industry": "Technology",
        "state": "Karnataka",
        "category": "OBC",
        "district": "Rural Mysuru",
    }
    defaults.update(overrides)
    return UserProfile(**defaults)  # type: ignore[arg-type]


def _make_candidates(n: int) -> list[Internship]:
    return [
        Internship(
            id=f"INT{i:03d}",
            title=f"Role {i}",
            company=f"Company {i}",
            city="Bangalore",
            state="Karnataka",
            stipend="10000 /month",
            duration="6 Months",
            total_openings=10,
            remaining_slots=1,
        )
        for i in range(1, n + 1)
    ]


def _response(*entries: dict[str, object]) -> str:
    return json.dumps({"recommendations": list(entries)})


def _entry(rank: int, index: object, score: object = 80, **extra: object) -> dict[str, object]:
    return {
        "rank": rank,
        "internship_index": index,
        "match_score": score,
        "reasoning": f"reason {rank}",
        "key_benefits": ["Learning"],
        **extra,
    }


def _mock_provider(response: str | None = None, available: bool = True) -> MagicMock:
    provider = MagicMock()
    provider.provider_id = "mock"
    provider.complete.return_value = response
    provider.ping.return_value = available
    return provider


def _ranker(provider: MagicMock) -> LLMRanker:
    return LLMRanker(provider, LLMConfig(), RecommendationConfig())


# ---------------------------------------------------------------------------
# TestBuildPrompt
# ---------------------------------------------------------------------------


class TestBuildPrompt:
    def test_includes_profile_summary(self) -> None:
        prompt = build_prompt(_make_profile(), _make_candidates(2))
        assert "Asha Nair" in prompt
        assert "B.Tech in Computer Science Engineering" in prompt
        assert "Location Preference: Bangalore" in prompt
        assert "Industry Interest: Technology" in prompt

    def test_numbered_candidate_lines(self) -> None:
        prompt = build_prompt(_make_profile(), _make_candidates(2))
        assert (
            "1. Role 1 at Company 1 (Bangalore, Karnataka) - "
            "Stipend: 10000 /month, Duration: 6 Months"
        ) in prompt
        assert "2. Role 2 at Company 2" in prompt

    def test_limits_to_twenty(self) -> None:
        prompt = build_prompt(_make_profile(), _make_candidates(25))
        lines = prompt.splitlines()
        assert any(line.startswith("20. Role 20") for line in lines)
        assert not any(line.startswith("21. ") for line in lines)
        assert "showing top 20" in prompt

    def test_defaults_for_missing_fields(self) -> None:
        prompt = build_prompt(UserProfile(), _make_candidates(1))
        assert "Skills: Not specified" in prompt
        assert "Location Preference: Any" in prompt
        assert "Industry Interest: Open to all" in prompt

    def test_no_fairness_clause_by_default(self) -> None:
        prompt = build_prompt(_make_profile(), _make_candidates(2))
        assert "Fairness:" not in prompt
        assert "Category:" not in prompt
        assert "Remaining:" not in prompt

    def test_fairness_clause_when_enabled(self) -> None:
        prompt = build_prompt(_make_profile(), _make_candidates(2), fairness_enabled=True)
        assert "Fairness:" in prompt
        assert "5-20%" in prompt
        assert "Category: OBC" in prompt
        assert "Remaining: 1/10" in prompt

    def test_requests_json_shape(self) -> None:
        prompt = build_prompt(_make_profile(), _make_candidates(2))
        assert '"internship_index"' in prompt
        assert '"key_benefits"' in prompt


# ---------------------------------------------------------------------------
# TestParseRankingResponse
# ---------------------------------------------------------------------------


class TestParseRankingResponse:
    def test_maps_indices_to_candidates(self) -> None:
        candidates = _make_candidates(3)
        raw = _response(_entry(1, 3, 92), _entry(2, 1, 75))

        result = parse_ranking_response(raw, candidates)

        assert [r.internship.id for r in result] == ["INT003", "INT001"]
        assert [r.ai_rank for r in result] == [1, 2]
        assert result[0].ai_match_score == 92
        assert result[0].ai_reasoning == "reason 1"
        assert result[0].ai_key_benefits == ("Learning",)
        assert all(r.recommended_by_ai for r in result)

    def test_json_embedded_in_prose(self) -> None:
        raw = "Sure! Here is the ranking:\n```json\n" + _response(_entry(1, 2)) + "\n```\nGood luck."
        result = parse_ranking_response(raw, _make_candidates(2))
        assert [r.internship.id for r in result] == ["INT002"]

    def test_skips_unparseable_brace_before_object(self) -> None:
        raw = "Use {placeholder} values. " + _response(_entry(1, 1))
        result = parse_ranking_response(raw, _make_candidates(1))
        assert len(result) == 1

    def test_out_of_range_indices_dropped(self) -> None:
        raw = _response(_entry(1, 0), _entry(2, 4), _entry(3, 2))
        result = parse_ranking_response(raw, _make_candidates(3))
        assert [r.internship.id for r in result] == ["INT002"]
        assert result[0].ai_rank == 1

    def test_non_integer_and_duplicate_indices_dropped(self) -> None:
        raw = _response(_entry(1, "two"), _entry(2, 1), _entry(3, 1), _entry(4, "2"))
        result = parse_ranking_response(raw, _make_candidates(2))
        assert [r.internship.id for r in result] == ["INT001", "INT002"]

    def test_sorted_by_rank(self) -> None:
        raw = _response(_entry(2, 1), _entry(1, 2))
        result = parse_ranking_response(raw, _make_candidates(2))
        assert [r.internship.id for r in result] == ["INT002", "INT001"]

    def test_score_clamped(self) -> None:
        raw = _response(_entry(1, 1, 150), _entry(2, 2, -5))
        result = parse_ranking_response(raw, _make_candidates(2))
        assert [r.ai_match_score for r in result] == [100, 0]

    def test_capped_at_top_n(self) -> None:
        raw = _response(*[_entry(i, i) for i in range(1, 16)])
        result = parse_ranking_response(raw, _make_candidates(15), top_n=10)
        assert len(result) == 10

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(ValueError, match="No JSON object"):
            parse_ranking_response("not json", _make_candidates(1))

    def test_missing_recommendations_raises(self) -> None:
        with pytest.raises(ValueError, match="missing 'recommendations'"):
            parse_ranking_response('{"ranking": []}', _make_candidates(1))


# ---------------------------------------------------------------------------
# TestLLMRanker
# ---------------------------------------------------------------------------


class TestLLMRanker:
    def test_check_available_uses_health_timeout(self) -> None:
        provider = _mock_provider(available=True)
        assert _ranker(provider).check_available() is True
        provider.ping.assert_called_once_with(timeout=5.0)

    def test_check_unavailable(self) -> None:
        assert _ranker(_mock_provider(available=False)).check_available() is False

    def test_rank_success(self) -> None:
        provider = _mock_provider(_response(_entry(1, 2, 90), _entry(2, 1, 70)))
        result = _ranker(provider).rank(_make_profile(), _make_candidates(3))

        assert result is not None
        assert [r.internship.id for r in result] == ["INT002", "INT001"]
        assert all(r.recommended_by_ai for r in result)
        assert all(r.compatibility_score is not None for r in result)

    def test_rank_sends_sampling_options_and_timeout(self) -> None:
        provider = _mock_provider(_response(_entry(1, 1)))
        _ranker(provider).rank(_make_profile(), _make_candidates(1))

        kwargs = provider.complete.call_args.kwargs
        assert kwargs["timeout"] == 30.0
        assert kwargs["options"].temperature == 0.3
        assert kwargs["options"].max_tokens == 2000
        assert kwargs["options"].top_p == 0.9

    def test_prompt_only_shows_prompt_limit(self) -> None:
        provider = _mock_provider(_response(_entry(1, 21)))
        # Index 21 is beyond the 20 numbered candidates → nothing usable
        assert _ranker(provider).rank(_make_profile(), _make_candidates(30)) is None

    def test_parse_failure_returns_none(self) -> None:
        provider = _mock_provider("not json")
        assert _ranker(provider).rank(_make_profile(), _make_candidates(3)) is None

    def test_timeout_returns_none(self) -> None:
        provider = _mock_provider()
        provider.complete.side_effect = requests.Timeout("timed out")
        assert _ranker(provider).rank(_make_profile(), _make_candidates(3)) is None

    def test_http_error_returns_none(self) -> None:
        provider = _mock_provider()
        provider.complete.side_effect = requests.HTTPError("500 Server Error")
        assert _ranker(provider).rank(_make_profile(), _make_candidates(3)) is None

    def test_empty_recommendations_returns_none(self) -> None:
        provider = _mock_provider(_response())
        assert _ranker(provider).rank(_make_profile(), _make_candidates(3)) is None

    def test_no_candidates_skips_call(self) -> None:
        provider = _mock_provider(_response(_entry(1, 1)))
        assert _ranker(provider).rank(_make_profile(), []) is None
        provider.complete.assert_not_called()

    def test_fairness_applied_to_compatibility(self) -> None:
        provider = _mock_provider(_response(_entry(1, 1)))
        ranker = _ranker(provider)
        profile = _make_profile(category="SC", district="")

        plain = ranker.rank(profile, _make_candidates(1), fairness_enabled=False)
        fair = ranker.rank(profile, _make_candidates(1), fairness_enabled=True)

        assert plain is not None and fair is not None
        assert fair[0].compatibility_score == min(100, plain[0].compatibility_score + 20)

    def test_explain_strips_text(self) -> None:
        provider = _mock_provider("  Great fit for you.  ")
        ranker = _ranker(provider)
        assert ranker.explain(_make_profile(), _make_candidates(1)[0]) == "Great fit for you."
        kwargs = provider.complete.call_args.kwargs
        assert kwargs["options"].temperature == 0.7
        assert kwargs["options"].max_tokens == 150
        assert kwargs["timeout"] == 10.0
