"""LLM-assisted reranking of pre-filtered internship candidates.

The ranker fails open: every fault (transport, timeout, HTTP status,
malformed response) is logged and reported as ``None`` so the engine can
continue with the rule-based path.
"""

import json
import logging

from internmatch.core.config import LLMConfig, RecommendationConfig
from internmatch.core.schemas import Internship, ScoredRecommendation, UserProfile
from internmatch.llm.base import GenerationOptions, LLMProvider
from internmatch.pipeline.scorer import adjusted_score

logger = logging.getLogger(__name__)

_RANKING_CRITERIA = (
    "1. Field/Domain Match: How well does the internship align with the user's "
    "education and skills?\n"
    "2. Location Preference: Geographic compatibility with user's preference\n"
    "3. Career Growth: Relevance to user's career aspirations\n"
    "4. Skill Development: Opportunity to develop relevant skills\n"
    "5. Company Reputation: Quality of work environment and learning"
)

_FAIRNESS_CLAUSE = (
    "Fairness: apply modest score boosts (5-20%) to candidates from "
    "underrepresented categories (SC, ST, OBC) and from rural or aspirational "
    "districts, and apply a modest penalty to internships whose remaining "
    "capacity is nearly full. Never let these adjustments outweigh a clear "
    "domain mismatch."
)

_RESPONSE_FORMAT = """{
  "recommendations": [
    {
      "rank": 1,
      "internship_index": 5,
      "match_score": 95,
      "reasoning": "Perfect match because...",
      "key_benefits": ["Skill development in relevant area", "Good location match"]
    }
  ]
}"""


def _or(value: str, default: str) -> str:
    return value.strip() or default


def build_prompt(
    profile: UserProfile,
    candidates: list[Internship],
    *,
    fairness_enabled: bool = False,
    prompt_limit: int = 20,
    top_n: int = 10,
) -> str:
    """Assemble the ranking prompt from the profile and a numbered candidate list."""
    profile_section = (
        "User Profile:\n"
        f"- Name: {_or(profile.name, 'Not provided')}\n"
        f"- Education: {_or(profile.qualification, 'Not specified')} "
        f"in {_or(profile.course, 'General')}\n"
        f"- Skills: {_or(profile.skills, 'Not specified')}\n"
        f"- Location Preference: {_or(profile.preferred_location, 'Any')}\n"
        f"- Industry Interest: {_or(profile.preferred_industry, 'Open to all')}\n"
        f"- State: {_or(profile.state, 'Not specified')}\n"
        f"- Specialization: {_or(profile.specialization, 'General')}"
    )
    if fairness_enabled:
        profile_section += (
            f"\n- Category: {_or(profile.category, 'Not specified')}"
            f"\n- District: {_or(profile.district, 'Not specified')}"
        )

    shown = candidates[:prompt_limit]
    listing = "\n".join(
        f"{i}. {c.title} at {c.company} ({c.city}, {c.state}) - "
        f"Stipend: {c.stipend}, Duration: {c.duration or 'Not specified'}"
        + _capacity_note(c, fairness_enabled)
        for i, c in enumerate(shown, start=1)
    )

    sections = [
        "You are an AI career counselor specializing in internship "
        "recommendations for Indian students.",
        profile_section,
        f"Available Internships (showing top {len(shown)}):\n{listing}",
        "Task: Analyze the user's profile and rank the top "
        f"{min(top_n, len(shown))} most suitable internships from the list above. "
        f"Consider:\n\n{_RANKING_CRITERIA}",
    ]
    if fairness_enabled:
        sections.append(_FAIRNESS_CLAUSE)
    sections.append(f"Provide response in this EXACT JSON format:\n{_RESPONSE_FORMAT}")
    sections.append(
        "Ensure internship_index corresponds to the number in the list above. "
        "Rank from best (1) downwards."
    )
    return "\n\n".join(sections)


def _capacity_note(internship: Internship, fairness_enabled: bool) -> str:
    if not fairness_enabled or internship.capacity_ratio is None:
        return ""
    return f", Remaining: {internship.remaining_slots}/{internship.total_openings}"


def _extract_json_object(text: str) -> dict:
    """Return the first JSON object embedded in free text.

    Raises ValueError if no object can be decoded.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    msg = "No JSON object found in ranking response"
    raise ValueError(msg)


def _as_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def parse_ranking_response(
    raw_text: str,
    candidates: list[Internship],
    *,
    top_n: int = 10,
) -> list[ScoredRecommendation]:
    """Map an LLM ranking response back onto the numbered candidates.

    ``candidates`` must be exactly the numbered list shown in the prompt.
    Indices outside ``[1, len(candidates)]``, non-integer indices and repeated
    indices are dropped. Scores are clamped to 0-100.

    Raises:
        ValueError: If no JSON object is present or ``recommendations`` is not a list.
    """
    data = _extract_json_object(raw_text)
    entries = data.get("recommendations")
    if not isinstance(entries, list):
        msg = "Ranking response missing 'recommendations' list"
        raise ValueError(msg)

    picked: list[tuple[int, int, dict]] = []
    seen: set[int] = set()
    for position, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            continue
        index = _as_int(entry.get("internship_index"))
        if index is None or not 1 <= index <= len(candidates) or index in seen:
            logger.debug("Dropping ranking entry with index %r", entry.get("internship_index"))
            continue
        seen.add(index)
        rank = _as_int(entry.get("rank")) or position
        picked.append((rank, index, entry))

    picked.sort(key=lambda item: item[0])

    result = []
    for rank, (_, index, entry) in enumerate(picked[:top_n], start=1):
        score = _as_int(entry.get("match_score"))
        benefits = entry.get("key_benefits") or []
        result.append(
            ScoredRecommendation(
                internship=candidates[index - 1],
                ai_match_score=max(0, min(100, score if score is not None else 0)),
                ai_reasoning=str(entry.get("reasoning", "")),
                ai_key_benefits=tuple(str(b) for b in benefits) if isinstance(benefits, list) else (),
                ai_rank=rank,
                recommended_by_ai=True,
            )
        )
    return result


class LLMRanker:
    """Remote ranking capability backed by a text-generation provider.

    Usage::

        ranker = LLMRanker(get_provider("ollama", settings.llm), settings.llm)
        if ranker.check_available():
            ranked = ranker.rank(profile, candidates)  # None → use local scoring
    """

    def __init__(
        self,
        provider: LLMProvider,
        config: LLMConfig | None = None,
        recommendation: RecommendationConfig | None = None,
    ) -> None:
        self.provider = provider
        self.config = config or provider.config
        self.recommendation = recommendation or RecommendationConfig()

    def check_available(self) -> bool:
        """Probe the service once. Never raises."""
        available = self.provider.ping(timeout=self.config.health_timeout_s)
        if available:
            logger.info("Ranking service '%s' reachable", self.provider.provider_id)
        else:
            logger.info("Ranking service '%s' unreachable", self.provider.provider_id)
        return available

    def rank(
        self,
        profile: UserProfile,
        candidates: list[Internship],
        fairness_enabled: bool = False,
    ) -> list[ScoredRecommendation] | None:
        """Rank candidates remotely; None means the capability is unavailable."""
        rec = self.recommendation
        shown = candidates[: rec.prompt_limit]
        if not shown:
            return None

        try:
            prompt = build_prompt(
                profile,
                shown,
                fairness_enabled=fairness_enabled,
                prompt_limit=rec.prompt_limit,
                top_n=rec.top_n,
            )
            raw = self.provider.complete(
                prompt,
                options=GenerationOptions.from_config(self.config),
                timeout=self.config.timeout_s,
            )
            ranked = parse_ranking_response(raw, shown, top_n=rec.top_n)
        except Exception:
            logger.warning(
                "LLM ranking failed (%s) - falling back to rule-based scoring",
                self.provider.provider_id,
                exc_info=True,
            )
            return None

        if not ranked:
            logger.warning("LLM ranking returned no usable entries - falling back")
            return None

        logger.info("LLM ranked %d of %d candidates", len(ranked), len(shown))
        return [
            r.model_copy(update={
                "compatibility_score": adjusted_score(profile, r.internship, rec, fairness_enabled),
            })
            for r in ranked
        ]

    def explain(self, profile: UserProfile, internship: Internship) -> str:
        """Ask the service for a short explanation. Raises on any failure."""
        prompt = (
            f"User Profile: {profile.model_dump_json(indent=2)}\n"
            f"Recommended Internship: {internship.title} at {internship.company}\n\n"
            "Provide a brief, friendly explanation (2-3 sentences) of why this "
            "internship is a good match for this user. Focus on practical "
            "benefits and career relevance."
        )
        options = GenerationOptions.from_config(self.config).model_copy(
            update={"temperature": 0.7, "max_tokens": 150},
        )
        raw = self.provider.complete(prompt, options=options, timeout=10.0)
        return raw.strip()
