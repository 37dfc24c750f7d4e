"""Recommendation engine: wires catalog, fingerprint cache, rankers and enrichment.

Data flow:
  1. Lazy initialization (probe ranking service once)
  2. Fingerprint → cache lookup
  3. Catalog pre-filter (location, state) → bounded candidate set
  4. Remote ranker if available, else rule-based ranker
  5. Enrichment (benefits, dates, openings, legacy projection)
  6. Cache store
Any unexpected failure returns the static fallback list instead.
"""

import logging
import random
import time
from collections.abc import Callable

from internmatch.catalog.store import CatalogStore, to_legacy
from internmatch.core.config import Settings
from internmatch.core.schemas import (
    CatalogStats,
    EngineStatus,
    Internship,
    ScoredRecommendation,
    UserProfile,
)
from internmatch.llm import get_provider
from internmatch.pipeline.cache import RecommendationCache
from internmatch.pipeline.fingerprint import fingerprint
from internmatch.pipeline.llm_ranker import LLMRanker
from internmatch.pipeline.scorer import ANY_LOCATION, generate_benefits, rank_candidates

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "Basic compatibility based on available information"
FALLBACK_BENEFITS = ("Learning opportunity", "Professional experience")
FALLBACK_SCORE_MIN = 65
FALLBACK_SCORE_SPAN = 20
DEFAULT_EXPLANATION = (
    "This internship matches your profile based on your educational "
    "background and career interests."
)


class RecommendationEngine:
    """Produces ranked internship recommendations for a profile.

    One instance per process or session. State (service availability and the
    single cache slot) lives on the instance.

    Usage::

        engine = RecommendationEngine.from_settings(Settings.from_yaml("config/settings.yaml"))
        recs = engine.generate_recommendations(UserProfile(qualification="B.Tech"))
    """

    def __init__(
        self,
        catalog: CatalogStore,
        settings: Settings | None = None,
        ranker: LLMRanker | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.settings = settings or Settings()
        self.ranker = ranker
        self.cache = RecommendationCache(self.settings.recommendation.cache_validity_s, clock)
        self._rng = rng or random.Random()
        self.initialized = False
        self.external_service_available = False
        self._last_count = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecommendationEngine":
        """Build the catalog and (if enabled) the remote ranker from settings."""
        if settings.catalog.path:
            catalog = CatalogStore.from_yaml(settings.catalog.path)
        else:
            catalog = CatalogStore.sample()

        ranker = None
        if settings.llm.enabled:
            provider = get_provider(settings.llm.provider, settings.llm)
            ranker = LLMRanker(provider, settings.llm, settings.recommendation)
        return cls(catalog, settings, ranker)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> bool:
        """Probe the ranking service once. Idempotent."""
        if self.initialized:
            return True
        self.external_service_available = self._probe()
        self.initialized = True
        if self.external_service_available:
            logger.info("Recommendation engine ready with LLM ranking")
        else:
            logger.info("Recommendation engine ready in rule-based mode")
        return True

    def reinitialize(self) -> bool:
        """Force a fresh service probe."""
        self.initialized = False
        return self.initialize()

    def refresh_service_status(self) -> bool:
        """Re-check service reachability without touching the cache."""
        self.external_service_available = self._probe()
        return self.external_service_available

    def _probe(self) -> bool:
        if self.ranker is None:
            return False
        return self.ranker.check_available()

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def generate_recommendations(
        self,
        profile: UserProfile,
        force_refresh: bool = False,
        fairness: bool | None = None,
    ) -> tuple[ScoredRecommendation, ...]:
        """Return up to ``top_n`` ranked recommendations. Never raises.

        A cache hit returns the stored tuple itself, so results are shared
        between callers and cannot be modified in place.

        Args:
            profile: The applicant profile.
            force_refresh: Skip the cache even if a fresh entry matches.
            fairness: Per-call fairness override. None uses the configured default.
        """
        try:
            self.initialize()

            key = fingerprint(profile)
            if not force_refresh:
                cached = self.cache.get(key)
                if cached is not None:
                    logger.info("Returning cached recommendations")
                    return cached

            fairness_enabled = (
                self.settings.recommendation.fairness_enabled if fairness is None else fairness
            )
            candidates = self.pre_filter(profile)
            logger.info("Found %d potentially matching internships", len(candidates))

            ranked: list[ScoredRecommendation] | None = None
            if self.external_service_available and candidates and self.ranker is not None:
                logger.info("Using LLM ranking")
                ranked = self.ranker.rank(profile, candidates, fairness_enabled)
            if ranked is None:
                logger.info("Using rule-based ranking")
                ranked = rank_candidates(
                    profile, candidates, self.settings.recommendation, fairness_enabled,
                )

            if not ranked:
                logger.info("No candidates matched - returning fallback recommendations")
                return self.fallback_recommendations()

            recommendations = self.cache.put(key, [self._enrich(r) for r in ranked])
            self._last_count = len(recommendations)
            logger.info("Generated %d recommendations", len(recommendations))
            return recommendations
        except Exception:
            logger.exception("Recommendation generation failed - returning fallback")
            return self.fallback_recommendations()

    def pre_filter(self, profile: UserProfile) -> list[Internship]:
        """Catalog query by location and state only, bounded to ``candidate_limit``."""
        location = profile.preferred_location.strip()
        if location.lower() == ANY_LOCATION:
            location = ""
        candidates = self.catalog.filter(
            location=location or None,
            state=profile.state.strip() or None,
        )

        limit = self.settings.recommendation.candidate_limit
        if len(candidates) > limit:
            candidates = sorted(
                candidates,
                key=lambda i: (i.is_paid, i.total_openings or 0),
                reverse=True,
            )[:limit]
        return candidates

    def _enrich(self, rec: ScoredRecommendation) -> ScoredRecommendation:
        internship = rec.internship
        return rec.model_copy(update={
            "ai_benefits": tuple(generate_benefits(internship)),
            "application_deadline": internship.apply_by,
            "start_date": internship.start_date,
            "openings_available": internship.total_openings or 1,
            "is_immediate_start": "immediately" in internship.start_date.lower(),
            "converted_format": to_legacy(internship),
        })

    def fallback_recommendations(self) -> tuple[ScoredRecommendation, ...]:
        """Fixed-size result from the static sample data with bounded random scores."""
        size = self.settings.recommendation.fallback_size
        samples = self.catalog.sample_fallback_data()[:size]
        return tuple(
            ScoredRecommendation(
                internship=internship,
                ai_match_score=FALLBACK_SCORE_MIN + self._rng.randrange(FALLBACK_SCORE_SPAN),
                ai_reasoning=FALLBACK_REASONING,
                ai_benefits=FALLBACK_BENEFITS,
                ai_rank=rank,
                recommended_by_ai=False,
                application_deadline=internship.apply_by,
                start_date=internship.start_date,
                openings_available=internship.total_openings or 1,
                is_immediate_start="immediately" in internship.start_date.lower(),
                converted_format=to_legacy(internship),
            )
            for rank, internship in enumerate(samples, start=1)
        )

    def explain_recommendation(
        self,
        profile: UserProfile,
        recommendation: ScoredRecommendation,
    ) -> str:
        """Short natural-language explanation, with a fixed sentence as fallback."""
        self.initialize()
        if not self.external_service_available or self.ranker is None:
            return DEFAULT_EXPLANATION
        try:
            text = self.ranker.explain(profile, recommendation.internship)
        except Exception:
            logger.warning("Failed to generate explanation", exc_info=True)
            return DEFAULT_EXPLANATION
        return text or DEFAULT_EXPLANATION

    def available_models(self) -> list[str]:
        """Models reported by the ranking service, or [] if unreachable."""
        if self.ranker is None:
            return []
        try:
            return self.ranker.provider.list_models()
        except Exception:
            logger.warning("Failed to list models", exc_info=True)
            return []

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def status(self) -> EngineStatus:
        return EngineStatus(
            initialized=self.initialized,
            external_service_available=self.external_service_available,
            data_loaded=len(self.catalog) > 0,
            recommendations_count=self._last_count,
            has_cache=self.cache.has_entry,
            cache_age_seconds=self.cache.age(),
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def data_statistics(self) -> CatalogStats:
        return self.catalog.stats()
