"""Single-slot cache for the most recent recommendation result.

Storing a new result always replaces the previous one. There is no lock, so
concurrent writers are last-write-wins.
"""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from internmatch.core.schemas import ScoredRecommendation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    fingerprint: str
    recommendations: tuple[ScoredRecommendation, ...]
    created_at: float


class RecommendationCache:
    """Holds one (fingerprint, recommendations, created_at) entry.

    Usage::

        cache = RecommendationCache(validity_s=300)
        hit = cache.get(key)
        if hit is None:
            cache.put(key, compute())
    """

    def __init__(
        self,
        validity_s: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._validity_s = validity_s
        self._clock = clock
        self._entry: CacheEntry | None = None

    def get(self, fingerprint: str) -> tuple[ScoredRecommendation, ...] | None:
        """Return the cached tuple if the fingerprint matches and the entry is fresh."""
        entry = self._entry
        if entry is None or entry.fingerprint != fingerprint:
            return None
        if self._clock() - entry.created_at >= self._validity_s:
            logger.debug("Cached recommendations expired")
            return None
        return entry.recommendations

    def put(
        self,
        fingerprint: str,
        recommendations: Sequence[ScoredRecommendation],
    ) -> tuple[ScoredRecommendation, ...]:
        """Store an immutable copy of the result and return it."""
        stored = tuple(recommendations)
        self._entry = CacheEntry(fingerprint, stored, self._clock())
        return stored

    def clear(self) -> None:
        self._entry = None
        logger.info("Recommendation cache cleared")

    @property
    def has_entry(self) -> bool:
        return self._entry is not None

    def age(self) -> float:
        """Seconds since the entry was stored, or 0.0 when empty."""
        if self._entry is None:
            return 0.0
        return self._clock() - self._entry.created_at
