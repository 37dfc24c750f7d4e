"""Stable cache key derived from a fixed subset of profile fields.

Only the fields in FINGERPRINT_FIELDS participate. ``category`` and
``district`` are deliberately absent, so a change to either within the
cache window is not visible to the cache.
"""

import base64
import json

from internmatch.core.schemas import UserProfile

FINGERPRINT_FIELDS = (
    "name",
    "qualification",
    "skills",
    "preferred_location",
    "preferred_industry",
    "state",
)


def fingerprint(profile: UserProfile) -> str:
    """Return a deterministic key for the fingerprinted profile fields."""
    key = {field: getattr(profile, field) for field in FINGERPRINT_FIELDS}
    payload = json.dumps(key, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
