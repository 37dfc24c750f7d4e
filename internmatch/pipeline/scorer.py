"""Rule-based compatibility scoring and local ranking.

Score range: 0-100 (clamped). Base 50 plus additive bonuses for education,
skills, location, state, stipend and sector. The caller applies the capacity
penalty and then, if enabled, the fairness boost, in that order.
"""

import logging
import math

from internmatch.core.config import RecommendationConfig
from internmatch.core.keywords import EDUCATION_RULES, SKILL_RULES
from internmatch.core.schemas import Internship, ScoredRecommendation, UserProfile

logger = logging.getLogger(__name__)

BASE_SCORE = 50
EDUCATION_MATCH_BONUS = 25
EDUCATION_PARTIAL_BONUS = 10
SKILL_PAIR_BONUS = 15
SKILL_BONUS_CAP = 20
LOCATION_MATCH_BONUS = 20
LOCATION_NEUTRAL_BONUS = 10
STATE_MATCH_BONUS = 10
PAID_BONUS = 10
SECTOR_MATCH_BONUS = 15

RESERVED_CATEGORY_BONUS = {"sc": 20, "st": 20, "obc": 10}
RURAL_BONUS = 10

ANY_LOCATION = "any"
ANY_INDUSTRY = "open to all"

GENERIC_BENEFITS = ("Professional experience", "Skill development")


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def _location_preference(profile: UserProfile) -> str:
    """Lower-cased preferred location, or '' when no preference was stated."""
    preferred = profile.preferred_location.strip().lower()
    return "" if preferred == ANY_LOCATION else preferred


def score_internship(profile: UserProfile, internship: Internship) -> int:
    """Score how well an internship fits a profile.

    Args:
        profile: The applicant profile.
        internship: The internship to score.

    Returns:
        Integer score clamped to 0-100. Capacity and fairness are not applied.
    """
    score = BASE_SCORE
    title = internship.title.lower()

    # Education
    education = profile.qualification.strip().lower()
    if education:
        matched = any(
            qual_kw in education and any(kw in title for kw in title_kws)
            for qual_kw, title_kws in EDUCATION_RULES
        )
        score += EDUCATION_MATCH_BONUS if matched else EDUCATION_PARTIAL_BONUS

    # Skills
    skills = profile.skills.strip().lower()
    if skills:
        pairs = sum(1 for skill_kw, title_kw in SKILL_RULES if skill_kw in skills and title_kw in title)
        score += min(SKILL_BONUS_CAP, pairs * SKILL_PAIR_BONUS)

    # Location
    preferred = _location_preference(profile)
    if not preferred:
        score += LOCATION_NEUTRAL_BONUS
    elif preferred in internship.location.lower():
        score += LOCATION_MATCH_BONUS

    # State
    user_state = profile.state.strip().lower()
    if user_state and internship.state and user_state in internship.state.lower():
        score += STATE_MATCH_BONUS

    if internship.is_paid:
        score += PAID_BONUS

    # Sector
    industry = profile.preferred_industry.strip().lower()
    if industry and industry != ANY_INDUSTRY:
        sector = internship.sector.lower()
        if sector in industry or industry in sector:
            score += SECTOR_MATCH_BONUS

    return _clamp(score)


def apply_capacity_penalty(
    score: int,
    internship: Internship,
    ratio_threshold: float = 0.2,
    factor: float = 0.85,
) -> int:
    """Reduce the score of nearly full internships.

    Applies only when both remaining and total slots are known.
    """
    ratio = internship.capacity_ratio
    if ratio is None or ratio >= ratio_threshold:
        return score
    return math.floor(score * factor)


def apply_fairness_boost(score: int, profile: UserProfile, internship: Internship) -> int:
    """Boost scores for reserved categories and rural or regional postings."""
    boosted = score + RESERVED_CATEGORY_BONUS.get(profile.category.strip().lower(), 0)
    rural_district = "rural" in profile.district.lower()
    regional_posting = not internship.city and bool(internship.state)
    if rural_district or regional_posting:
        boosted += RURAL_BONUS
    return _clamp(boosted)


def adjusted_score(
    profile: UserProfile,
    internship: Internship,
    config: RecommendationConfig,
    fairness_enabled: bool,
) -> int:
    """Base score, then capacity penalty, then (optionally) fairness boost."""
    score = score_internship(profile, internship)
    score = apply_capacity_penalty(
        score,
        internship,
        ratio_threshold=config.capacity_ratio_threshold,
        factor=config.capacity_penalty_factor,
    )
    if fairness_enabled:
        score = apply_fairness_boost(score, profile, internship)
    return _clamp(score)


def generate_reasoning(profile: UserProfile, internship: Internship, score: int) -> str:
    """Short human-readable explanation for a rule-based score."""
    if score >= 80:
        reasons = ["Excellent match for your profile"]
    elif score >= 70:
        reasons = ["Good alignment with your background"]
    else:
        reasons = ["Potential growth opportunity"]

    if internship.is_paid:
        reasons.append(f"offers {internship.stipend} stipend")

    preferred = _location_preference(profile)
    if preferred and preferred in internship.location.lower():
        reasons.append("matches your location preference")

    return ", ".join(reasons) + "."


def generate_benefits(internship: Internship) -> list[str]:
    """Benefit bullets derived from the internship's flags."""
    benefits: list[str] = []
    if internship.is_paid:
        benefits.append(f"Paid position: {internship.stipend}")
    if internship.duration:
        benefits.append(f"Duration: {internship.duration}")
    if "immediately" in internship.start_date.lower():
        benefits.append("Immediate start available")
    openings = internship.total_openings or 1
    if openings > 1:
        benefits.append(f"{openings} positions available")
    benefits.extend(GENERIC_BENEFITS)
    return benefits


def rank_candidates(
    profile: UserProfile,
    candidates: list[Internship],
    config: RecommendationConfig,
    fairness_enabled: bool = False,
) -> list[ScoredRecommendation]:
    """Score candidates locally and return the top N, ranked from 1.

    Ties keep their candidate order.
    """
    scored = [
        (adjusted_score(profile, internship, config, fairness_enabled), internship)
        for internship in candidates
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)

    result = [
        ScoredRecommendation(
            internship=internship,
            compatibility_score=score,
            ai_match_score=score,
            ai_reasoning=generate_reasoning(profile, internship, score),
            ai_rank=rank,
            recommended_by_ai=False,
        )
        for rank, (score, internship) in enumerate(scored[: config.top_n], start=1)
    ]
    logger.debug("Rule-based ranking kept %d of %d candidates", len(result), len(candidates))
    return result
