"""
Driver/ride compatibility scoring (0-100).

score = rating (≤20) + persona match (40, or 15 partial) + experience (≤20)
        + proximity (≤20) + balanced-area proximity bonus (10)
"""
from app.models.driver import DriverProfile, Persona
from app.models.fare import ClassificationResult, CompatibilityResult, RideCategory
from app.services.incentives import round_half_up

PERSONA_CATEGORIES: dict[Persona, frozenset[RideCategory]] = {
    Persona.peak_hour_pro: frozenset({RideCategory.HD_LS, RideCategory.HD_MS, RideCategory.MD_LS}),
    Persona.long_haul_specialist: frozenset(
        {RideCategory.HD_HS, RideCategory.MD_HS, RideCategory.LD_MS, RideCategory.LD_HS}
    ),
    Persona.city_navigator: frozenset(
        {RideCategory.MD_LS, RideCategory.MD_MS, RideCategory.LD_LS, RideCategory.LD_MS}
    ),
    Persona.steady_earner: frozenset(
        {RideCategory.HD_HS, RideCategory.MD_MS, RideCategory.MD_HS, RideCategory.LD_LS}
    ),
}

SHORTAGE_CATEGORIES = frozenset({RideCategory.HD_LS, RideCategory.HD_MS, RideCategory.MD_LS})

PERSONA_MATCH_POINTS = 40
PERSONA_PARTIAL_POINTS = 15
PROXIMITY_BONUS_POINTS = 10

HIGH_RATING = 4.5
SEASONED_YEARS = 3
NEARBY_KM = 3.0

DEFAULT_REASON = "Matches your profile"


def score_band(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Poor"


def score_compatibility(
    driver: DriverProfile,
    classification: ClassificationResult,
    pickup_distance_km: float,
) -> CompatibilityResult:
    rating = min(max(driver.rating, 0.0), 5.0)
    experience = max(driver.experience_years, 0.0)
    distance = max(pickup_distance_km, 0.0)

    persona = Persona(driver.persona)
    persona_match = classification.category in PERSONA_CATEGORIES.get(persona, frozenset())

    raw = (
        min(rating * 4, 20)
        + (PERSONA_MATCH_POINTS if persona_match else PERSONA_PARTIAL_POINTS)
        + min(experience * 4, 20)
        + max(0.0, 20 - distance * 4)
    )
    if classification.proximity_bonus:
        raw += PROXIMITY_BONUS_POINTS

    score = min(max(round_half_up(raw), 0), 100)

    reasons: list[str] = []
    if persona_match:
        reasons.append(f"Suits your {persona.value} style")
    if rating >= HIGH_RATING:
        reasons.append(f"Your {rating:g}/5 rating")
    if experience >= SEASONED_YEARS:
        reasons.append(f"{experience:g} years of experience")
    if distance <= NEARBY_KM:
        reasons.append(f"Pickup {distance:.1f} km away")
    if classification.category in SHORTAGE_CATEGORIES:
        reasons.append("Riders are waiting in this area")
    if classification.proximity_bonus:
        reasons.append("Close pickup in a balanced area")

    return CompatibilityResult(
        score=score,
        reason="; ".join(reasons) if reasons else DEFAULT_REASON,
        band=score_band(score),
    )
