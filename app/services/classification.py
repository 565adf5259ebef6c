"""
Demand/supply classification into the nine ride categories.
"""
from app.models.fare import ClassificationResult, RideCategory
from app.models.ride import DemandLevel

# ---------------------------------------------------------------------------
# Category tables (INR)
# ---------------------------------------------------------------------------
CATEGORY_BY_LEVELS: dict[tuple[DemandLevel, DemandLevel], RideCategory] = {
    (DemandLevel.high, DemandLevel.low): RideCategory.HD_LS,
    (DemandLevel.high, DemandLevel.medium): RideCategory.HD_MS,
    (DemandLevel.high, DemandLevel.high): RideCategory.HD_HS,
    (DemandLevel.medium, DemandLevel.low): RideCategory.MD_LS,
    (DemandLevel.medium, DemandLevel.medium): RideCategory.MD_MS,
    (DemandLevel.medium, DemandLevel.high): RideCategory.MD_HS,
    (DemandLevel.low, DemandLevel.low): RideCategory.LD_LS,
    (DemandLevel.low, DemandLevel.medium): RideCategory.LD_MS,
    (DemandLevel.low, DemandLevel.high): RideCategory.LD_HS,
}

SURGE: dict[RideCategory, int] = {
    RideCategory.HD_LS: 30,
    RideCategory.HD_MS: 25,
    RideCategory.HD_HS: 0,
    RideCategory.MD_LS: 20,
    RideCategory.MD_MS: 0,
    RideCategory.MD_HS: 10,
    RideCategory.LD_LS: 0,
    RideCategory.LD_MS: 5,
    RideCategory.LD_HS: 0,
}

REASONS: dict[RideCategory, str] = {
    RideCategory.HD_LS: "Severe driver shortage: high demand and low supply in this area",
    RideCategory.HD_MS: "Driver shortage: high demand with limited supply",
    RideCategory.HD_HS: "High demand balanced by high supply, no surge",
    RideCategory.MD_LS: "Moderate shortage: steady demand and few drivers nearby",
    RideCategory.MD_MS: "Balanced demand and supply",
    RideCategory.MD_HS: "Steady demand with many drivers around, small bonus to offset",
    RideCategory.LD_LS: "Quiet area with few riders and few drivers",
    RideCategory.LD_MS: "Low demand, mild bonus for taking the ride",
    RideCategory.LD_HS: "Low demand and plenty of drivers, no surge",
}

# Balanced categories where a close pickup is called out instead of surge
PROXIMITY_CATEGORIES = frozenset({RideCategory.MD_MS, RideCategory.LD_LS})
PROXIMITY_THRESHOLD_KM = 3.0


def classify(
    demand: DemandLevel,
    supply: DemandLevel,
    pickup_distance_km: float | None = None,
) -> ClassificationResult:
    """
    Map (demand, supply) onto a category with its fixed surge.

    `pickup_distance_km` is the driver's direct distance to the pickup. It
    only affects the reason and the proximity flag, never the surge.
    """
    category = CATEGORY_BY_LEVELS[(DemandLevel(demand), DemandLevel(supply))]
    reason = REASONS[category]
    proximity_bonus = False

    if (
        category in PROXIMITY_CATEGORIES
        and pickup_distance_km is not None
        and pickup_distance_km < PROXIMITY_THRESHOLD_KM
    ):
        proximity_bonus = True
        reason = f"{reason}; pickup is only {pickup_distance_km:.1f} km from you"

    return ClassificationResult(
        category=category,
        reason=reason,
        surge=SURGE[category],
        proximity_bonus=proximity_bonus,
    )
