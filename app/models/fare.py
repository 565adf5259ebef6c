from dataclasses import dataclass
from enum import Enum


class RideCategory(str, Enum):
    """Demand x supply bucket a ride falls into."""

    HD_LS = "HD_LS"
    HD_MS = "HD_MS"
    HD_HS = "HD_HS"
    MD_LS = "MD_LS"
    MD_MS = "MD_MS"
    MD_HS = "MD_HS"
    LD_LS = "LD_LS"
    LD_MS = "LD_MS"
    LD_HS = "LD_HS"


@dataclass(frozen=True)
class ClassificationResult:
    category: RideCategory
    reason: str
    surge: int
    proximity_bonus: bool = False


@dataclass(frozen=True)
class IncentiveSplit:
    fare_component: int
    points_component: int
    points_earned: int


@dataclass(frozen=True)
class FareBreakdown:
    base_fare: int
    distance_fare: int
    wait_time_fare: int
    surge_total: int
    fare_incentive_component: int
    points_incentive_component: int
    points_earned: int
    demand_multiplier: float
    fuel_cost: int
    platform_fee: int
    estimated_profit: int
    total_fare: int
    distance_km: float
    dead_mileage_km: float


@dataclass(frozen=True)
class CompatibilityResult:
    score: int  # 0-100
    reason: str
    band: str
