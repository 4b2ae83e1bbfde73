"""
Congestion level taxonomy shared by the live estimator and the daily series.

Every raw level coming from a vote goes through `clamp_level` before it is
used anywhere. Status labels are a plain lookup keyed by level.
"""
import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Union

Number = Union[int, float]

MIN_LEVEL = 0
MAX_LEVEL = 3
LEVEL_COUNT = MAX_LEVEL - MIN_LEVEL + 1


class CongestionLevel(IntEnum):
    FREE = 0
    LIGHT = 1
    MODERATE = 2
    HEAVY = 3


class Confidence(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class LevelStatus:
    """
    Human readable status for a congestion level.
    """
    level: CongestionLevel
    key: str
    title: str
    description: str


STATUS_TABLE: Dict[CongestionLevel, LevelStatus] = {
    CongestionLevel.FREE: LevelStatus(CongestionLevel.FREE, "free", "Free", "No queue or very little"),
    CongestionLevel.LIGHT: LevelStatus(CongestionLevel.LIGHT, "light", "Light", "Short wait"),
    CongestionLevel.MODERATE: LevelStatus(CongestionLevel.MODERATE, "moderate", "Moderate", "Normal wait"),
    CongestionLevel.HEAVY: LevelStatus(CongestionLevel.HEAVY, "heavy", "Heavy", "Long wait"),
}

# Confidence is a pure volume signal: inclusive lower bounds on vote count.
HIGH_CONFIDENCE_VOTES = 10
MEDIUM_CONFIDENCE_VOTES = 4


def clamp_level(value: Number) -> Number:
    """Clamp a raw level into [0, 3]. Integers stay integers."""
    return max(MIN_LEVEL, min(MAX_LEVEL, value))


def round_half_up(value: float) -> int:
    # 1.5 -> 2 and 2.5 -> 3, unlike round() which rounds half to even.
    return int(math.floor(value + 0.5))


def status_for_level(level: Number) -> LevelStatus:
    return STATUS_TABLE[CongestionLevel(int(clamp_level(level)))]


def level_from_average(avg: float) -> CongestionLevel:
    """
    Classifies a continuous average into a discrete level using half-open
    thresholds: [0, 0.5) free, [0.5, 1.5) light, [1.5, 2.5) moderate, rest heavy.
    """
    if avg < 0.5:
        return CongestionLevel.FREE
    if avg < 1.5:
        return CongestionLevel.LIGHT
    if avg < 2.5:
        return CongestionLevel.MODERATE
    return CongestionLevel.HEAVY


def day_status(avg: float) -> LevelStatus:
    return STATUS_TABLE[level_from_average(avg)]


def confidence_for_count(count: int) -> Confidence:
    if count >= HIGH_CONFIDENCE_VOTES:
        return Confidence.HIGH
    if count >= MEDIUM_CONFIDENCE_VOTES:
        return Confidence.MEDIUM
    return Confidence.LOW
