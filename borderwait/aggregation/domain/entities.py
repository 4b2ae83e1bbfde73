"""
Domain entities for the aggregation module.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ...common.levels import Confidence

class Direction(str, Enum):
    """
    Travel direction across a checkpoint, relative to its "LEFT ↔ RIGHT" hint.
    """
    L2R = "L2R"
    R2L = "R2L"

    @classmethod
    def of(cls, value: Optional[str]) -> "Direction":
        # Anything that is not explicitly R2L counts as L2R
        return cls.R2L if value in (cls.R2L, cls.R2L.value) else cls.L2R

@dataclass(frozen=True)
class Vote:
    """
    One crowdsourced congestion report. Read-only input to the aggregation core.
    """
    checkpoint_id: str
    level: int  # 0 free .. 3 heavy, clamped on use
    timestamp_ms: int  # client-assigned epoch milliseconds
    origin_id: Optional[str] = None
    direction: Optional[Direction] = None

@dataclass(frozen=True)
class LevelEstimate:
    """
    Current congestion estimate for one checkpoint.
    """
    level: int
    count: int
    confidence: Confidence
    buckets: List[float]  # accumulated recency weight per level
    avg: float

@dataclass
class SeriesBucket:
    """
    One 15 minute slice of a day. `count == 0` means no data, not a free road.
    """
    sum: float = 0.0
    count: int = 0
    avg: float = 0.0

@dataclass(frozen=True)
class DaySummary:
    total: int
    avg: float
    counts: List[int] = field(default_factory=lambda: [0, 0, 0, 0])
