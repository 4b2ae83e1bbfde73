from typing import List, Optional
from pydantic import BaseModel, Field
from ..levels import Confidence

class StatusOut(BaseModel):
    key: str = Field(..., description="free, light, moderate or heavy")
    title: str = Field(..., description="Short label")
    description: str = Field(..., description="Longer label")

class LevelEstimateOut(BaseModel):
    """
    Live congestion estimate for one checkpoint.
    """
    checkpoint_id: str = Field(..., description="Checkpoint identifier")
    direction: Optional[str] = Field(None, description="Direction filter applied, if any")
    direction_label: Optional[str] = Field(None, description='Direction in terms of the checkpoint sides, e.g. "KS → NMKD"')
    level: int = Field(..., ge=0, le=3, description="Estimated congestion level")
    count: int = Field(..., ge=0, description="Number of votes in the live window")
    confidence: Confidence = Field(..., description="Volume based confidence tier")
    buckets: List[float] = Field(..., min_length=4, max_length=4, description="Recency weight per level")
    avg: float = Field(..., ge=0.0, description="Recency weighted average level")
    status: StatusOut
    computed_at_ms: int = Field(..., description="Clock value the estimate was computed for")

class SeriesPointOut(BaseModel):
    index: int = Field(..., ge=0, lt=96, description="15 minute bucket index since local midnight")
    sum: float = Field(..., ge=0.0, description="Sum of clamped levels")
    count: int = Field(..., ge=0, description="Votes in the bucket; 0 means no data")
    avg: float = Field(..., ge=0.0, le=3.0, description="Smoothed average level")

class DaySummaryOut(BaseModel):
    total: int = Field(..., ge=0, description="Votes since local midnight")
    avg: float = Field(..., ge=0.0, le=3.0, description="Unweighted average level")
    counts: List[int] = Field(..., min_length=4, max_length=4, description="Votes per level")
    status: StatusOut

class DaySeriesOut(BaseModel):
    """
    Intraday series and summary for one checkpoint.
    """
    checkpoint_id: str = Field(..., description="Checkpoint identifier")
    direction: Optional[str] = Field(None, description="Direction filter applied, if any")
    direction_label: Optional[str] = Field(None, description='Direction in terms of the checkpoint sides, e.g. "KS → NMKD"')
    day_start_ms: int = Field(..., description="Local midnight in epoch milliseconds")
    bucket_minutes: int = Field(..., description="Width of each bucket")
    points: List[SeriesPointOut] = Field(..., min_length=96, max_length=96)
    summary: DaySummaryOut
