from typing import Optional
from pydantic import BaseModel, Field
from ...aggregation.domain.entities import Direction

class VoteIn(BaseModel):
    """
    A congestion report as submitted by a client.
    Out of range levels are accepted and clamped to 0-3 on submission.
    """
    level: int = Field(..., description="Congestion level (0 free, 1 light, 2 moderate, 3 heavy)")
    origin_id: Optional[str] = Field(None, max_length=128, description="Anonymous device identifier")
    direction: Optional[Direction] = Field(None, description="Travel direction (L2R or R2L)")

class VoteOut(BaseModel):
    checkpoint_id: str = Field(..., description="Checkpoint the vote was recorded for")
    level: int = Field(..., description="Recorded level, clamped to 0-3")
    timestamp_ms: int = Field(..., ge=0, description="Recording time in epoch milliseconds")
    direction: Optional[Direction] = Field(None, description="Travel direction")

class LastVoteOut(BaseModel):
    checkpoint_id: str = Field(..., description="Checkpoint identifier")
    level: Optional[int] = Field(None, ge=0, le=3, description="Last level voted by this device, if any")
