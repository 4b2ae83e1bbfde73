from typing import Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict

HINT_SEPARATOR = "↔"

class Checkpoint(BaseModel):
    """
    A fixed border crossing that votes are scoped to.
    """
    id: str = Field(..., min_length=1, description="Unique identifier for the checkpoint")
    name: str = Field(..., description="Display name")
    hint: Optional[str] = Field(None, description='Sides of the crossing, e.g. "KS ↔ NMKD"')

    model_config = ConfigDict(frozen=True)

    def sides(self) -> Tuple[str, str]:
        parts = [p.strip() for p in (self.hint or "").split(HINT_SEPARATOR)]
        left = parts[0] if parts and parts[0] else "LEFT"
        right = parts[1] if len(parts) > 1 and parts[1] else "RIGHT"
        return left, right

    def direction_label(self, direction: str) -> str:
        left, right = self.sides()
        return f"{left} → {right}" if direction == "L2R" else f"{right} → {left}"
