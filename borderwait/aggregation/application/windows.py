"""
Vote pre-filters applied before the aggregation core: the live window, the
"since local midnight" window and the optional travel direction.
"""
from datetime import datetime
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from ..domain.entities import Direction, Vote

LIVE_WINDOW_HOURS = 2
LIVE_WINDOW_MS = LIVE_WINDOW_HOURS * 60 * 60 * 1000

def start_of_day_ms(now_ms: int, tz: ZoneInfo) -> int:
    """Epoch milliseconds of local midnight for the day containing `now_ms`."""
    local = datetime.fromtimestamp(now_ms / 1000, tz=tz)
    midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp() * 1000)

def votes_since(votes: Sequence[Vote], start_ms: int) -> List[Vote]:
    return [v for v in votes if v.timestamp_ms >= start_ms]

def live_votes(votes: Sequence[Vote], now_ms: int, window_ms: int = LIVE_WINDOW_MS) -> List[Vote]:
    return votes_since(votes, now_ms - window_ms)

def filter_direction(votes: Sequence[Vote], direction: Optional[Direction]) -> List[Vote]:
    """
    Keeps the votes travelling in `direction`. Votes without a direction count
    as L2R. `None` disables the filter.
    """
    if direction is None:
        return list(votes)
    return [v for v in votes if Direction.of(v.direction) == direction]
