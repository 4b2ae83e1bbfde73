from .checkpoint import Checkpoint
from .vote import VoteIn, VoteOut, LastVoteOut
from .estimate import StatusOut, LevelEstimateOut, SeriesPointOut, DaySummaryOut, DaySeriesOut

__all__ = [
    "Checkpoint",
    "VoteIn",
    "VoteOut",
    "LastVoteOut",
    "StatusOut",
    "LevelEstimateOut",
    "SeriesPointOut",
    "DaySummaryOut",
    "DaySeriesOut",
]
