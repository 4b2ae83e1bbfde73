"""
Domain module initialization.
"""
from .entities import (
    Direction,
    Vote,
    LevelEstimate,
    SeriesBucket,
    DaySummary
)
