from typing import List, Sequence

import numpy as np

from ..domain.entities import DaySummary, SeriesBucket, Vote
from ...common.levels import LEVEL_COUNT, clamp_level

BUCKET_MINUTES = 15
BUCKET_MS = BUCKET_MINUTES * 60 * 1000
BUCKETS_PER_DAY = (24 * 60) // BUCKET_MINUTES  # 96

class SeriesBuilder:
    """
    Builds the intraday time series for one checkpoint: a day split into
    96 buckets of 15 minutes, each averaging the clamped levels voted in it,
    then lightly smoothed with a 3-point moving average.
    """

    def bucket_index(self, timestamp_ms: int, day_start_ms: int) -> int:
        return int((timestamp_ms - day_start_ms) // BUCKET_MS)

    def raw_buckets(self, votes: Sequence[Vote], day_start_ms: int) -> List[SeriesBucket]:
        buckets = [SeriesBucket() for _ in range(BUCKETS_PER_DAY)]

        for vote in votes:
            if vote.timestamp_ms < day_start_ms:
                continue
            idx = self.bucket_index(vote.timestamp_ms, day_start_ms)
            if idx >= BUCKETS_PER_DAY:
                continue
            bucket = buckets[idx]
            bucket.sum += clamp_level(vote.level)
            bucket.count += 1

        for bucket in buckets:
            bucket.avg = bucket.sum / bucket.count if bucket.count else 0.0
        return buckets

    @staticmethod
    def smooth(averages: Sequence[float]) -> np.ndarray:
        """
        Single 3-point moving average. Edges repeat their own value as the
        missing neighbour. Reads only the raw averages, never smoothed ones.
        """
        raw = np.asarray(averages, dtype=float)
        if raw.size == 0:
            return raw
        padded = np.pad(raw, 1, mode="edge")
        return (padded[:-2] + padded[1:-1] + padded[2:]) / 3

    def build(self, votes: Sequence[Vote], day_start_ms: int) -> List[SeriesBucket]:
        raw = self.raw_buckets(votes, day_start_ms)
        smoothed = self.smooth([b.avg for b in raw])
        return [
            SeriesBucket(sum=b.sum, count=b.count, avg=float(avg))
            for b, avg in zip(raw, smoothed)
        ]

    def summarize(self, votes: Sequence[Vote]) -> DaySummary:
        """Unweighted, unsmoothed counts per level and overall average."""
        counts = [0] * LEVEL_COUNT
        total = 0
        level_sum = 0
        for vote in votes:
            level = clamp_level(int(vote.level))
            counts[level] += 1
            level_sum += level
            total += 1
        return DaySummary(
            total=total,
            avg=level_sum / total if total else 0.0,
            counts=counts,
        )
