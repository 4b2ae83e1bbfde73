import math
from typing import List, Sequence

from ..domain.entities import LevelEstimate, Vote
from ...common.levels import (
    LEVEL_COUNT, Confidence, clamp_level, confidence_for_count, round_half_up
)

MS_PER_MINUTE = 60_000

class LevelEstimator:
    """
    Turns a window of recent votes for one checkpoint into a single
    congestion level.

    Each vote is weighted by exp(-age_minutes / decay_minutes) and added to
    the bucket of its level. The dominant level wins unless:
      * the two strongest levels are far apart and close in weight, in which
        case their midpoint is reported (split opinions such as free vs heavy);
      * the weighted average has drifted away from the dominant level, in
        which case the rounded average is reported.

    The estimator does no window filtering; callers pass the votes they
    consider live.
    """
    def __init__(
        self,
        decay_minutes: float = 12.0,
        close_weight_ratio: float = 0.7,
        far_apart_levels: int = 2,
        avg_tolerance: float = 0.35,
    ):
        self.decay_minutes = decay_minutes
        self.close_weight_ratio = close_weight_ratio
        self.far_apart_levels = far_apart_levels
        self.avg_tolerance = avg_tolerance

    def weight(self, vote: Vote, now_ms: int) -> float:
        age_minutes = max(0.0, (now_ms - vote.timestamp_ms) / MS_PER_MINUTE)
        return math.exp(-age_minutes / self.decay_minutes)

    def weight_buckets(self, votes: Sequence[Vote], now_ms: int) -> List[float]:
        buckets = [0.0] * LEVEL_COUNT
        for vote in votes:
            buckets[clamp_level(int(vote.level))] += self.weight(vote, now_ms)
        return buckets

    def estimate(self, votes: Sequence[Vote], now_ms: int) -> LevelEstimate:
        if not votes:
            return LevelEstimate(
                level=0,
                count=0,
                confidence=Confidence.LOW,
                buckets=[0.0] * LEVEL_COUNT,
                avg=0.0,
            )

        buckets = self.weight_buckets(votes, now_ms)

        total_weight = sum(buckets) or 1.0
        avg = sum(level * w for level, w in enumerate(buckets)) / total_weight

        # sorted() is stable, so equal weights keep the lower level first
        ranked = sorted(range(LEVEL_COUNT), key=lambda level: -buckets[level])
        top1, top2 = ranked[0], ranked[1]
        top1w, top2w = buckets[top1], buckets[top2]

        far_apart = abs(top1 - top2) >= self.far_apart_levels
        close_enough = top2w >= top1w * self.close_weight_ratio

        if far_apart and close_enough:
            level = clamp_level(round_half_up((top1 + top2) / 2))
        elif abs(avg - top1) < self.avg_tolerance:
            level = top1
        else:
            level = clamp_level(round_half_up(avg))

        count = len(votes)
        return LevelEstimate(
            level=level,
            count=count,
            confidence=confidence_for_count(count),
            buckets=buckets,
            avg=avg,
        )
