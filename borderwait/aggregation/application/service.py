import logging
from dataclasses import dataclass
from typing import List, Optional
from zoneinfo import ZoneInfo

from .estimator import LevelEstimator
from .series import SeriesBuilder
from .windows import LIVE_WINDOW_MS, filter_direction, live_votes, start_of_day_ms
from ..domain.entities import DaySummary, Direction, LevelEstimate, SeriesBucket
from ...common.logging import log_execution_time, setup_logger
from ...reporting.domain import VoteRepository

logger = setup_logger(__name__)

@dataclass(frozen=True)
class DaySeries:
    day_start_ms: int
    buckets: List[SeriesBucket]
    summary: DaySummary

class CheckpointService:
    """
    Loads today's votes for a checkpoint and runs them through the estimator
    and the series builder. Holds no state between calls.
    """
    def __init__(
        self,
        repository: VoteRepository,
        tz: ZoneInfo,
        live_window_ms: int = LIVE_WINDOW_MS,
        estimator: Optional[LevelEstimator] = None,
        series_builder: Optional[SeriesBuilder] = None,
    ):
        self.repository = repository
        self.tz = tz
        self.live_window_ms = live_window_ms
        self.estimator = estimator or LevelEstimator()
        self.series_builder = series_builder or SeriesBuilder()

    def _votes_today(self, checkpoint_id: str, now_ms: int, direction: Optional[Direction]):
        day_start = start_of_day_ms(now_ms, self.tz)
        votes = self.repository.list_for_checkpoint(checkpoint_id, since_ms=day_start)
        return day_start, filter_direction(votes, direction)

    @log_execution_time(logging.getLogger(__name__))
    def live(self, checkpoint_id: str, now_ms: int, direction: Optional[Direction] = None) -> LevelEstimate:
        _, today = self._votes_today(checkpoint_id, now_ms, direction)
        window = live_votes(today, now_ms, self.live_window_ms)
        estimate = self.estimator.estimate(window, now_ms)
        logger.debug(
            f"{checkpoint_id}: level={estimate.level} count={estimate.count} "
            f"confidence={estimate.confidence.value}"
        )
        return estimate

    @log_execution_time(logging.getLogger(__name__))
    def today(self, checkpoint_id: str, now_ms: int, direction: Optional[Direction] = None) -> DaySeries:
        day_start, today = self._votes_today(checkpoint_id, now_ms, direction)
        return DaySeries(
            day_start_ms=day_start,
            buckets=self.series_builder.build(today, day_start),
            summary=self.series_builder.summarize(today),
        )
