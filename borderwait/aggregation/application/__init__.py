from .estimator import LevelEstimator
from .series import SeriesBuilder, BUCKET_MINUTES, BUCKET_MS, BUCKETS_PER_DAY
from .windows import LIVE_WINDOW_MS, start_of_day_ms, votes_since, live_votes, filter_direction
from .service import CheckpointService, DaySeries
