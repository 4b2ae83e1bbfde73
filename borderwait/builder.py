from dataclasses import dataclass, field
from typing import Callable, Dict, Optional
from zoneinfo import ZoneInfo

from omegaconf import DictConfig

from .aggregation.application.service import CheckpointService
from .aggregation.domain.entities import LevelEstimate
from .common.cache import TTLCache
from .common.database import init_db, make_engine, make_session_factory
from .common.database.database import DATABASE_URL
from .common.logging import setup_logger
from .common.schemas import Checkpoint
from .common.utils import current_time_ms
from .reporting.application.submission import VoteCooldown, VoteSubmissionService
from .reporting.domain import KeyValueStore, VoteRepository
from .reporting.infrastructure import (
    InMemoryKeyValueStore, InMemoryVoteRepository,
    SqlAlchemyKeyValueStore, SqlAlchemyVoteRepository
)

logger = setup_logger(__name__)

@dataclass
class AppContext:
    """
    Everything the API routes need, wired from configuration.
    """
    checkpoints: Dict[str, Checkpoint]
    service: CheckpointService
    submission: VoteSubmissionService
    cooldown: VoteCooldown
    cache: Optional[TTLCache[LevelEstimate]] = None
    clock: Callable[[], int] = field(default=current_time_ms)

class BorderWaitApplicationBuilder:
    """
    Builder for the application context.
    Centralizes component instantiation and wiring.
    """

    def __init__(self, config: DictConfig, clock: Callable[[], int] = current_time_ms):
        self.config = config
        self.clock = clock

        self.checkpoints: Dict[str, Checkpoint] = {}
        self.repository: Optional[VoteRepository] = None
        self.store: Optional[KeyValueStore] = None
        self.service: Optional[CheckpointService] = None
        self.submission: Optional[VoteSubmissionService] = None
        self.cooldown: Optional[VoteCooldown] = None
        self.cache: Optional[TTLCache[LevelEstimate]] = None

    def build_checkpoints(self) -> 'BorderWaitApplicationBuilder':
        # Updated in place, the submission service may already hold this dict
        self.checkpoints.clear()
        self.checkpoints.update({
            c.id: Checkpoint(id=c.id, name=c.name, hint=c.hint)
            for c in self.config.checkpoints
        })
        logger.info(f"Registered checkpoints: {', '.join(self.checkpoints)}")
        return self

    def build_persistence(self) -> 'BorderWaitApplicationBuilder':
        persistence = self.config.persistence
        if persistence.type == "memory":
            logger.info("Using in-memory persistence")
            self.repository = InMemoryVoteRepository()
            self.store = InMemoryKeyValueStore()
            return self

        url = persistence.url or DATABASE_URL
        logger.info(f"Using database persistence: {url.split('@')[-1]}")
        engine = make_engine(url)
        init_db(engine)
        session_factory = make_session_factory(engine)
        self.repository = SqlAlchemyVoteRepository(session_factory)
        self.store = SqlAlchemyKeyValueStore(session_factory)
        return self

    def build_services(self) -> 'BorderWaitApplicationBuilder':
        if self.repository is None:
            self.build_persistence()
        estimation = self.config.estimation
        self.service = CheckpointService(
            repository=self.repository,
            tz=ZoneInfo(estimation.timezone),
            live_window_ms=int(estimation.live_window_hours * 60 * 60 * 1000),
        )
        self.cooldown = VoteCooldown(self.store, cooldown_ms=self.config.reporting.cooldown_seconds * 1000)
        self.submission = VoteSubmissionService(self.repository, self.cooldown, self.checkpoints)
        if self.config.cache.enabled:
            self.cache = TTLCache(ttl_ms=self.config.cache.ttl_seconds * 1000)
        return self

    def build(self) -> AppContext:
        if not self.checkpoints:
            self.build_checkpoints()
        if self.service is None:
            self.build_services()
        return AppContext(
            checkpoints=self.checkpoints,
            service=self.service,
            submission=self.submission,
            cooldown=self.cooldown,
            cache=self.cache,
            clock=self.clock,
        )
