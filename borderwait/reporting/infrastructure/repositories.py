import threading
from typing import Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..domain import VoteRepository
from ...aggregation.domain.entities import Direction, Vote
from ...common.database.models import VoteDB
from ...common.exceptions import RepositoryError
from ...common.logging import setup_logger

logger = setup_logger(__name__)

class InMemoryVoteRepository(VoteRepository):
    """
    Keeps votes in process memory, grouped by checkpoint.
    """
    def __init__(self):
        self._votes: Dict[str, List[Vote]] = {}
        self._lock = threading.Lock()

    def save(self, vote: Vote):
        with self._lock:
            self._votes.setdefault(vote.checkpoint_id, []).append(vote)

    def list_for_checkpoint(self, checkpoint_id: str, since_ms: Optional[int] = None) -> List[Vote]:
        with self._lock:
            votes = list(self._votes.get(checkpoint_id, []))
        if since_ms is not None:
            votes = [v for v in votes if v.timestamp_ms >= since_ms]
        return votes

class SqlAlchemyVoteRepository(VoteRepository):
    """
    Stores votes in the `votes` table. One session per call.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, vote: Vote):
        row = VoteDB(
            checkpoint_id=vote.checkpoint_id,
            level=vote.level,
            timestamp_ms=vote.timestamp_ms,
            origin_id=vote.origin_id,
            direction=vote.direction.value if vote.direction else None,
        )
        with self.session_factory() as session:
            try:
                session.add(row)
                session.commit()
            except (SQLAlchemyError, OverflowError) as e:
                # sqlite3 raises OverflowError for integers beyond 64 bits
                session.rollback()
                logger.error(f"Failed to save vote for {vote.checkpoint_id}: {e}")
                raise RepositoryError(f"Could not save vote: {e}") from e

    def list_for_checkpoint(self, checkpoint_id: str, since_ms: Optional[int] = None) -> List[Vote]:
        stmt = select(VoteDB).where(VoteDB.checkpoint_id == checkpoint_id)
        if since_ms is not None:
            stmt = stmt.where(VoteDB.timestamp_ms >= since_ms)
        stmt = stmt.order_by(VoteDB.timestamp_ms)

        with self.session_factory() as session:
            try:
                rows = session.scalars(stmt).all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to load votes for {checkpoint_id}: {e}")
                raise RepositoryError(f"Could not load votes: {e}") from e
            return [self._to_vote(row) for row in rows]

    @staticmethod
    def _to_vote(row: VoteDB) -> Vote:
        return Vote(
            checkpoint_id=row.checkpoint_id,
            level=row.level,
            timestamp_ms=row.timestamp_ms,
            origin_id=row.origin_id,
            direction=Direction(row.direction) if row.direction else None,
        )
