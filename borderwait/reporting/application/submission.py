import math
import re
import threading
from typing import Mapping, Optional

from ..domain import KeyValueStore, VoteRepository
from ...aggregation.domain.entities import Direction, Vote
from ...common.exceptions import CooldownActiveError, UnknownCheckpointError
from ...common.levels import clamp_level
from ...common.logging import setup_logger

KEY_PREFIX = "borderwait"
DEFAULT_COOLDOWN_MS = 60 * 1000

logger = setup_logger(__name__)

def sanitize_key(value: str) -> str:
    """Upper-cases, turns whitespace runs into '_' and drops anything outside [A-Z0-9_]."""
    value = re.sub(r"\s+", "_", value.upper())
    return re.sub(r"[^A-Z0-9_]", "", value)

def _scope(checkpoint_id: str, origin_id: Optional[str]) -> str:
    scope = sanitize_key(checkpoint_id)
    if origin_id:
        scope = f"{scope}_{sanitize_key(origin_id)}"
    return scope

def last_vote_key(checkpoint_id: str, origin_id: Optional[str] = None) -> str:
    return f"{KEY_PREFIX}_lastvote_{_scope(checkpoint_id, origin_id)}"

def last_vote_level_key(checkpoint_id: str, origin_id: Optional[str] = None) -> str:
    return f"{KEY_PREFIX}_lastvote_level_{_scope(checkpoint_id, origin_id)}"

def _parse_number(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        number = float(raw)
    except ValueError:
        return None
    return None if math.isnan(number) else number

class VoteCooldown:
    """
    Per device, per checkpoint rate limit: one vote every `cooldown_ms`.
    State lives in the injected KeyValueStore.
    """
    def __init__(self, store: KeyValueStore, cooldown_ms: int = DEFAULT_COOLDOWN_MS):
        self.store = store
        self.cooldown_ms = cooldown_ms

    def last_vote_ms(self, checkpoint_id: str, origin_id: Optional[str] = None) -> int:
        """0 means no recorded vote."""
        value = _parse_number(self.store.get(last_vote_key(checkpoint_id, origin_id)))
        return int(value) if value else 0

    def remaining_ms(self, checkpoint_id: str, now_ms: int, origin_id: Optional[str] = None) -> int:
        last_ms = self.last_vote_ms(checkpoint_id, origin_id)
        if last_ms and now_ms - last_ms < self.cooldown_ms:
            return self.cooldown_ms - (now_ms - last_ms)
        return 0

    def check(self, checkpoint_id: str, now_ms: int, origin_id: Optional[str] = None):
        remaining = self.remaining_ms(checkpoint_id, now_ms, origin_id)
        if remaining > 0:
            raise CooldownActiveError(checkpoint_id, math.ceil(remaining / 1000))

    def record(self, checkpoint_id: str, level: int, now_ms: int, origin_id: Optional[str] = None):
        self.store.set(last_vote_key(checkpoint_id, origin_id), str(now_ms))
        self.store.set(last_vote_level_key(checkpoint_id, origin_id), str(level))

    def last_level(self, checkpoint_id: str, origin_id: Optional[str] = None) -> Optional[int]:
        value = _parse_number(self.store.get(last_vote_level_key(checkpoint_id, origin_id)))
        if value is None:
            return None
        return int(clamp_level(value))

class VoteSubmissionService:
    """
    Accepts a vote for a known checkpoint, subject to the cooldown.
    Levels are clamped to 0-3 before they are stored.
    """
    def __init__(self, repository: VoteRepository, cooldown: VoteCooldown, checkpoints: Mapping[str, object]):
        self.repository = repository
        self.cooldown = cooldown
        self.checkpoints = checkpoints
        # Cooldown check, save and record run as one step
        self._lock = threading.Lock()

    def submit(
        self,
        checkpoint_id: str,
        level: int,
        now_ms: int,
        origin_id: Optional[str] = None,
        direction: Optional[Direction] = None,
    ) -> Vote:
        if checkpoint_id not in self.checkpoints:
            raise UnknownCheckpointError(checkpoint_id)

        level = clamp_level(int(level))
        with self._lock:
            self.cooldown.check(checkpoint_id, now_ms, origin_id)

            vote = Vote(
                checkpoint_id=checkpoint_id,
                level=level,
                timestamp_ms=now_ms,
                origin_id=origin_id,
                direction=direction,
            )
            self.repository.save(vote)
            self.cooldown.record(checkpoint_id, level, now_ms, origin_id)

        logger.info(f"Vote accepted for {checkpoint_id}: level={level}")
        return vote
