"""
Domain repositories for the reporting module.
"""
from typing import List, Optional, Protocol
from ...aggregation.domain.entities import Vote

class VoteRepository(Protocol):
    """
    Storage for submitted votes.
    """
    def save(self, vote: Vote):
        ...

    def list_for_checkpoint(self, checkpoint_id: str, since_ms: Optional[int] = None) -> List[Vote]:
        ...

class KeyValueStore(Protocol):
    """
    Small string key-value store for per-device state (last vote time, last
    level, device id).
    """
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str):
        ...
