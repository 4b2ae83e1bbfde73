"""
Infrastructure module initialization.
"""
from .repositories import InMemoryVoteRepository, SqlAlchemyVoteRepository
from .stores import InMemoryKeyValueStore, SqlAlchemyKeyValueStore

__all__ = [
    "InMemoryVoteRepository",
    "SqlAlchemyVoteRepository",
    "InMemoryKeyValueStore",
    "SqlAlchemyKeyValueStore"
]
