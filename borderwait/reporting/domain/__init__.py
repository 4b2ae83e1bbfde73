"""
Domain module initialization.
"""
from .repositories import VoteRepository, KeyValueStore
