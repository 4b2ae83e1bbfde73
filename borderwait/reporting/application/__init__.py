from .submission import (
    VoteCooldown,
    VoteSubmissionService,
    sanitize_key,
    last_vote_key,
    last_vote_level_key
)
from .identity import generate_device_id, get_or_create_device_id
