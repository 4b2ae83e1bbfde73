"""
API for submitting votes.
"""
from typing import Optional
from fastapi import FastAPI, HTTPException

from ..context import get_context
from .checkpoints import cache_prefix
from ....common.exceptions import CooldownActiveError, RepositoryError, UnknownCheckpointError
from ....common.schemas import LastVoteOut, VoteIn, VoteOut

app = FastAPI()

@app.post("/checkpoints/{checkpoint_id}/votes", response_model=VoteOut, status_code=201)
def submit_vote(checkpoint_id: str, vote_in: VoteIn):
    """
    Records a vote timestamped with the server clock.

    Body example:
    {
        "level": 2,
        "origin_id": "3f2a...",
        "direction": "L2R"
    }
    """
    context = get_context()
    now_ms = context.clock()
    try:
        vote = context.submission.submit(
            checkpoint_id,
            level=vote_in.level,
            now_ms=now_ms,
            origin_id=vote_in.origin_id,
            direction=vote_in.direction,
        )
    except UnknownCheckpointError as e:
        raise HTTPException(404, str(e))
    except CooldownActiveError as e:
        raise HTTPException(429, str(e), headers={"Retry-After": str(e.seconds_left)})
    except RepositoryError as e:
        raise HTTPException(503, str(e))

    if context.cache is not None:
        # Both the directional and the undirected estimate are stale now
        context.cache.invalidate(cache_prefix(checkpoint_id))

    return VoteOut(
        checkpoint_id=vote.checkpoint_id,
        level=vote.level,
        timestamp_ms=vote.timestamp_ms,
        direction=vote.direction,
    )

@app.get("/checkpoints/{checkpoint_id}/last-vote", response_model=LastVoteOut)
def get_last_vote(checkpoint_id: str, origin_id: Optional[str] = None):
    """Level of the last vote this device cast for the checkpoint."""
    context = get_context()
    if checkpoint_id not in context.checkpoints:
        raise HTTPException(404, f"Unknown checkpoint: {checkpoint_id}")
    return LastVoteOut(
        checkpoint_id=checkpoint_id,
        level=context.cooldown.last_level(checkpoint_id, origin_id),
    )
