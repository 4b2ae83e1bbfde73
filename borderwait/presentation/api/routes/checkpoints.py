"""
API for live estimates and daily series per checkpoint.
"""
from typing import List, Optional
from fastapi import FastAPI, HTTPException

from ..context import get_context
from ....aggregation.application.series import BUCKET_MINUTES
from ....aggregation.domain.entities import Direction
from ....builder import AppContext
from ....common.exceptions import RepositoryError
from ....common.levels import day_status, status_for_level
from ....common.schemas import (
    Checkpoint, DaySeriesOut, DaySummaryOut, LevelEstimateOut, SeriesPointOut, StatusOut
)

app = FastAPI()

def _status_out(status) -> StatusOut:
    return StatusOut(key=status.key, title=status.title, description=status.description)

def _require_checkpoint(context: AppContext, checkpoint_id: str) -> Checkpoint:
    checkpoint = context.checkpoints.get(checkpoint_id)
    if checkpoint is None:
        raise HTTPException(404, f"Unknown checkpoint: {checkpoint_id}")
    return checkpoint

def cache_prefix(checkpoint_id: str) -> str:
    return f"{checkpoint_id}:"

def cache_key(checkpoint_id: str, direction: Optional[Direction]) -> str:
    return cache_prefix(checkpoint_id) + f"{direction.value if direction else 'ALL'}"

@app.get("/checkpoints", response_model=List[Checkpoint])
async def list_checkpoints():
    """Configured checkpoints."""
    return list(get_context().checkpoints.values())

@app.get("/checkpoints/{checkpoint_id}/live", response_model=LevelEstimateOut)
def get_live(checkpoint_id: str, direction: Optional[Direction] = None):
    """Current congestion estimate from the votes of the live window."""
    context = get_context()
    checkpoint = _require_checkpoint(context, checkpoint_id)
    now_ms = context.clock()

    key = cache_key(checkpoint_id, direction)
    entry = context.cache.get(key, now_ms) if context.cache is not None else None
    if entry is not None:
        estimate, computed_at = entry.value, entry.fetched_at_ms
    else:
        try:
            estimate = context.service.live(checkpoint_id, now_ms, direction)
        except RepositoryError as e:
            raise HTTPException(503, str(e))
        computed_at = now_ms
        if context.cache is not None:
            context.cache.put(key, estimate, now_ms)

    return LevelEstimateOut(
        checkpoint_id=checkpoint_id,
        direction=direction.value if direction else None,
        direction_label=checkpoint.direction_label(direction.value) if direction else None,
        level=estimate.level,
        count=estimate.count,
        confidence=estimate.confidence,
        buckets=estimate.buckets,
        avg=estimate.avg,
        status=_status_out(status_for_level(estimate.level)),
        computed_at_ms=computed_at,
    )

@app.get("/checkpoints/{checkpoint_id}/today", response_model=DaySeriesOut)
def get_today(checkpoint_id: str, direction: Optional[Direction] = None):
    """Smoothed 15 minute series since local midnight, plus the day's summary."""
    context = get_context()
    checkpoint = _require_checkpoint(context, checkpoint_id)

    try:
        series = context.service.today(checkpoint_id, context.clock(), direction)
    except RepositoryError as e:
        raise HTTPException(503, str(e))

    summary = series.summary
    return DaySeriesOut(
        checkpoint_id=checkpoint_id,
        direction=direction.value if direction else None,
        direction_label=checkpoint.direction_label(direction.value) if direction else None,
        day_start_ms=series.day_start_ms,
        bucket_minutes=BUCKET_MINUTES,
        points=[
            SeriesPointOut(index=i, sum=b.sum, count=b.count, avg=b.avg)
            for i, b in enumerate(series.buckets)
        ],
        summary=DaySummaryOut(
            total=summary.total,
            avg=summary.avg,
            counts=summary.counts,
            status=_status_out(day_status(summary.avg)),
        ),
    )
