import argparse
import datetime
import math
import os
import random
import sys
from pathlib import Path
from zoneinfo import ZoneInfo

import pandas as pd

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from borderwait.aggregation.domain.entities import Direction, Vote
from borderwait.aggregation.application.windows import start_of_day_ms
from borderwait.common.config.manager import ConfigManager
from borderwait.common.database import init_db, make_engine, make_session_factory
from borderwait.common.database.database import DATABASE_URL
from borderwait.reporting.application.identity import get_or_create_device_id
from borderwait.reporting.infrastructure import InMemoryKeyValueStore, SqlAlchemyVoteRepository

# Simulation Configuration
NUM_DEVICES = 40
VOTES_PER_CHECKPOINT = 300

def expected_level(hour: float) -> float:
    """
    Typical border profile: quiet at night, a morning peak and a longer
    afternoon/evening peak.
    """
    morning = 1.6 * math.exp(-((hour - 8.5) ** 2) / 3.0)
    evening = 2.4 * math.exp(-((hour - 17.5) ** 2) / 6.0)
    return min(3.0, 0.2 + morning + evening)

def generate_votes(checkpoint_ids, day_start_ms: int, num_votes: int = VOTES_PER_CHECKPOINT):
    print(f"Generating {num_votes} synthetic votes for {len(checkpoint_ids)} checkpoints...")

    # Each simulated device keeps its own local store, like a phone would
    devices = [get_or_create_device_id(InMemoryKeyValueStore()) for _ in range(NUM_DEVICES)]

    votes = []
    for checkpoint_id in checkpoint_ids:
        for _ in range(num_votes):
            offset_ms = random.randint(0, 24 * 60 * 60 * 1000 - 1)
            hour = offset_ms / 3_600_000
            # Votes are noisy: around the expected level, occasionally way off
            noisy = random.gauss(expected_level(hour), 0.6)
            if random.random() < 0.05:
                noisy = random.choice([0, 3])
            votes.append(Vote(
                checkpoint_id=checkpoint_id,
                level=int(round(noisy)),  # raw, possibly out of range; clamped on use
                timestamp_ms=day_start_ms + offset_ms,
                origin_id=random.choice(devices),
                direction=random.choice([Direction.L2R, Direction.R2L, None]),
            ))
    return votes

def main():
    parser = argparse.ArgumentParser(description="Generate synthetic checkpoint votes for one day")
    parser.add_argument("--config-dir", default="conf")
    parser.add_argument("--date", default=None, help="YYYY-MM-DD, defaults to today")
    parser.add_argument("--votes", type=int, default=VOTES_PER_CHECKPOINT)
    parser.add_argument("--output", default="data/votes/votes_synthetic.csv")
    parser.add_argument("--seed-db", action="store_true", help="Also insert the votes into the database")
    args = parser.parse_args()

    cfg = ConfigManager(Path(args.config_dir)).load()
    tz = ZoneInfo(cfg.estimation.timezone)
    day = datetime.date.fromisoformat(args.date) if args.date else datetime.datetime.now(tz).date()
    noon = datetime.datetime.combine(day, datetime.time(12), tzinfo=tz)
    day_start = start_of_day_ms(int(noon.timestamp() * 1000), tz)

    votes = generate_votes([c.id for c in cfg.checkpoints], day_start, args.votes)

    df = pd.DataFrame([{
        "checkpoint_id": v.checkpoint_id,
        "level": v.level,
        "timestamp_ms": v.timestamp_ms,
        "origin_id": v.origin_id,
        "direction": v.direction.value if v.direction else None,
    } for v in votes])
    df['datetime'] = pd.to_datetime(df['timestamp_ms'], unit='ms', utc=True).dt.tz_convert(tz)
    df = df.sort_values(by="timestamp_ms")
    print(df.head())

    os.makedirs(os.path.dirname(args.output), exist_ok=True)
    df.to_csv(args.output, index=False)
    print(f"Dataset saved to {args.output}")

    if args.seed_db:
        engine = make_engine(cfg.persistence.url or DATABASE_URL)
        init_db(engine)
        repository = SqlAlchemyVoteRepository(make_session_factory(engine))
        for vote in votes:
            repository.save(vote)
        print(f"Inserted {len(votes)} votes into the database")

if __name__ == "__main__":
    main()
