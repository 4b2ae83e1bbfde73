import pytest
from zoneinfo import ZoneInfo
from borderwait.aggregation.domain.entities import Vote
from borderwait.common.config.manager import ConfigManager

# 2024-06-15 10:00:00 UTC
NOW_MS = 1_718_445_600_000
MINUTE_MS = 60_000

@pytest.fixture
def now_ms():
    return NOW_MS

@pytest.fixture
def make_vote():
    def _make(level, minutes_ago=0.0, now=NOW_MS, checkpoint_id="JARINJE", **kwargs):
        return Vote(
            checkpoint_id=checkpoint_id,
            level=level,
            timestamp_ms=int(now - minutes_ago * MINUTE_MS),
            **kwargs
        )
    return _make

@pytest.fixture
def utc():
    return ZoneInfo("UTC")

@pytest.fixture
def app_config():
    return ConfigManager.build({
        'checkpoints': [
            {'id': 'HANI_I_ELEZIT', 'name': 'Bllacë (Hani i Elezit)', 'hint': 'KS ↔ NMKD'},
            {'id': 'JARINJE', 'name': 'Jarinjë', 'hint': 'KS ↔ S'},
        ],
        'estimation': {'live_window_hours': 2, 'timezone': 'UTC'},
        'reporting': {'cooldown_seconds': 60},
        'cache': {'enabled': True, 'ttl_seconds': 30},
        'persistence': {'type': 'memory'},
    })
