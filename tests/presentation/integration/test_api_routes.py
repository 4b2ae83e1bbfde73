import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch
from borderwait.builder import BorderWaitApplicationBuilder
from borderwait.common.exceptions import RepositoryError
from borderwait.presentation.api import app
from borderwait.presentation.api.context import init_context

# 2024-06-15 10:00:00 UTC
NOW = 1_718_445_600_000

class FakeClock:
    def __init__(self, now_ms):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms

    def advance(self, ms):
        self.now_ms += ms

@pytest.fixture
def clock():
    return FakeClock(NOW)

@pytest.fixture
def context(app_config, clock):
    ctx = BorderWaitApplicationBuilder(app_config, clock=clock).build()
    init_context(ctx)
    yield ctx
    init_context(None)

@pytest.fixture
def client(context):
    return TestClient(app)

def test_list_checkpoints(client):
    response = client.get("/checkpoints")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ["HANI_I_ELEZIT", "JARINJE"]

def test_live_without_votes(client):
    response = client.get("/checkpoints/JARINJE/live")
    assert response.status_code == 200
    body = response.json()
    assert body["level"] == 0
    assert body["count"] == 0
    assert body["confidence"] == "Low"
    assert body["buckets"] == [0.0, 0.0, 0.0, 0.0]
    assert body["status"]["key"] == "free"

def test_unknown_checkpoint(client):
    assert client.get("/checkpoints/NOWHERE/live").status_code == 404
    assert client.get("/checkpoints/NOWHERE/today").status_code == 404
    assert client.post("/checkpoints/NOWHERE/votes", json={"level": 1}).status_code == 404

def test_submit_vote_updates_live(client, clock):
    # Warm the cache first, the vote must invalidate it
    client.get("/checkpoints/JARINJE/live")

    response = client.post("/checkpoints/JARINJE/votes", json={"level": 3, "origin_id": "dev1"})
    assert response.status_code == 201
    assert response.json() == {"checkpoint_id": "JARINJE", "level": 3, "timestamp_ms": NOW, "direction": None}

    body = client.get("/checkpoints/JARINJE/live").json()
    assert body["level"] == 3
    assert body["count"] == 1
    assert body["status"]["key"] == "heavy"

def test_cooldown_returns_429(client, clock):
    assert client.post("/checkpoints/JARINJE/votes", json={"level": 1, "origin_id": "dev1"}).status_code == 201
    clock.advance(20_000)
    response = client.post("/checkpoints/JARINJE/votes", json={"level": 2, "origin_id": "dev1"})
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "40"

    clock.advance(40_000)
    assert client.post("/checkpoints/JARINJE/votes", json={"level": 2, "origin_id": "dev1"}).status_code == 201

def test_invalid_vote_body(client):
    assert client.post("/checkpoints/JARINJE/votes", json={"level": "jammed"}).status_code == 422
    assert client.post("/checkpoints/JARINJE/votes", json={"level": 1, "direction": "UP"}).status_code == 422

def test_live_is_cached_within_ttl(client, context, clock):
    first = client.get("/checkpoints/JARINJE/live").json()
    # A vote written behind the API's back is not seen until the entry expires
    context.submission.submit("JARINJE", 3, clock())
    clock.advance(10_000)
    assert client.get("/checkpoints/JARINJE/live").json() == first

    clock.advance(20_000)
    body = client.get("/checkpoints/JARINJE/live").json()
    assert body["count"] == 1
    assert body["computed_at_ms"] == NOW + 30_000

def test_live_direction_filter(client):
    client.post("/checkpoints/JARINJE/votes", json={"level": 3, "origin_id": "a", "direction": "R2L"})
    client.post("/checkpoints/JARINJE/votes", json={"level": 0, "origin_id": "b", "direction": "L2R"})
    body = client.get("/checkpoints/JARINJE/live", params={"direction": "R2L"}).json()
    assert body["direction"] == "R2L"
    assert body["direction_label"] == "S → KS"
    assert body["level"] == 3
    assert client.get("/checkpoints/JARINJE/live", params={"direction": "UP"}).status_code == 422

def test_today_series(client):
    client.post("/checkpoints/JARINJE/votes", json={"level": 2, "origin_id": "a"})
    client.post("/checkpoints/JARINJE/votes", json={"level": 3, "origin_id": "b"})
    response = client.get("/checkpoints/JARINJE/today")
    assert response.status_code == 200
    body = response.json()
    assert body["day_start_ms"] == NOW - 10 * 60 * 60 * 1000
    assert body["bucket_minutes"] == 15
    assert len(body["points"]) == 96
    assert body["points"][40]["count"] == 2
    assert body["points"][40]["avg"] == pytest.approx((0 + 2.5 + 0) / 3)
    assert body["summary"]["total"] == 2
    assert body["summary"]["counts"] == [0, 0, 1, 1]
    assert body["summary"]["status"]["key"] == "heavy"

def test_last_vote(client):
    assert client.get("/checkpoints/JARINJE/last-vote", params={"origin_id": "dev1"}).json()["level"] is None
    client.post("/checkpoints/JARINJE/votes", json={"level": 2, "origin_id": "dev1"})
    response = client.get("/checkpoints/JARINJE/last-vote", params={"origin_id": "dev1"})
    assert response.json() == {"checkpoint_id": "JARINJE", "level": 2}
    assert client.get("/checkpoints/NOWHERE/last-vote").status_code == 404

def test_repository_failure_returns_503(client, context):
    context.cache = None
    with patch.object(context.service, "live", side_effect=RepositoryError("db down")):
        assert client.get("/checkpoints/JARINJE/live").status_code == 503

def test_missing_context_returns_500():
    init_context(None)
    response = TestClient(app).get("/checkpoints")
    assert response.status_code == 500

def test_routes_use_patched_context():
    mock_context = MagicMock()
    mock_context.checkpoints = {}
    with patch('borderwait.presentation.api.routes.checkpoints.get_context', return_value=mock_context):
        response = TestClient(app).get("/checkpoints")
    assert response.status_code == 200
    assert response.json() == []

def test_out_of_range_level_is_clamped_in_database(app_config, clock):
    app_config.persistence.type = "sqlalchemy"
    app_config.persistence.url = "sqlite://"
    init_context(BorderWaitApplicationBuilder(app_config, clock=clock).build())
    try:
        client = TestClient(app)
        response = client.post("/checkpoints/JARINJE/votes", json={"level": 10**20, "origin_id": "a"})
        assert response.status_code == 201
        assert response.json()["level"] == 3
        assert client.get("/checkpoints/JARINJE/live").json()["level"] == 3
        assert client.get("/checkpoints/JARINJE/last-vote", params={"origin_id": "a"}).json()["level"] == 3
    finally:
        init_context(None)
