import threading
import time
import pytest
from unittest.mock import MagicMock
from borderwait.aggregation.domain.entities import Direction
from borderwait.common.exceptions import CooldownActiveError, UnknownCheckpointError
from borderwait.reporting.application.submission import (
    VoteCooldown, VoteSubmissionService, last_vote_key, last_vote_level_key, sanitize_key
)
from borderwait.reporting.infrastructure import InMemoryKeyValueStore, InMemoryVoteRepository

T0 = 1_718_445_600_000

@pytest.fixture
def store():
    return InMemoryKeyValueStore()

@pytest.fixture
def cooldown(store):
    return VoteCooldown(store, cooldown_ms=60_000)

@pytest.fixture
def service(cooldown):
    return VoteSubmissionService(InMemoryVoteRepository(), cooldown, {"JARINJE": object(), "VERMICE": object()})

# --- Keys ---
@pytest.mark.parametrize("raw,expected", [
    ("JARINJE", "JARINJE"),
    ("hani i elezit", "HANI_I_ELEZIT"),
    ("Vërmicë", "VRMIC"),
    ("a  b\tc", "A_B_C"),
    ("x-y.z", "XYZ"),
])
def test_sanitize_key(raw, expected):
    assert sanitize_key(raw) == expected

def test_keys_are_scoped_per_device():
    assert last_vote_key("Jarinje") == "borderwait_lastvote_JARINJE"
    assert last_vote_level_key("Jarinje") == "borderwait_lastvote_level_JARINJE"
    assert last_vote_key("Jarinje", "ab12") == "borderwait_lastvote_JARINJE_AB12"

# --- Cooldown ---
def test_no_previous_vote_means_no_cooldown(cooldown):
    assert cooldown.last_vote_ms("JARINJE") == 0
    assert cooldown.remaining_ms("JARINJE", T0) == 0
    cooldown.check("JARINJE", T0)

def test_cooldown_blocks_within_window(cooldown):
    cooldown.record("JARINJE", 2, T0)
    assert cooldown.remaining_ms("JARINJE", T0 + 1_000) == 59_000
    with pytest.raises(CooldownActiveError) as exc:
        cooldown.check("JARINJE", T0 + 1_000)
    assert exc.value.seconds_left == 59

def test_cooldown_rounds_seconds_up(cooldown):
    cooldown.record("JARINJE", 2, T0)
    with pytest.raises(CooldownActiveError) as exc:
        cooldown.check("JARINJE", T0 + 59_999)
    assert exc.value.seconds_left == 1

def test_cooldown_expires_exactly_after_window(cooldown):
    cooldown.record("JARINJE", 2, T0)
    cooldown.check("JARINJE", T0 + 60_000)

def test_cooldown_is_per_checkpoint_and_device(cooldown):
    cooldown.record("JARINJE", 2, T0, origin_id="dev1")
    cooldown.check("VERMICE", T0 + 1, origin_id="dev1")
    cooldown.check("JARINJE", T0 + 1, origin_id="dev2")
    with pytest.raises(CooldownActiveError):
        cooldown.check("JARINJE", T0 + 1, origin_id="dev1")

def test_last_level_roundtrip(cooldown):
    assert cooldown.last_level("JARINJE") is None
    cooldown.record("JARINJE", 3, T0)
    assert cooldown.last_level("JARINJE") == 3

def test_last_level_is_clamped_or_dropped(store, cooldown):
    store.set(last_vote_level_key("JARINJE"), "7")
    assert cooldown.last_level("JARINJE") == 3
    store.set(last_vote_level_key("JARINJE"), "not a number")
    assert cooldown.last_level("JARINJE") is None

def test_unparsable_timestamp_means_never_voted(store, cooldown):
    store.set(last_vote_key("JARINJE"), "garbage")
    assert cooldown.remaining_ms("JARINJE", T0) == 0

# --- Submission ---
def test_submit_persists_and_records(service, cooldown):
    vote = service.submit("JARINJE", 2, T0, origin_id="dev1", direction=Direction.R2L)
    assert vote.timestamp_ms == T0
    assert vote.direction == Direction.R2L
    assert service.repository.list_for_checkpoint("JARINJE") == [vote]
    assert cooldown.last_level("JARINJE", "dev1") == 2
    assert cooldown.last_vote_ms("JARINJE", "dev1") == T0

def test_submit_unknown_checkpoint(service):
    with pytest.raises(UnknownCheckpointError):
        service.submit("NOWHERE", 1, T0)

def test_submit_twice_hits_cooldown(service):
    service.submit("JARINJE", 1, T0, origin_id="dev1")
    with pytest.raises(CooldownActiveError):
        service.submit("JARINJE", 3, T0 + 30_000, origin_id="dev1")
    assert len(service.repository.list_for_checkpoint("JARINJE")) == 1

def test_failed_save_does_not_start_cooldown(cooldown):
    repo = MagicMock()
    repo.save.side_effect = RuntimeError("db down")
    service = VoteSubmissionService(repo, cooldown, {"JARINJE": object()})
    with pytest.raises(RuntimeError):
        service.submit("JARINJE", 1, T0)
    assert cooldown.last_vote_ms("JARINJE") == 0

def test_submit_clamps_level_before_saving(service, cooldown):
    high = service.submit("JARINJE", 10**20, T0, origin_id="dev1")
    low = service.submit("JARINJE", -4, T0, origin_id="dev2")
    assert (high.level, low.level) == (3, 0)
    assert [v.level for v in service.repository.list_for_checkpoint("JARINJE")] == [3, 0]
    assert cooldown.last_level("JARINJE", "dev1") == 3

class SlowRepository(InMemoryVoteRepository):
    def save(self, vote):
        time.sleep(0.05)
        super().save(vote)

def test_concurrent_submissions_from_one_device(cooldown):
    service = VoteSubmissionService(SlowRepository(), cooldown, {"JARINJE": object()})
    barrier = threading.Barrier(2)
    outcomes = []

    def submit():
        barrier.wait()
        try:
            service.submit("JARINJE", 2, T0, origin_id="dev1")
            outcomes.append("accepted")
        except CooldownActiveError:
            outcomes.append("cooldown")

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["accepted", "cooldown"]
    assert len(service.repository.list_for_checkpoint("JARINJE")) == 1
