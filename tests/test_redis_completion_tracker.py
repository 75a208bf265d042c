import pytest
import redis

from lecture_transcriber.exceptions import TrackerError
from lecture_transcriber.infrastructure import RedisCompletionTracker


class FakePipeline:
    def __init__(self, client):
        self._client = client
        self._ops = []

    def __getattr__(self, name):
        def queue(*args):
            self._ops.append((name, args))
            return self

        return queue

    def execute(self):
        ops, self._ops = self._ops, []
        return [getattr(self._client, name)(*args) for name, args in ops]


class FakeRedis:
    """Just enough of redis-py (decode_responses=True) for the tracker."""

    def __init__(self):
        self.data = {}
        self.fail = False

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("down")

    def get(self, key):
        self._check()
        value = self.data.get(key)
        return None if value is None else str(value)

    def set(self, key, value):
        self._check()
        self.data[key] = value
        return True

    def delete(self, *keys):
        self._check()
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    def sadd(self, key, *members):
        before = len(self.data.setdefault(key, set()))
        self.data[key].update(members)
        return len(self.data[key]) - before

    def srem(self, key, member):
        members = self.data.get(key, set())
        if member in members:
            members.remove(member)
            return 1
        return 0

    def spop(self, key):
        members = self.data.get(key, set())
        return members.pop() if members else None

    def scard(self, key):
        return len(self.data.get(key, set()))

    def decr(self, key):
        self.data[key] = int(self.data.get(key, 0)) - 1
        return self.data[key]


@pytest.fixture
def client():
    return FakeRedis()


@pytest.fixture
def tracker(client, fake_store):
    fake_store.add_session("s1")
    return RedisCompletionTracker(client, fake_store)


def test_counter_mode_completes_after_n(tracker, fake_store, client):
    tracker.init_job_count("s1", 2)
    assert fake_store.statuses["s1"] == "processing"

    assert tracker.complete_one("s1") == 1
    assert tracker.remaining("s1") == 1
    assert tracker.complete_one("s1") == 0

    assert fake_store.statuses["s1"] == "completed"
    assert tracker.remaining("s1") is None
    assert client.data == {}


def test_segment_mode_is_idempotent(tracker, fake_store):
    tracker.init_job_count("s1", 2, ["a", "b"])

    assert tracker.complete_one("s1", "a") == 1
    assert tracker.complete_one("s1", "a") == 1
    assert fake_store.statuses["s1"] == "processing"
    assert tracker.complete_one("s1", "b") == 0
    assert fake_store.statuses["s1"] == "completed"


def test_untracked_session_completes_immediately(tracker, fake_store):
    assert tracker.complete_one("s1", "a") == 0
    assert fake_store.statuses["s1"] == "completed"


def test_state_survives_a_new_tracker_instance(client, fake_store):
    fake_store.add_session("s1")
    RedisCompletionTracker(client, fake_store).init_job_count("s1", 2, ["a", "b"])

    restarted = RedisCompletionTracker(client, fake_store)

    assert restarted.remaining("s1") == 2
    assert restarted.complete_one("s1", "b") == 1


def test_redis_failure_is_wrapped(tracker, client):
    client.fail = True

    with pytest.raises(TrackerError) as exc_info:
        tracker.complete_one("s1")

    assert exc_info.value.operation == "complete"


def test_discard_drops_all_keys_without_completing(tracker, fake_store, client):
    tracker.init_job_count("s1", 2, ["a", "b"])

    tracker.discard("s1")

    assert client.data == {}
    assert tracker.remaining("s1") is None
    assert fake_store.statuses["s1"] == "processing"
