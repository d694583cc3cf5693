"""Sliding-window limiter and middleware tests."""

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.rate_limit import RATE_LIMITED_MESSAGE, SlidingWindowLimiter
from main import create_app


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_allows_up_to_the_limit_then_blocks():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_requests=3, window_s=60, clock=clock)

    assert [limiter.hit("1.2.3.4") for _ in range(3)] == [None, None, None]
    assert limiter.hit("1.2.3.4") == pytest.approx(60)


def test_window_slides():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_requests=2, window_s=60, clock=clock)
    limiter.hit("a")
    clock.now += 30
    limiter.hit("a")

    clock.now += 29
    assert limiter.hit("a") == pytest.approx(1)

    clock.now += 1
    assert limiter.hit("a") is None
    assert limiter.remaining("a") == 0


def test_clients_are_counted_separately():
    limiter = SlidingWindowLimiter(max_requests=1, window_s=60, clock=FakeClock())

    assert limiter.hit("a") is None
    assert limiter.hit("b") is None
    assert limiter.hit("a") is not None


def test_rejected_requests_do_not_extend_the_window():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_requests=1, window_s=10, clock=clock)
    limiter.hit("a")
    for _ in range(5):
        clock.now += 1
        limiter.hit("a")

    clock.now += 5
    assert limiter.hit("a") is None


@pytest.mark.parametrize("max_requests, window_s", [(0, 60), (1, 0)])
def test_rejects_bad_policy(max_requests, window_s):
    with pytest.raises(ValueError):
        SlidingWindowLimiter(max_requests=max_requests, window_s=window_s)


def test_middleware_returns_429_past_the_limit():
    app = create_app(Settings(rate_limit_max=2, rate_limit_window_s=900))
    client = TestClient(app, raise_server_exceptions=False)

    first = client.get("/health")
    second = client.get("/health")
    third = client.get("/health")

    assert first.status_code == second.status_code == 200
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert third.status_code == 429
    assert third.json() == {"error": RATE_LIMITED_MESSAGE}
    assert int(third.headers["Retry-After"]) >= 1


def test_rate_limit_applies_before_auth():
    app = create_app(Settings(rate_limit_max=1))
    client = TestClient(app, raise_server_exceptions=False)

    assert client.get("/api/tasks").status_code == 401
    assert client.get("/api/tasks").status_code == 429


def test_idle_clients_are_evicted():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_requests=5, window_s=60, clock=clock)
    for i in range(5000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(limiter) == 5000

    clock.now += 61
    limiter.hit("10.9.9.9")

    assert len(limiter) == 1


def test_remaining_does_not_track_unknown_clients():
    limiter = SlidingWindowLimiter(max_requests=3, window_s=60, clock=FakeClock())

    assert limiter.remaining("never-seen") == 3
    assert len(limiter) == 0


def test_client_forgotten_once_its_window_elapses():
    clock = FakeClock()
    limiter = SlidingWindowLimiter(max_requests=3, window_s=60, clock=clock)
    limiter.hit("a")

    clock.now += 60
    assert limiter.remaining("a") == 3
    assert len(limiter) == 0
