"""Tests for the per-client request counter."""

import threading

import pytest
from flask import Flask

from rate_limit import RateLimiter, get_client_ip, rate_limited_response


class TestRateLimiter:
    def test_requests_within_quota_are_allowed(self, clock):
        limiter = RateLimiter(max_requests=3, window=60, clock=clock)

        assert [limiter.check("1.2.3.4") for _ in range(3)] == [True, True, True]
        assert limiter.get("1.2.3.4").count == 3

    def test_request_over_quota_is_denied(self, clock):
        limiter = RateLimiter(max_requests=3, window=60, clock=clock)
        for _ in range(3):
            limiter.check("1.2.3.4")

        assert limiter.check("1.2.3.4") is False
        # denied requests do not push the counter past the maximum
        assert limiter.get("1.2.3.4").count == 3

    def test_window_elapsed_resets_counter(self, clock):
        limiter = RateLimiter(max_requests=2, window=60, clock=clock)
        limiter.check("1.2.3.4")
        limiter.check("1.2.3.4")
        assert limiter.check("1.2.3.4") is False

        clock.advance(60)

        assert limiter.check("1.2.3.4") is True
        record = limiter.get("1.2.3.4")
        assert record.count == 1
        assert record.window_start == clock.now

    def test_window_not_yet_elapsed_still_denied(self, clock):
        limiter = RateLimiter(max_requests=1, window=60, clock=clock)
        limiter.check("1.2.3.4")

        clock.advance(59.9)

        assert limiter.check("1.2.3.4") is False

    def test_clients_are_counted_independently(self, clock):
        limiter = RateLimiter(max_requests=1, window=60, clock=clock)

        assert limiter.check("1.1.1.1") is True
        assert limiter.check("2.2.2.2") is True
        assert limiter.check("1.1.1.1") is False

    def test_retry_after(self, clock):
        limiter = RateLimiter(max_requests=1, window=600, clock=clock)
        assert limiter.retry_after("1.2.3.4") == 0

        limiter.check("1.2.3.4")
        clock.advance(100)

        assert limiter.retry_after("1.2.3.4") == 500

    def test_capacity_evicts_least_recently_seen(self, clock):
        limiter = RateLimiter(max_requests=1, window=60, capacity=2, clock=clock)
        limiter.check("a")
        limiter.check("b")
        limiter.check("a")  # a is now the most recent
        limiter.check("c")

        assert len(limiter) == 2
        assert limiter.get("b") is None
        assert limiter.get("a") is not None
        # an evicted client starts over
        assert limiter.check("b") is True

    def test_expired_records_are_swept(self, clock):
        limiter = RateLimiter(max_requests=5, window=60, sweep_interval=10, clock=clock)
        for key in ("a", "b", "c"):
            limiter.check(key)

        clock.advance(61)
        limiter.check("d")

        assert len(limiter) == 1
        assert limiter.get("d").count == 1

    def test_reset(self, clock):
        limiter = RateLimiter(max_requests=1, window=60, clock=clock)
        limiter.check("a")
        limiter.reset()

        assert len(limiter) == 0
        assert limiter.check("a") is True

    def test_concurrent_requests_from_one_client_do_not_lose_updates(self):
        limiter = RateLimiter(max_requests=25, window=3600)
        results = []
        results_lock = threading.Lock()
        start = threading.Barrier(40)

        def worker():
            start.wait()
            allowed = limiter.check("same-client")
            with results_lock:
                results.append(allowed)

        threads = [threading.Thread(target=worker) for _ in range(40)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 25
        assert limiter.get("same-client").count == 25

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_requests": 0}, {"window": 0}, {"capacity": 0}],
    )
    def test_invalid_policy(self, kwargs):
        with pytest.raises(ValueError):
            RateLimiter(**kwargs)


class TestClientIp:
    @pytest.fixture
    def flask_app(self):
        return Flask(__name__)

    def test_forwarded_for_first_address(self, flask_app):
        with flask_app.test_request_context(
            "/", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        ):
            assert get_client_ip() == "203.0.113.7"

    def test_real_ip_header(self, flask_app):
        with flask_app.test_request_context("/", headers={"X-Real-IP": "198.51.100.2"}):
            assert get_client_ip() == "198.51.100.2"

    def test_remote_addr_fallback(self, flask_app):
        with flask_app.test_request_context("/", environ_base={"REMOTE_ADDR": "192.0.2.9"}):
            assert get_client_ip() == "192.0.2.9"

    def test_proxy_headers_ignored_when_untrusted(self, flask_app):
        with flask_app.test_request_context(
            "/",
            headers={"X-Forwarded-For": "203.0.113.7"},
            environ_base={"REMOTE_ADDR": "192.0.2.9"},
        ):
            assert get_client_ip(trust_proxy_headers=False) == "192.0.2.9"


class TestRateLimitedResponse:
    def test_allowed_returns_none(self, clock):
        limiter = RateLimiter(max_requests=1, window=3600, clock=clock)
        with Flask(__name__).app_context():
            assert rate_limited_response(limiter, "1.2.3.4") is None

    def test_denied_returns_429_with_retry_after(self, clock):
        limiter = RateLimiter(max_requests=1, window=3600, clock=clock)
        limiter.check("1.2.3.4")
        clock.advance(600)

        with Flask(__name__).app_context():
            response, status = rate_limited_response(limiter, "1.2.3.4")

        assert status == 429
        assert response.headers["Retry-After"] == "3000"
        body = response.get_json()
        assert "try again in about 50 minute" in body["error"]
        assert body["rate_limit_info"]["limit"] == 1
