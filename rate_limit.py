import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass

from flask import jsonify, request

logger = logging.getLogger(__name__)


@dataclass
class RateRecord:
    key: str
    count: int
    window_start: float


class RateLimiter:
    """
    Fixed-window request counter keyed by client identifier.

    Records live in an LRU-ordered map capped at ``capacity`` entries.
    Expired records are swept on access, at most once per ``sweep_interval``
    seconds, and the least recently seen client is evicted when the map is
    full. An evicted client is treated exactly like a new one.
    """

    def __init__(self, max_requests=10, window=2 * 60 * 60, capacity=10_000,
                 sweep_interval=60, clock=time.monotonic):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self.max_requests = max_requests
        self.window = window
        self.capacity = capacity
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._records = OrderedDict()
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def check(self, client_id):
        """Count a request for ``client_id`` and report whether it is allowed"""
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            record = self._records.get(client_id)
            if record is None:
                self._insert(RateRecord(client_id, 1, now))
                return True

            self._records.move_to_end(client_id)

            if now - record.window_start >= self.window:
                record.count = 1
                record.window_start = now
                return True

            if record.count < self.max_requests:
                record.count += 1
                return True

            return False

    def retry_after(self, client_id):
        """Seconds until ``client_id`` may send another request"""
        with self._lock:
            record = self._records.get(client_id)
            if record is None or record.count < self.max_requests:
                return 0
            remaining = record.window_start + self.window - self._clock()
            return max(0, math.ceil(remaining))

    def get(self, client_id):
        with self._lock:
            record = self._records.get(client_id)
            if record is None:
                return None
            return RateRecord(record.key, record.count, record.window_start)

    def reset(self):
        with self._lock:
            self._records.clear()

    def __len__(self):
        with self._lock:
            return len(self._records)

    def _insert(self, record):
        while len(self._records) >= self.capacity:
            evicted, _ = self._records.popitem(last=False)
            logger.debug("Rate limiter full, evicted %s", evicted)
        self._records[record.key] = record

    def _maybe_sweep(self, now):
        if now - self._last_sweep < self.sweep_interval:
            return
        self._last_sweep = now
        expired = [
            key for key, record in self._records.items()
            if now - record.window_start >= self.window
        ]
        for key in expired:
            del self._records[key]
        if expired:
            logger.debug("Swept %d expired rate limit records", len(expired))


def get_client_ip(trust_proxy_headers=True):
    """Get client IP address, considering proxy headers"""
    if trust_proxy_headers:
        if request.headers.get("X-Forwarded-For"):
            return request.headers.get("X-Forwarded-For").split(",")[0].strip()
        elif request.headers.get("X-Real-IP"):
            return request.headers.get("X-Real-IP").strip()
    return request.remote_addr or "unknown"


def rate_limited_response(limiter, client_ip):
    """
    Count the current request against ``limiter``.

    Returns None when the request may proceed, otherwise a 429 response tuple.
    """
    if limiter.check(client_ip):
        return None

    wait_seconds = limiter.retry_after(client_ip)
    wait_minutes = max(1, math.ceil(wait_seconds / 60))
    window_hours = limiter.window / 3600
    logger.info("Rate limit exceeded for %s", client_ip)

    response = jsonify(
        {
            "error": f"Rate limit exceeded. Limit is {limiter.max_requests} "
                     f"requests per {window_hours:g} hours. "
                     f"Please try again in about {wait_minutes} minute(s).",
            "rate_limit_info": {
                "limit": limiter.max_requests,
                "window_hours": window_hours,
                "retry_after_seconds": wait_seconds,
            },
        }
    )
    response.headers["Retry-After"] = str(wait_seconds)
    return response, 429
