# api/griddo/utils/rate_limit.py
"""
Fixed-window rate limiter kept in process memory.

Each worker process has its own store, so limits are per-instance only.
Moving the store to Redis is required for limits shared across instances.
"""
from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass
from typing import Dict

DEFAULT_MAX_REQUESTS = 10
DEFAULT_WINDOW_MS = 60_000
CLEANUP_PROBABILITY = 0.01


@dataclass
class _Entry:
    count: int
    window_start: float  # ms
    window_ms: int


@dataclass
class RateLimitResult:
    success: bool
    remaining: int
    reset_at: float  # epoch ms


_store: Dict[str, _Entry] = {}
_lock = threading.Lock()


def _now_ms() -> float:
    return time.time() * 1000


def check_rate_limit(
    key: str,
    max_requests: int = DEFAULT_MAX_REQUESTS,
    window_ms: int = DEFAULT_WINDOW_MS,
) -> RateLimitResult:
    """Count one hit against `key` and report whether it is within the window's budget."""
    now = _now_ms()

    with _lock:
        entry = _store.get(key)

        if entry is None or now - entry.window_start >= entry.window_ms:
            _store[key] = _Entry(count=1, window_start=now, window_ms=window_ms)
            return RateLimitResult(success=True, remaining=max_requests - 1, reset_at=now + window_ms)

        entry.count += 1
        remaining = max(0, max_requests - entry.count)
        success = entry.count <= max_requests
        reset_at = entry.window_start + entry.window_ms

        if _store and random.random() < CLEANUP_PROBABILITY:
            _cleanup_expired(now)

    return RateLimitResult(success=success, remaining=remaining, reset_at=reset_at)


def _cleanup_expired(now: float) -> None:
    # caller holds _lock
    expired = [k for k, e in _store.items() if now - e.window_start >= e.window_ms]
    for k in expired:
        _store.pop(k, None)


def reset_rate_limits() -> None:
    with _lock:
        _store.clear()
