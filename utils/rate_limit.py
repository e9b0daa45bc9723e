"""
Модуль: `utils/rate_limit.py`.
Назначение: Ограничение частоты загрузок и запросов на анализ от одного клиента.
"""

import time
from collections import defaultdict, deque
from threading import Lock
from typing import Callable

from flask import current_app, request


class InMemoryRateLimiter:
    """Простой in-memory rate limiter (sliding window)."""

    def __init__(self, clock: Callable[[], float] | None = None):
        self._clock = clock or time.monotonic
        self._events = defaultdict(deque)
        self._lock = Lock()

    def is_allowed(self, key: str, limit: int, window_seconds: int) -> bool:
        if limit <= 0 or window_seconds <= 0:
            return False

        now = self._clock()
        cutoff = now - window_seconds

        with self._lock:
            events = self._events[key]
            while events and events[0] <= cutoff:
                events.popleft()

            if len(events) >= limit:
                return False

            events.append(now)
            return True

    def reset(self) -> None:
        with self._lock:
            self._events.clear()


def get_client_identifier() -> str:
    """Возвращает IP клиента с учетом X-Forwarded-For."""
    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        first_ip = forwarded_for.split(",", 1)[0].strip()
        if first_ip:
            return first_ip
    return request.remote_addr or "unknown"


def is_rate_limited(bucket: str, limit: int) -> bool:
    """Проверяет лимит для текущего клиента в корзине `bucket`."""
    if not current_app.config.get("RATE_LIMIT_ENABLED", True):
        return False

    limiter = current_app.extensions.get("rate_limiter")
    if limiter is None:
        return False

    window_seconds = current_app.config["RATE_LIMIT_WINDOW_SECONDS"]
    rate_key = f"{bucket}:{get_client_identifier()}"
    return not limiter.is_allowed(rate_key, limit, window_seconds)
