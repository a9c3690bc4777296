"""Emission channel for compiled settings (in-memory or Redis).

The capture core only sees the ``EmissionChannel`` protocol: one send
operation whose result it never looks at.
"""

from __future__ import annotations

import json
import queue
import threading
from typing import Any, Protocol

from ..config.settings import settings


ACTION_SCRAPE_SCHEMA = "scrapeSchema"
ACTION_SCRAPE_LIST = "scrapeList"
ACTION_SCREENSHOT = "screenshot"


class EmissionChannel(Protocol):
    def emit(self, action: str, payload: dict[str, Any]) -> None: ...


def _envelope(action: str, payload: dict[str, Any]) -> str:
    return json.dumps({"action": action, "settings": payload})


class InMemoryBus:
    def __init__(self) -> None:
        self._q: queue.Queue[str] = queue.Queue()
        self._lock = threading.Lock()
        self._sent = 0

    def emit(self, action: str, payload: dict[str, Any]) -> None:
        self._q.put(_envelope(action, payload))
        with self._lock:
            self._sent += 1

    @property
    def sent(self) -> int:
        with self._lock:
            return self._sent

    def next_event(self, timeout: float | None = None) -> dict[str, Any] | None:
        try:
            msg = self._q.get(timeout=timeout)
        except queue.Empty:
            return None
        return json.loads(msg)

    def drain(self) -> list[dict[str, Any]]:
        events = []
        while True:
            try:
                events.append(json.loads(self._q.get_nowait()))
            except queue.Empty:
                return events


class RedisBus:
    def __init__(self, url: str, channel: str) -> None:
        import redis  # lazy import

        self._r = redis.Redis.from_url(url, decode_responses=True)
        self._channel = channel

    def emit(self, action: str, payload: dict[str, Any]) -> None:
        self._r.rpush(self._channel, _envelope(action, payload))

    def next_event(self, timeout: float | None = None) -> dict[str, Any] | None:
        to = int(timeout) if timeout else 0
        item = self._r.blpop([self._channel], timeout=to)
        if not item:
            return None
        _, msg = item  # type: ignore[misc]
        if isinstance(msg, bytes):
            msg = msg.decode("utf-8")
        return json.loads(msg)


_INMEMORY_SINGLETON: InMemoryBus | None = None


def get_bus() -> EmissionChannel:
    if settings.event_backend == "redis":
        url = settings.redis_url or "redis://redis:6379/0"
        return RedisBus(url, settings.event_channel)
    # One in-memory bus per process so the API and its consumers share events
    global _INMEMORY_SINGLETON
    if _INMEMORY_SINGLETON is None:
        _INMEMORY_SINGLETON = InMemoryBus()
    return _INMEMORY_SINGLETON
