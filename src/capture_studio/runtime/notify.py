"""Operator notifications (the snackbar of the recorder UI)."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

SEVERITIES = ("success", "info", "warning", "error")

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.WARNING,
}


class Notifier(Protocol):
    def notify(self, severity: str, message: str) -> None: ...


@dataclass(frozen=True)
class Notification:
    severity: str
    message: str


class LoggingNotifier:
    def notify(self, severity: str, message: str) -> None:
        if severity not in SEVERITIES:
            raise ValueError(f"unknown severity: {severity}")
        logger.log(_LOG_LEVELS[severity], f"[{severity}] {message}")


class InMemoryNotifier(LoggingNotifier):
    """Logs and keeps notifications until a client collects them."""

    def __init__(self) -> None:
        self._items: list[Notification] = []
        self._lock = threading.Lock()

    def notify(self, severity: str, message: str) -> None:
        super().notify(severity, message)
        with self._lock:
            self._items.append(Notification(severity, message))

    @property
    def items(self) -> list[Notification]:
        with self._lock:
            return list(self._items)

    def drain(self) -> list[Notification]:
        with self._lock:
            items, self._items = self._items, []
        return items
