"""Recording sessions: one capture controller per remote browser."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field

from ...runtime.events import EmissionChannel, get_bus
from ...runtime.notify import InMemoryNotifier, Notifier
from ..store.steps import BrowserStepStore
from .controller import CaptureModeController

logger = logging.getLogger(__name__)


@dataclass
class RecordingSession:
    browser_id: str
    recording_name: str
    controller: CaptureModeController
    notifier: Notifier
    discarded: bool = field(default=False, init=False)

    @property
    def store(self) -> BrowserStepStore:
        return self.controller.store

    @property
    def last_action(self) -> str | None:
        return self.controller.last_action

    def discard(self) -> None:
        """Terminate the recording and drop everything captured so far."""
        if self.discarded:
            return
        self.controller.reset()
        self.discarded = True
        self.notifier.notify("warning", "Current Recording was terminated")
        logger.info(f"Discarded recording {self.browser_id}")


def open_session(
    recording_name: str = "",
    browser_id: str | None = None,
    channel: EmissionChannel | None = None,
    notifier: Notifier | None = None,
) -> RecordingSession:
    notifier = notifier or InMemoryNotifier()
    controller = CaptureModeController(
        BrowserStepStore(), channel or get_bus(), notifier
    )
    return RecordingSession(
        browser_id=browser_id or str(uuid.uuid4()),
        recording_name=recording_name,
        controller=controller,
        notifier=notifier,
    )


class SessionRegistry:
    def __init__(self, channel: EmissionChannel | None = None) -> None:
        self._channel = channel
        self._sessions: dict[str, RecordingSession] = {}
        self._lock = threading.Lock()

    def create(
        self, recording_name: str = "", browser_id: str | None = None
    ) -> RecordingSession:
        session = open_session(
            recording_name, browser_id, channel=self._channel or get_bus()
        )
        with self._lock:
            if session.browser_id in self._sessions:
                raise ValueError(f"recording already active: {session.browser_id}")
            self._sessions[session.browser_id] = session
        logger.info(f"Started recording {session.browser_id} ({recording_name!r})")
        return session

    def get(self, browser_id: str) -> RecordingSession:
        with self._lock:
            return self._sessions[browser_id]

    def discard(self, browser_id: str) -> RecordingSession:
        with self._lock:
            session = self._sessions.pop(browser_id)
        session.discard()
        return session

    def active_browser_id(self) -> str | None:
        """Most recently started recording still in progress, if any."""
        with self._lock:
            if not self._sessions:
                return None
            return next(reversed(self._sessions))


_REGISTRY: SessionRegistry | None = None


def get_registry() -> SessionRegistry:
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = SessionRegistry()
    return _REGISTRY
