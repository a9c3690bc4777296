import os
import sys
from pathlib import Path

import pytest


def pytest_sessionstart(session):
    # Ensure src/ is importable when running pytest without installation
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))
    os.environ.setdefault("EVENT_BACKEND", "inmemory")


@pytest.fixture
def bus():
    from capture_studio.runtime.events import InMemoryBus

    return InMemoryBus()


@pytest.fixture
def notifier():
    from capture_studio.runtime.notify import InMemoryNotifier

    return InMemoryNotifier()


@pytest.fixture
def controller(bus, notifier):
    from capture_studio.core.session.controller import CaptureModeController
    from capture_studio.core.store.steps import BrowserStepStore

    return CaptureModeController(BrowserStepStore(), bus, notifier)
