"""Tests for recording sessions and the session registry."""

from __future__ import annotations

import logging

import pytest

from capture_studio.core.ir.model import CaptureMode, SelectorDescriptor
from capture_studio.core.session.recording import SessionRegistry, open_session
from capture_studio.runtime.events import InMemoryBus
from capture_studio.runtime.notify import InMemoryNotifier, LoggingNotifier


class TestRecordingSession:
    def test_last_action_tracks_emissions(self, bus):
        session = open_session("products", channel=bus)
        assert session.last_action is None

        session.controller.start_screenshot()
        session.controller.capture_screenshot(False)

        assert session.last_action == "screenshot"

    def test_discard_clears_everything(self, bus):
        notifier = InMemoryNotifier()
        session = open_session("products", channel=bus, notifier=notifier)
        ctrl = session.controller
        ctrl.start_screenshot()
        ctrl.capture_screenshot(True)
        ctrl.start_text()
        ctrl.add_text_step(SelectorDescriptor("h1"))

        session.discard()
        session.discard()

        assert session.discarded
        assert ctrl.mode is CaptureMode.IDLE
        assert len(session.store) == 0
        assert [(n.severity, n.message) for n in notifier.items] == [
            ("warning", "Current Recording was terminated")
        ]

    def test_browser_id_generated(self, bus):
        a = open_session(channel=bus)
        b = open_session(channel=bus)
        assert a.browser_id and a.browser_id != b.browser_id


class TestSessionRegistry:
    def test_create_get_discard(self):
        registry = SessionRegistry(channel=InMemoryBus())
        session = registry.create("jobs", browser_id="b1")

        assert registry.get("b1") is session
        assert registry.active_browser_id() == "b1"

        registry.discard("b1")
        assert session.discarded
        assert registry.active_browser_id() is None
        with pytest.raises(KeyError):
            registry.get("b1")

    def test_duplicate_browser_id(self):
        registry = SessionRegistry(channel=InMemoryBus())
        registry.create(browser_id="b1")
        with pytest.raises(ValueError):
            registry.create(browser_id="b1")

    def test_active_is_most_recent(self):
        registry = SessionRegistry(channel=InMemoryBus())
        registry.create(browser_id="b1")
        registry.create(browser_id="b2")
        assert registry.active_browser_id() == "b2"

    def test_sessions_are_independent(self):
        bus = InMemoryBus()
        registry = SessionRegistry(channel=bus)
        one = registry.create(browser_id="b1").controller
        two = registry.create(browser_id="b2").controller

        one.start_text()
        assert two.start_list() is True
        assert one.mode is CaptureMode.TEXT
        assert two.mode is CaptureMode.LIST


class TestNotifiers:
    def test_logging_notifier_levels(self, caplog):
        with caplog.at_level(logging.INFO, logger="capture_studio.runtime.notify"):
            LoggingNotifier().notify("warning", "careful")
            LoggingNotifier().notify("success", "done")

        levels = [r.levelno for r in caplog.records]
        assert levels == [logging.WARNING, logging.INFO]
        assert "[warning] careful" in caplog.text

    def test_unknown_severity(self):
        with pytest.raises(ValueError):
            LoggingNotifier().notify("fatal", "x")

    def test_in_memory_drain(self):
        notifier = InMemoryNotifier()
        notifier.notify("info", "a")
        notifier.notify("error", "b")

        assert [n.message for n in notifier.drain()] == ["a", "b"]
        assert notifier.items == []
