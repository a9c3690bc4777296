"""Capture mode state machine.

Exactly one of list, text or screenshot capture is open at a time (or
none, ``CaptureMode.IDLE``). Every public method is one atomically applied
handler: it takes the session lock, validates, mutates, and emits.
Validation failures never escape; they are reported through the notifier
and the handler returns False.
"""

from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, TypeVar

from ...config.settings import settings
from ...runtime.events import (
    ACTION_SCRAPE_LIST,
    ACTION_SCRAPE_SCHEMA,
    ACTION_SCREENSHOT,
    EmissionChannel,
)
from ...runtime.notify import Notifier
from ..builder.settings_builder import (
    build_list_settings,
    build_screenshot_settings,
    build_text_settings,
)
from ..errors import CaptureError, EmptyLabel
from ..ir.model import (
    CaptureMode,
    ListStep,
    PaginationType,
    SelectorDescriptor,
    TextStep,
)
from ..pagination.machine import PaginationSubMachine
from ..store.steps import BrowserStepStore, new_step_id
from ..validator.validate import check_list_definition, check_text, validate_payload

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _atomic(fn: F) -> F:
    @functools.wraps(fn)
    def wrapper(self: "CaptureModeController", *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return fn(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class CaptureModeController:
    def __init__(
        self,
        store: BrowserStepStore,
        channel: EmissionChannel,
        notifier: Notifier,
        lock: threading.RLock | None = None,
    ) -> None:
        self.store = store
        self._channel = channel
        self._notifier = notifier
        self._lock = lock or threading.RLock()
        self._mode = CaptureMode.IDLE
        self._pagination: PaginationSubMachine | None = None
        self.label_errors: dict[str, str] = {}
        self.last_action: str | None = None

    @property
    def mode(self) -> CaptureMode:
        return self._mode

    @property
    def pagination(self) -> PaginationSubMachine | None:
        """Pagination state; only exists while a list capture is open."""
        return self._pagination

    def _open(self, mode: CaptureMode) -> bool:
        if self._mode is not CaptureMode.IDLE:
            logger.debug(f"Ignoring start of {mode.value}: {self._mode.value} is open")
            return False
        self._mode = mode
        if mode is CaptureMode.LIST:
            self._pagination = PaginationSubMachine()
        logger.debug(f"Capture mode -> {mode.value}")
        return True

    def _close(self) -> None:
        logger.debug(f"Capture mode {self._mode.value} -> idle")
        if self._pagination is not None:
            self._pagination.reset()
        self._mode = CaptureMode.IDLE
        self._pagination = None

    def _fail(self, err: CaptureError) -> bool:
        self._notifier.notify(err.severity, err.message)
        return False

    def _emit(self, action: str, payload: dict[str, Any]) -> None:
        if settings.validate_payloads:
            validate_payload(action, payload)
        try:
            self._channel.emit(action, payload)
        except Exception:
            # Fire and forget: a transport failure never rolls back the capture.
            logger.exception(f"Failed to emit {action}")
            return
        self.last_action = action
        logger.info(f"Emitted {action} settings")

    # Start / discard

    @_atomic
    def start_list(self) -> bool:
        return self._open(CaptureMode.LIST)

    @_atomic
    def start_text(self) -> bool:
        return self._open(CaptureMode.TEXT)

    @_atomic
    def start_screenshot(self) -> bool:
        return self._open(CaptureMode.SCREENSHOT)

    @_atomic
    def stop_list(self) -> bool:
        if self._mode is not CaptureMode.LIST:
            return False
        self.store.delete_kind("list")
        self._close()
        return True

    @_atomic
    def stop_text(self) -> bool:
        if self._mode is not CaptureMode.TEXT:
            return False
        self.store.delete_kind("text")
        self.label_errors.clear()
        self._close()
        return True

    @_atomic
    def stop_screenshot(self) -> bool:
        if self._mode is not CaptureMode.SCREENSHOT:
            return False
        self._close()
        return True

    @_atomic
    def reset(self) -> None:
        """Drop every captured step and return to idle."""
        self.store.clear()
        self.label_errors.clear()
        self._close()

    # Text capture

    @_atomic
    def add_text_step(
        self,
        selector: SelectorDescriptor,
        data: str = "",
        label: str = "",
        step_id: str | None = None,
    ) -> TextStep | None:
        if self._mode is not CaptureMode.TEXT:
            return None
        step = TextStep(id=step_id or new_step_id(), selector=selector, label=label, data=data)
        self.store.add_step(step)
        return step

    @_atomic
    def update_text_label(self, step_id: str, label: str) -> bool:
        step = self.store.get(step_id)
        if isinstance(step, TextStep) and step.confirmed:
            return False
        self.store.update_text_label(step_id, label)
        if label.strip():
            self.label_errors.pop(step_id, None)
        else:
            self.label_errors[step_id] = EmptyLabel(step_id).message
        return True

    @_atomic
    def confirm_text_step(self, step_id: str) -> bool:
        try:
            self.store.confirm_text_step(step_id)
        except EmptyLabel as e:
            # Shown next to the step, not as a notification
            self.label_errors[step_id] = e.message
            return False
        self.label_errors.pop(step_id, None)
        return True

    @_atomic
    def confirm_text(self) -> bool:
        if self._mode is not CaptureMode.TEXT:
            return False
        steps = self.store.all_steps()
        try:
            check_text(steps)
        except CaptureError as e:
            return self._fail(e)
        payload = build_text_settings(steps)
        if payload is not None:
            self._emit(ACTION_SCRAPE_SCHEMA, payload)
            self._notifier.notify("success", "Text capture confirmed")
        self.store.delete_kind("text")
        self.label_errors.clear()
        self._close()
        return True

    # List capture

    @_atomic
    def add_list_step(
        self,
        list_selector: str,
        fields: dict[str, SelectorDescriptor] | None = None,
        step_id: str | None = None,
    ) -> ListStep | None:
        if self._mode is not CaptureMode.LIST:
            return None
        try:
            return self.store.upsert_list_step(
                step_id or new_step_id(), list_selector, fields or {}
            )
        except EmptyLabel as e:
            self._fail(e)
            return None

    @_atomic
    def rename_list_field(self, step_id: str, old_label: str, new_label: str) -> bool:
        try:
            self.store.rename_list_field(step_id, old_label, new_label)
        except EmptyLabel as e:
            return self._fail(e)
        return True

    @_atomic
    def remove_list_field(self, step_id: str, label: str) -> None:
        self.store.remove_list_field(step_id, label)

    @_atomic
    def set_pagination_selector(self, selector: str | None) -> bool:
        if self._pagination is None:
            return False
        self._pagination.set_selector(selector)
        return True

    @_atomic
    def select_pagination_type(self, pagination_type: PaginationType | str) -> bool:
        if self._pagination is None:
            return False
        self._pagination.select_type(pagination_type)
        return True

    @_atomic
    def confirm_list(self) -> bool:
        if self._mode is not CaptureMode.LIST or self._pagination is None:
            return False
        steps = self.store.all_steps()
        try:
            check_list_definition(steps)
            if not self._pagination.is_resolved:
                self._pagination.prompt()
                return False
            self._pagination.check()
        except CaptureError as e:
            return self._fail(e)
        payload = build_list_settings(steps, self._pagination.descriptor())
        if payload is not None:
            self._emit(ACTION_SCRAPE_LIST, payload)
            self._notifier.notify("success", "List capture confirmed")
        self.store.delete_kind("list")
        self._close()
        return True

    # Screenshot capture

    @_atomic
    def capture_screenshot(self, full_page: bool) -> bool:
        if self._mode is not CaptureMode.SCREENSHOT:
            return False
        payload = build_screenshot_settings(full_page)
        self._emit(ACTION_SCREENSHOT, payload)
        self.store.add_screenshot_step(full_page)
        self._close()
        return True

    @_atomic
    def delete_step(self, step_id: str) -> None:
        self.store.delete_step(step_id)
        self.label_errors.pop(step_id, None)
