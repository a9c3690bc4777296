"""Captured steps → wire settings for the remote execution engine.

Three shapes are produced:
- scrapeSchema: {label: {selector, tag?, attribute?}} from the text steps
- scrapeList: {listSelector, fields, pagination} from the list step
- screenshot: fixed capture options, built at capture time
"""

from __future__ import annotations

from typing import Any, Iterable

from ..ir.model import (
    BrowserStep,
    ListStep,
    Pagination,
    ScreenshotStep,
    TextStep,
)

# Fixed by the wire contract with the execution engine
SCREENSHOT_TIMEOUT_MS = 30000


def build_text_settings(steps: Iterable[BrowserStep]) -> dict[str, Any] | None:
    """Return the scrapeSchema mapping, or None if no text step exists."""
    out: dict[str, Any] = {}
    seen_text = False
    for step in steps:
        if isinstance(step, TextStep):
            seen_text = True
            label = step.label.strip()
            if not label or step.selector is None or not step.selector.selector:
                continue
            out[label] = step.selector.to_wire()
        elif isinstance(step, (ListStep, ScreenshotStep)):
            continue
        else:  # pragma: no cover
            raise TypeError(f"unknown step type: {type(step).__name__}")
    return out if seen_text else None


def build_list_settings(
    steps: Iterable[BrowserStep], pagination: Pagination | None = None
) -> dict[str, Any] | None:
    """Return the scrapeList object, or None if no list step exists.

    When several list steps are present the last one wins. ``pagination``
    overrides whatever the step itself carries.
    """
    out: dict[str, Any] | None = None
    for step in steps:
        if isinstance(step, ListStep):
            resolved = pagination or step.pagination or Pagination()
            out = {
                "listSelector": step.list_selector,
                "fields": {
                    label: desc.to_wire()
                    for label, desc in step.fields.items()
                    if label.strip() and desc.selector
                },
                "pagination": resolved.to_wire(),
            }
        elif isinstance(step, (TextStep, ScreenshotStep)):
            continue
        else:  # pragma: no cover
            raise TypeError(f"unknown step type: {type(step).__name__}")
    return out


def build_screenshot_settings(full_page: bool) -> dict[str, Any]:
    return {
        "fullPage": bool(full_page),
        "type": "png",
        "timeout": SCREENSHOT_TIMEOUT_MS,
        "animations": "allow",
        "caret": "hide",
        "scale": "device",
    }
