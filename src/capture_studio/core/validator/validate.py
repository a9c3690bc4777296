"""Confirmation gates and wire payload validation.

The ``can_*`` predicates are pure; the ``check_*`` variants raise the
matching ``CaptureError`` so callers can report a message.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable

import jsonschema

from ..errors import (
    CaptureError,
    IncompleteListDefinition,
    PayloadSchemaError,
    UnconfirmedSteps,
)
from ..ir.model import BrowserStep, ListStep, TextStep
from ..pagination.machine import PaginationSubMachine
from ...runtime.events import (
    ACTION_SCRAPE_LIST,
    ACTION_SCRAPE_SCHEMA,
    ACTION_SCREENSHOT,
)


_SELECTOR_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "selector": {"type": "string", "minLength": 1},
        "tag": {"type": "string"},
        "attribute": {"type": "string"},
    },
    "required": ["selector"],
    "additionalProperties": False,
}

PAYLOAD_SCHEMAS: Dict[str, Dict[str, Any]] = {
    ACTION_SCRAPE_SCHEMA: {
        "type": "object",
        "additionalProperties": _SELECTOR_SCHEMA,
    },
    ACTION_SCRAPE_LIST: {
        "type": "object",
        "properties": {
            "listSelector": {"type": "string", "minLength": 1},
            "fields": {
                "type": "object",
                "minProperties": 1,
                "additionalProperties": _SELECTOR_SCHEMA,
            },
            "pagination": {
                "type": "object",
                "properties": {
                    "type": {
                        "enum": [
                            "clickNext",
                            "clickLoadMore",
                            "scrollDown",
                            "scrollUp",
                            "none",
                        ]
                    },
                    "selector": {"type": "string"},
                },
                "required": ["type"],
                "additionalProperties": False,
            },
        },
        "required": ["listSelector", "fields", "pagination"],
        "additionalProperties": False,
    },
    ACTION_SCREENSHOT: {
        "type": "object",
        "properties": {
            "fullPage": {"type": "boolean"},
            "type": {"const": "png"},
            "timeout": {"type": "integer", "minimum": 0},
            "animations": {"enum": ["allow", "disabled"]},
            "caret": {"enum": ["hide", "initial"]},
            "scale": {"enum": ["css", "device"]},
        },
        "required": ["fullPage", "type", "timeout", "animations", "caret", "scale"],
        "additionalProperties": False,
    },
}


def unconfirmed_text_steps(steps: Iterable[BrowserStep]) -> list[str]:
    return [s.id for s in steps if isinstance(s, TextStep) and not s.confirmed]


def can_confirm_text(steps: Iterable[BrowserStep]) -> bool:
    return not unconfirmed_text_steps(steps)


def check_text(steps: Iterable[BrowserStep]) -> None:
    pending = unconfirmed_text_steps(steps)
    if pending:
        raise UnconfirmedSteps(pending)


def check_list_definition(steps: Iterable[BrowserStep]) -> ListStep:
    lists = [s for s in steps if isinstance(s, ListStep)]
    if len(lists) != 1:
        if not lists:
            raise IncompleteListDefinition()
        raise IncompleteListDefinition("Only one list can be captured at a time")
    step = lists[0]
    if not step.fields:
        raise IncompleteListDefinition()
    if not step.list_selector.strip():
        raise IncompleteListDefinition("Please select the list container first")
    missing = [label for label, desc in step.fields.items() if not desc.selector.strip()]
    if missing:
        raise IncompleteListDefinition(
            f"Please select an element for field(s): {', '.join(missing)}"
        )
    return step


def can_confirm_list(
    steps: Iterable[BrowserStep], pagination: PaginationSubMachine
) -> bool:
    try:
        check_list_definition(list(steps))
        if not pagination.is_resolved:
            return False
        pagination.check()
    except CaptureError:
        return False
    return True


def validate_payload(action: str, settings: Dict[str, Any]) -> None:
    schema = PAYLOAD_SCHEMAS.get(action)
    if schema is None:
        raise PayloadSchemaError(f"unknown action: {action}")
    try:
        jsonschema.validate(instance=settings, schema=schema)
    except jsonschema.ValidationError as e:
        raise PayloadSchemaError(f"{action} settings rejected: {e.message}") from e
