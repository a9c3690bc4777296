"""Captured step IR for a recording session.

Every step the operator captures in the live browser ends up as one of the
dataclasses below. Consumers dispatch on the concrete class (or ``kind``),
never on the presence of optional attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class CaptureMode(str, Enum):
    IDLE = "idle"
    LIST = "list"
    TEXT = "text"
    SCREENSHOT = "screenshot"


class PaginationType(str, Enum):
    """How additional list items are loaded. Values are the wire names."""

    CLICK_NEXT = "clickNext"
    CLICK_LOAD_MORE = "clickLoadMore"
    SCROLL_DOWN = "scrollDown"
    SCROLL_UP = "scrollUp"
    NONE = "none"
    UNSET = ""

    @property
    def needs_selector(self) -> bool:
        return self in (PaginationType.CLICK_NEXT, PaginationType.CLICK_LOAD_MORE)


@dataclass(frozen=True)
class SelectorDescriptor:
    """Opaque element description supplied by the browser-selection side."""

    selector: str
    tag: str | None = None
    attribute: str | None = None  # e.g. "innerText", "href", "src"

    def to_wire(self) -> dict[str, str]:
        out = {"selector": self.selector}
        if self.tag:
            out["tag"] = self.tag
        if self.attribute:
            out["attribute"] = self.attribute
        return out


@dataclass
class Pagination:
    type: PaginationType = PaginationType.UNSET
    selector: str | None = None

    def to_wire(self) -> dict[str, str]:
        out = {"type": self.type.value}
        if self.type.needs_selector and self.selector:
            out["selector"] = self.selector
        return out


@dataclass
class TextStep:
    id: str
    selector: SelectorDescriptor | None
    label: str = ""
    data: str = ""  # text captured from the page, shown to the operator
    confirmed: bool = False

    kind: str = field(default="text", init=False)


@dataclass
class ListStep:
    id: str
    list_selector: str
    fields: dict[str, SelectorDescriptor] = field(default_factory=dict)
    pagination: Pagination | None = None

    kind: str = field(default="list", init=False)


@dataclass
class ScreenshotStep:
    id: str
    full_page: bool = False

    kind: str = field(default="screenshot", init=False)


BrowserStep = Union[TextStep, ListStep, ScreenshotStep]
