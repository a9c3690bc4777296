from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.ir.model import (
    BrowserStep,
    ListStep,
    PaginationType,
    ScreenshotStep,
    SelectorDescriptor,
    TextStep,
)
from ..core.session.recording import RecordingSession


class SelectorModel(BaseModel):
    selector: str = Field(
        ..., min_length=1, description="CSS selector picked in the live browser"
    )
    tag: str | None = None
    attribute: str | None = Field(None, description="e.g. innerText, href, src")

    def to_descriptor(self) -> SelectorDescriptor:
        return SelectorDescriptor(self.selector, self.tag, self.attribute)


class CreateSessionRequest(BaseModel):
    recording_name: str = ""
    browser_id: str | None = None


class TextStepRequest(BaseModel):
    selector: SelectorModel
    data: str = Field("", description="Text currently shown by the element")
    label: str = ""


class LabelRequest(BaseModel):
    label: str


class ListStepRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    step_id: str | None = None
    list_selector: str = Field(..., alias="listSelector")
    fields: dict[str, SelectorModel] = Field(default_factory=dict)


class RenameFieldRequest(BaseModel):
    old_label: str
    new_label: str


class PaginationTypeRequest(BaseModel):
    type: PaginationType


class PaginationSelectorRequest(BaseModel):
    selector: str | None = None


class ScreenshotRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_page: bool = Field(False, alias="fullPage")


class NotificationModel(BaseModel):
    severity: str
    message: str


class SessionState(BaseModel):
    browser_id: str
    recording_name: str
    mode: str
    pagination_stage: str | None = None
    pagination_type: str | None = None
    pagination_selector: str | None = None
    last_action: str | None = None
    steps: list[dict[str, Any]]
    label_errors: dict[str, str] = Field(default_factory=dict)


class ActionResponse(BaseModel):
    ok: bool
    state: SessionState
    notifications: list[NotificationModel] = Field(default_factory=list)


def step_to_dict(step: BrowserStep) -> dict[str, Any]:
    if isinstance(step, TextStep):
        return {
            "id": step.id,
            "kind": step.kind,
            "label": step.label,
            "data": step.data,
            "confirmed": step.confirmed,
            "selector": step.selector.to_wire() if step.selector else None,
        }
    if isinstance(step, ListStep):
        return {
            "id": step.id,
            "kind": step.kind,
            "listSelector": step.list_selector,
            "fields": {k: v.to_wire() for k, v in step.fields.items()},
            "pagination": step.pagination.to_wire() if step.pagination else None,
        }
    if isinstance(step, ScreenshotStep):
        return {"id": step.id, "kind": step.kind, "fullPage": step.full_page}
    raise TypeError(f"unknown step type: {type(step).__name__}")


def session_state(session: RecordingSession) -> SessionState:
    ctrl = session.controller
    pg = ctrl.pagination
    return SessionState(
        browser_id=session.browser_id,
        recording_name=session.recording_name,
        mode=ctrl.mode.value,
        pagination_stage=pg.stage.value if pg else None,
        pagination_type=pg.type.value if pg else None,
        pagination_selector=pg.selector if pg else None,
        last_action=session.last_action,
        steps=[step_to_dict(s) for s in session.store.all_steps()],
        label_errors=dict(ctrl.label_errors),
    )
