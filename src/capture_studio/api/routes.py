from typing import Callable

from fastapi import APIRouter, HTTPException

from ..core.errors import DuplicateStepError, StepNotFoundError
from ..core.ir.model import CaptureMode
from ..core.session.recording import RecordingSession, get_registry
from ..runtime.notify import InMemoryNotifier
from .dto import (
    ActionResponse,
    CreateSessionRequest,
    LabelRequest,
    ListStepRequest,
    NotificationModel,
    PaginationSelectorRequest,
    PaginationTypeRequest,
    RenameFieldRequest,
    ScreenshotRequest,
    SessionState,
    TextStepRequest,
    session_state,
)


router = APIRouter(prefix="/sessions")


def _session(browser_id: str) -> RecordingSession:
    try:
        return get_registry().get(browser_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"no recording {browser_id}")


def _respond(session: RecordingSession, ok: bool) -> ActionResponse:
    notes = []
    if isinstance(session.notifier, InMemoryNotifier):
        notes = [
            NotificationModel(severity=n.severity, message=n.message)
            for n in session.notifier.drain()
        ]
    return ActionResponse(ok=ok, state=session_state(session), notifications=notes)


def _run(browser_id: str, op: Callable[[RecordingSession], bool]) -> ActionResponse:
    session = _session(browser_id)
    try:
        ok = op(session)
    except StepNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateStepError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _respond(session, ok)


@router.post("", response_model=SessionState)
def create_session(req: CreateSessionRequest) -> SessionState:
    try:
        session = get_registry().create(req.recording_name, req.browser_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session_state(session)


@router.get("/active")
def active_session():
    return {"browser_id": get_registry().active_browser_id()}


@router.get("/{browser_id}", response_model=SessionState)
def get_session(browser_id: str) -> SessionState:
    return session_state(_session(browser_id))


@router.delete("/{browser_id}", response_model=ActionResponse)
def discard_session(browser_id: str) -> ActionResponse:
    try:
        session = get_registry().discard(browser_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"no recording {browser_id}")
    return _respond(session, True)


_STARTS = {
    CaptureMode.LIST: lambda c: c.start_list(),
    CaptureMode.TEXT: lambda c: c.start_text(),
    CaptureMode.SCREENSHOT: lambda c: c.start_screenshot(),
}
_STOPS = {
    CaptureMode.LIST: lambda c: c.stop_list(),
    CaptureMode.TEXT: lambda c: c.stop_text(),
    CaptureMode.SCREENSHOT: lambda c: c.stop_screenshot(),
}


@router.post("/{browser_id}/capture/{mode}/start", response_model=ActionResponse)
def start_capture(browser_id: str, mode: CaptureMode) -> ActionResponse:
    if mode is CaptureMode.IDLE:
        raise HTTPException(status_code=422, detail="idle is not a capture mode")
    return _run(browser_id, lambda s: _STARTS[mode](s.controller))


@router.post("/{browser_id}/capture/{mode}/stop", response_model=ActionResponse)
def stop_capture(browser_id: str, mode: CaptureMode) -> ActionResponse:
    if mode is CaptureMode.IDLE:
        raise HTTPException(status_code=422, detail="idle is not a capture mode")
    return _run(browser_id, lambda s: _STOPS[mode](s.controller))


@router.post("/{browser_id}/text-steps", response_model=ActionResponse)
def add_text_step(browser_id: str, req: TextStepRequest) -> ActionResponse:
    return _run(
        browser_id,
        lambda s: s.controller.add_text_step(
            req.selector.to_descriptor(), data=req.data, label=req.label
        )
        is not None,
    )


@router.patch("/{browser_id}/text-steps/{step_id}", response_model=ActionResponse)
def update_text_label(browser_id: str, step_id: str, req: LabelRequest) -> ActionResponse:
    return _run(browser_id, lambda s: s.controller.update_text_label(step_id, req.label))


@router.post(
    "/{browser_id}/text-steps/{step_id}/confirm", response_model=ActionResponse
)
def confirm_text_step(browser_id: str, step_id: str) -> ActionResponse:
    return _run(browser_id, lambda s: s.controller.confirm_text_step(step_id))


@router.post("/{browser_id}/text/confirm", response_model=ActionResponse)
def confirm_text(browser_id: str) -> ActionResponse:
    return _run(browser_id, lambda s: s.controller.confirm_text())


@router.post("/{browser_id}/list-steps", response_model=ActionResponse)
def add_list_step(browser_id: str, req: ListStepRequest) -> ActionResponse:
    fields = {label: f.to_descriptor() for label, f in req.fields.items()}
    return _run(
        browser_id,
        lambda s: s.controller.add_list_step(
            req.list_selector, fields, step_id=req.step_id
        )
        is not None,
    )


@router.post(
    "/{browser_id}/list-steps/{step_id}/rename-field", response_model=ActionResponse
)
def rename_list_field(
    browser_id: str, step_id: str, req: RenameFieldRequest
) -> ActionResponse:
    return _run(
        browser_id,
        lambda s: s.controller.rename_list_field(step_id, req.old_label, req.new_label),
    )


@router.delete(
    "/{browser_id}/list-steps/{step_id}/fields/{label}", response_model=ActionResponse
)
def remove_list_field(browser_id: str, step_id: str, label: str) -> ActionResponse:
    def op(s: RecordingSession) -> bool:
        s.controller.remove_list_field(step_id, label)
        return True

    return _run(browser_id, op)


@router.post("/{browser_id}/pagination/type", response_model=ActionResponse)
def select_pagination_type(
    browser_id: str, req: PaginationTypeRequest
) -> ActionResponse:
    try:
        return _run(browser_id, lambda s: s.controller.select_pagination_type(req.type))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{browser_id}/pagination/selector", response_model=ActionResponse)
def set_pagination_selector(
    browser_id: str, req: PaginationSelectorRequest
) -> ActionResponse:
    return _run(browser_id, lambda s: s.controller.set_pagination_selector(req.selector))


@router.post("/{browser_id}/list/confirm", response_model=ActionResponse)
def confirm_list(browser_id: str) -> ActionResponse:
    return _run(browser_id, lambda s: s.controller.confirm_list())


@router.post("/{browser_id}/screenshot", response_model=ActionResponse)
def capture_screenshot(browser_id: str, req: ScreenshotRequest) -> ActionResponse:
    return _run(browser_id, lambda s: s.controller.capture_screenshot(req.full_page))


@router.delete("/{browser_id}/steps/{step_id}", response_model=ActionResponse)
def delete_step(browser_id: str, step_id: str) -> ActionResponse:
    def op(s: RecordingSession) -> bool:
        s.controller.delete_step(step_id)
        return True

    return _run(browser_id, op)
