"""Ordered collection of captured browser steps.

The store only knows how to mutate steps; which mutations are allowed in
which capture mode is decided by the session controller.
"""

from __future__ import annotations

import logging
import uuid

from ..errors import DuplicateStepError, EmptyLabel, StepNotFoundError
from ..ir.model import (
    BrowserStep,
    ListStep,
    Pagination,
    ScreenshotStep,
    SelectorDescriptor,
    TextStep,
)

logger = logging.getLogger(__name__)


def new_step_id() -> str:
    return uuid.uuid4().hex


def _normalize_labels(
    step_id: str, fields: dict[str, SelectorDescriptor]
) -> dict[str, SelectorDescriptor]:
    out: dict[str, SelectorDescriptor] = {}
    for label, desc in fields.items():
        key = label.strip()
        if not key:
            raise EmptyLabel(step_id)
        if key in out:
            raise DuplicateStepError(f"field label used twice: {key}")
        out[key] = desc
    return out


class BrowserStepStore:
    def __init__(self) -> None:
        self._steps: list[BrowserStep] = []

    def __len__(self) -> int:
        return len(self._steps)

    def __contains__(self, step_id: object) -> bool:
        return any(s.id == step_id for s in self._steps)

    def all_steps(self) -> tuple[BrowserStep, ...]:
        """Snapshot of every step in capture order."""
        return tuple(self._steps)

    def get(self, step_id: str) -> BrowserStep:
        for step in self._steps:
            if step.id == step_id:
                return step
        raise StepNotFoundError(step_id)

    def add_step(self, step: BrowserStep) -> BrowserStep:
        if step.id in self:
            raise DuplicateStepError(f"step id already present: {step.id}")
        self._steps.append(step)
        logger.debug(f"Added {step.kind} step {step.id}")
        return step

    def delete_step(self, step_id: str) -> None:
        before = len(self._steps)
        self._steps = [s for s in self._steps if s.id != step_id]
        if len(self._steps) != before:
            logger.debug(f"Deleted step {step_id}")

    def delete_kind(self, kind: str) -> None:
        self._steps = [s for s in self._steps if s.kind != kind]

    def clear(self) -> None:
        self._steps.clear()

    # Text steps

    def _text_step(self, step_id: str) -> TextStep:
        step = self.get(step_id)
        if not isinstance(step, TextStep):
            raise StepNotFoundError(f"{step_id} is not a text step")
        return step

    def update_text_label(self, step_id: str, label: str) -> None:
        self._text_step(step_id).label = label

    def confirm_text_step(self, step_id: str) -> None:
        step = self._text_step(step_id)
        if not step.label.strip():
            raise EmptyLabel(step_id)
        step.confirmed = True

    # List steps

    def _list_step(self, step_id: str) -> ListStep:
        step = self.get(step_id)
        if not isinstance(step, ListStep):
            raise StepNotFoundError(f"{step_id} is not a list step")
        return step

    def upsert_list_step(
        self,
        step_id: str,
        list_selector: str,
        fields: dict[str, SelectorDescriptor],
        pagination: Pagination | None = None,
    ) -> ListStep:
        """Merge ``fields`` into the list step ``step_id``, creating it if needed.

        Labels are stored trimmed; two labels that trim to the same key are
        rejected.
        """
        fields = _normalize_labels(step_id, fields)
        if step_id in self:
            step = self._list_step(step_id)
            step.list_selector = list_selector
            step.fields.update(fields)
            if pagination is not None:
                step.pagination = pagination
            return step
        step = ListStep(
            id=step_id,
            list_selector=list_selector,
            fields=dict(fields),
            pagination=pagination,
        )
        self.add_step(step)
        return step

    def rename_list_field(self, step_id: str, old_label: str, new_label: str) -> None:
        step = self._list_step(step_id)
        if old_label not in step.fields:
            raise StepNotFoundError(f"{step_id} has no field {old_label!r}")
        new_label = new_label.strip()
        if not new_label:
            raise EmptyLabel(step_id)
        if new_label == old_label:
            return
        if new_label in step.fields:
            raise DuplicateStepError(f"field label already used: {new_label}")
        step.fields = {
            (new_label if k == old_label else k): v for k, v in step.fields.items()
        }

    def remove_list_field(self, step_id: str, label: str) -> None:
        self._list_step(step_id).fields.pop(label, None)

    # Screenshot steps

    def add_screenshot_step(self, full_page: bool) -> ScreenshotStep:
        step = ScreenshotStep(id=new_step_id(), full_page=full_page)
        self.add_step(step)
        return step
