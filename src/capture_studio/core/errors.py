"""Errors raised inside the capture core.

``CaptureError`` subclasses are recoverable validation failures: the session
controller catches them and turns them into notifications. The remaining
classes signal programming errors and are allowed to propagate.
"""

from __future__ import annotations


class CaptureError(Exception):
    """Base class for user-facing, locally recoverable validation failures."""

    severity = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptyLabel(CaptureError):
    def __init__(self, step_id: str) -> None:
        super().__init__("Label cannot be empty")
        self.step_id = step_id


class UnconfirmedSteps(CaptureError):
    def __init__(self, step_ids: list[str]) -> None:
        super().__init__("Please confirm all labels before finishing the capture")
        self.step_ids = step_ids


class IncompleteListDefinition(CaptureError):
    def __init__(self, reason: str = "Please select at least one field to capture") -> None:
        super().__init__(reason)


class PaginationElementMissing(CaptureError):
    severity = "warning"

    def __init__(self) -> None:
        super().__init__("Please select the pagination element first")


class DuplicateStepError(ValueError):
    """A step id was added twice to the same store."""


class StepNotFoundError(KeyError):
    """No step with the given id (or not of the expected kind)."""


class PayloadSchemaError(ValueError):
    """A compiled settings payload does not match its wire schema."""
