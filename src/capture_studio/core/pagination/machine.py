"""Pagination resolution for an open list capture."""

from __future__ import annotations

import logging
from enum import Enum

from ..errors import PaginationElementMissing
from ..ir.model import Pagination, PaginationType

logger = logging.getLogger(__name__)


class PaginationStage(str, Enum):
    UNRESOLVED = "unresolved"
    PROMPTING = "prompting_for_type"
    RESOLVED = "resolved"


class PaginationSubMachine:
    """Unresolved -> PromptingForType -> Resolved(type).

    The element selector for click based pagination comes from the browser
    side and may arrive before or after the type is chosen.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.stage = PaginationStage.UNRESOLVED
        self.type = PaginationType.UNSET
        self.selector: str | None = None

    @property
    def is_prompting(self) -> bool:
        return self.stage is PaginationStage.PROMPTING

    @property
    def is_resolved(self) -> bool:
        return self.stage is PaginationStage.RESOLVED

    def prompt(self) -> None:
        if self.stage is PaginationStage.UNRESOLVED:
            self.stage = PaginationStage.PROMPTING
            logger.debug("Prompting for pagination type")

    def select_type(self, pagination_type: PaginationType | str) -> None:
        pagination_type = PaginationType(pagination_type)
        if pagination_type is PaginationType.UNSET:
            raise ValueError("cannot resolve pagination to 'unset'")
        self.type = pagination_type
        self.stage = PaginationStage.RESOLVED
        logger.debug(f"Pagination resolved to {pagination_type.value}")

    def set_selector(self, selector: str | None) -> None:
        self.selector = selector

    def check(self) -> None:
        """Raise PaginationElementMissing if a click type lacks its element."""
        if self.type.needs_selector and not (self.selector or "").strip():
            raise PaginationElementMissing()

    def descriptor(self) -> Pagination:
        return Pagination(type=self.type, selector=self.selector)
