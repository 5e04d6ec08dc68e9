"""PageContextException hierarchy for page lifecycle misuse and lookups."""

from __future__ import annotations

from typing import Any


class PageContextException(Exception):
    """Base for all page context exceptions."""


class InvalidTransition(PageContextException):
    """Lifecycle advance that skips, regresses or goes past DONE."""

    def __init__(self, current: Any, requested: Any) -> None:
        super().__init__(
            f"Invalid state passed to advance(). We are in state {current}"
            f" and state {requested} was requested."
        )
        self.current = current
        self.requested = requested


class PreconditionViolation(PageContextException):
    """Programming error: the page was used in an order it does not allow."""


class NotFound(PageContextException):
    """A referenced record is absent from its backing store."""

    def __init__(self, entity: str, key: Any) -> None:
        super().__init__(f"{entity} {key!r} not found")
        self.entity = entity
        self.key = key


class Tampered(PageContextException):
    """Edit snapshot hash does not match the stored record."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Edit snapshot {key!r} failed verification")
        self.key = key


class PageInternalError(PageContextException):
    """Dependency-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
