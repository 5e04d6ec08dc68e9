"""PageHook base and convenience hook classes."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from fastapi_page_context.models import Course
from fastapi_page_context.state import PageState

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext


class PageHook:
    """Base abstraction for page lifecycle hooks. All methods are no-op by default."""

    def on_transition(
        self, page: RequestPageContext, previous: PageState, current: PageState
    ) -> None:
        pass

    def on_starting_output(self, page: RequestPageContext) -> None:
        pass

    def on_primary_course_change(
        self, page: RequestPageContext, course: Course
    ) -> None:
        """Fires only for the primary page of a request."""


class OnTransition(PageHook):
    """Convenience hook that fires after each lifecycle transition."""

    def __init__(
        self, callback: Callable[[RequestPageContext, PageState, PageState], None]
    ) -> None:
        self._callback = callback

    def on_transition(
        self, page: RequestPageContext, previous: PageState, current: PageState
    ) -> None:
        self._callback(page, previous, current)


class OnStartingOutput(PageHook):
    """Convenience hook that fires once, as the header starts printing."""

    def __init__(self, callback: Callable[[RequestPageContext], None]) -> None:
        self._callback = callback

    def on_starting_output(self, page: RequestPageContext) -> None:
        self._callback(page)


class OnPrimaryCourseChange(PageHook):
    """Convenience hook for the "current course" side effect of the primary page.

    Typical use is updating an application-level current course and
    refreshing the locale.
    """

    def __init__(self, callback: Callable[[RequestPageContext, Course], None]) -> None:
        self._callback = callback

    def on_primary_course_change(
        self, page: RequestPageContext, course: Course
    ) -> None:
        self._callback(page, course)
