"""Navigation handles — NavigationFactory and the default handle records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext


class NavigationKind(Enum):
    GLOBAL = "global"
    SETTINGS = "settings"
    FLAT = "flat"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    NAVBAR = "navbar"


@runtime_checkable
class NavigationFactory(Protocol):
    """Builds one navigation view for a page."""

    def create(self, kind: NavigationKind, page: RequestPageContext) -> Any: ...


@dataclass
class NavigationHandle:
    """Placeholder navigation view bound to the page it was built for."""

    kind: NavigationKind
    page_type: str
    scope_id: int
    activity_name: str | None = None


class DefaultNavigationFactory:
    def create(self, kind: NavigationKind, page: RequestPageContext) -> NavigationHandle:
        activity = page.activity_name if kind is NavigationKind.SECONDARY else None
        return NavigationHandle(
            kind=kind,
            page_type=page.page_type,
            scope_id=page.context.id,
            activity_name=activity,
        )
