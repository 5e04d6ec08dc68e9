"""Shared type aliases and protocols."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Literal

from starlette.requests import Request

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext
    from fastapi_page_context.models import UserState
    from fastapi_page_context.services.session import SessionStore

RequestOrigin = Literal["web", "ws", "cli"]

# Callback types used by the FastAPI dependency
UserLoaderCallback = Callable[[Request], Awaitable["UserState"]]
SessionStoreFactory = Callable[[Request], "SessionStore"]
PrepareCallback = Callable[["RequestPageContext", Request], Awaitable[Any]]
PageFactoryCallback = Callable[[], "RequestPageContext"]
