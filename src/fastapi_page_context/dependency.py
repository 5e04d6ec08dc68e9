"""page_context_dependency() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterable

from fastapi import HTTPException
from starlette.requests import Request

from fastapi_page_context._types import (
    PrepareCallback,
    RequestOrigin,
    SessionStoreFactory,
    UserLoaderCallback,
)
from fastapi_page_context.config import PageSettings
from fastapi_page_context.context import RequestPageContext
from fastapi_page_context.exceptions import (
    NotFound,
    PageContextException,
    PageInternalError,
    Tampered,
)
from fastapi_page_context.hooks import PageHook
from fastapi_page_context.models import UserState
from fastapi_page_context.services import PageServices
from fastapi_page_context.services.session import RequestSessionStore
from fastapi_page_context.snapshot import restore_edit_snapshot

logger = logging.getLogger(__name__)


class PageContextFactory:
    """Builds one ``RequestPageContext`` per incoming request.

    ``services`` is shared between requests; each page gets its own session
    store from ``session_store(request)``.

    ``origin`` pins every page to one origin (``"cli"`` for scripts that mount
    the app in-process); otherwise it follows the request path.
    """

    def __init__(
        self,
        settings: PageSettings,
        services: PageServices,
        *,
        user_loader: UserLoaderCallback | None = None,
        session_store: SessionStoreFactory = RequestSessionStore,
        hooks: Iterable[PageHook] = (),
        primary: bool = True,
        origin: RequestOrigin | None = None,
        debug: bool = False,
    ) -> None:
        self._settings = settings
        self._services = services
        self._user_loader = user_loader
        self._session_store = session_store
        self._hooks = tuple(hooks)
        self._primary = primary
        self._origin = origin
        self._debug = debug

    @property
    def settings(self) -> PageSettings:
        return self._settings

    def origin_for(self, request: Request) -> RequestOrigin:
        if self._origin is not None:
            return self._origin
        if request.url.path.startswith(self._settings.ws_path_prefix):
            return "ws"
        return "web"

    async def load_user(self, request: Request) -> UserState:
        if self._user_loader is None:
            return UserState()
        return await self._user_loader(request)

    def new_page(
        self, request: Request, user: UserState, *, primary: bool | None = None
    ) -> RequestPageContext:
        services = dataclasses.replace(
            self._services, session=self._session_store(request)
        )
        return RequestPageContext(
            self._settings,
            services,
            user=user,
            origin=self.origin_for(request),
            primary=self._primary if primary is None else primary,
            script=request.url.path,
            request_url=str(request.url),
            hooks=self._hooks,
            debug=self._debug,
        )

    async def build(self, request: Request) -> RequestPageContext:
        return self.new_page(request, await self.load_user(request))

    async def restore_or_build(self, request: Request, key: str | None) -> RequestPageContext:
        """Rebuild an edited page from its snapshot, or a fresh page if that fails."""
        user = await self.load_user(request)
        if key:
            try:
                return restore_edit_snapshot(key, lambda: self.new_page(request, user))
            except (NotFound, Tampered) as exc:
                logger.info("Edit snapshot unusable, building page from request: %s", exc)
        return self.new_page(request, user)


def _run_guarded(
    build: Callable[[Request], Awaitable[RequestPageContext]],
    prepare: PrepareCallback | None,
) -> Callable[[Request], Awaitable[RequestPageContext]]:
    async def dependency(request: Request) -> RequestPageContext:
        try:
            page = await build(request)
            if prepare is not None:
                await prepare(page, request)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except (PageContextException, HTTPException):
            raise
        except Exception as exc:
            wrapped = PageInternalError("Internal page context error", cause=exc)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

        request.state.page = page
        return page

    return dependency


def page_context_dependency(
    factory: PageContextFactory,
    prepare: PrepareCallback | None = None,
) -> Callable[..., Awaitable[RequestPageContext]]:
    """Return a FastAPI-compatible dependency that builds the request's page.

    ``prepare(page, request)`` runs before the page reaches the endpoint,
    typically to set course/module and url. ``NotFound`` raised there becomes
    a 404; unexpected errors become a 500.
    """
    dep = _run_guarded(factory.build, prepare)
    dep._page_factory = factory  # type: ignore[attr-defined]
    return dep


def edited_page_dependency(
    factory: PageContextFactory,
    *,
    param: str = "pagehash",
    prepare: PrepareCallback | None = None,
) -> Callable[..., Awaitable[RequestPageContext]]:
    """Like ``page_context_dependency`` but restores the edit snapshot named in ``?pagehash=``.

    ``prepare`` only runs when no snapshot could be restored.
    """

    async def build(request: Request) -> RequestPageContext:
        key = request.query_params.get(param)
        page = await factory.restore_or_build(request, key)
        if page.has_set_url() or prepare is None:
            return page
        await prepare(page, request)
        return page

    dep = _run_guarded(build, None)
    dep._page_factory = factory  # type: ignore[attr-defined]
    return dep
