"""Session storage — SessionStore, in-memory and request-backed stores."""

from __future__ import annotations

import secrets
from typing import Any, Protocol, runtime_checkable

from starlette.requests import Request

from fastapi_page_context.exceptions import PreconditionViolation

SESSION_SECRET_KEY = "sesskey"


@runtime_checkable
class SessionStore(Protocol):
    """Key/value storage scoped to the user's session."""

    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...


class InMemorySessionStore:
    """Dict-backed session. Single-process only."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data if data is not None else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class RequestSessionStore:
    """Session backed by ``request.scope["session"]``.

    Requires a session middleware (e.g. Starlette's ``SessionMiddleware``)
    to have populated the scope.
    """

    def __init__(self, request: Request) -> None:
        if "session" not in request.scope:
            raise PreconditionViolation(
                "RequestSessionStore requires a session middleware to be installed"
            )
        self._data: dict[str, Any] = request.scope["session"]

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


def session_secret(store: SessionStore) -> str:
    """Return the per-session secret, minting one on first use."""
    secret = store.get(SESSION_SECRET_KEY)
    if not secret:
        secret = secrets.token_hex(16)
        store.set(SESSION_SECRET_KEY, secret)
    return str(secret)


def rotate_session_secret(store: SessionStore) -> str:
    secret = secrets.token_hex(16)
    store.set(SESSION_SECRET_KEY, secret)
    return secret
