"""Security scopes — SecurityScopeResolver and an in-memory registry."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from fastapi_page_context.exceptions import NotFound
from fastapi_page_context.models import Scope, ScopeLevel


@runtime_checkable
class SecurityScopeResolver(Protocol):
    """Maps domain instances to authorization scopes."""

    def system_scope(self) -> Scope: ...
    def course_scope(self, course_id: int) -> Scope: ...
    def module_scope(self, module_id: int) -> Scope: ...
    def category_scope(self, category_id: int) -> Scope: ...
    def instance_by_id(self, scope_id: int) -> Scope: ...


class InMemoryScopeResolver:
    """Mints scopes on first request and remembers them by id.

    Parents default to the system scope; register a course's scope before
    its modules (``module_scope(id, course_id=...)``) to get a proper chain.
    """

    SYSTEM_SCOPE_ID = 1

    def __init__(self) -> None:
        self._by_id: dict[int, Scope] = {}
        self._by_instance: dict[tuple[ScopeLevel, int], Scope] = {}
        self._next_id = self.SYSTEM_SCOPE_ID + 1
        system = Scope(id=self.SYSTEM_SCOPE_ID, level=ScopeLevel.SYSTEM, instance_id=0)
        self._store(system)

    def _store(self, scope: Scope) -> Scope:
        self._by_id[scope.id] = scope
        self._by_instance[(scope.level, scope.instance_id)] = scope
        return scope

    def _get_or_create(
        self, level: ScopeLevel, instance_id: int, parent_id: int | None
    ) -> Scope:
        existing = self._by_instance.get((level, instance_id))
        if existing is not None:
            return existing
        scope = Scope(
            id=self._next_id,
            level=level,
            instance_id=instance_id,
            parent_id=parent_id,
        )
        self._next_id += 1
        return self._store(scope)

    def system_scope(self) -> Scope:
        return self._by_id[self.SYSTEM_SCOPE_ID]

    def course_scope(self, course_id: int) -> Scope:
        return self._get_or_create(ScopeLevel.COURSE, course_id, self.SYSTEM_SCOPE_ID)

    def module_scope(self, module_id: int, *, course_id: int | None = None) -> Scope:
        parent = self.SYSTEM_SCOPE_ID
        if course_id is not None:
            parent = self.course_scope(course_id).id
        return self._get_or_create(ScopeLevel.MODULE, module_id, parent)

    def category_scope(self, category_id: int) -> Scope:
        return self._get_or_create(
            ScopeLevel.CATEGORY, category_id, self.SYSTEM_SCOPE_ID
        )

    def block_scope(self, block_id: int, parent: Scope) -> Scope:
        return self._get_or_create(ScopeLevel.BLOCK, block_id, parent.id)

    def instance_by_id(self, scope_id: int) -> Scope:
        try:
            return self._by_id[scope_id]
        except KeyError:
            raise NotFound("scope", scope_id) from None
