"""Domain records consumed by the page context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ScopeLevel(Enum):
    """Authorization scope levels, coarsest first."""

    SYSTEM = "system"
    CATEGORY = "category"
    COURSE = "course"
    MODULE = "module"
    BLOCK = "block"

    @property
    def depth(self) -> int:
        _DEPTH = {
            "system": 10,
            "category": 40,
            "course": 50,
            "module": 70,
            "block": 80,
        }
        return _DEPTH[self.value]


@dataclass(frozen=True)
class Scope:
    """A security/authorization scope the page runs in."""

    id: int
    level: ScopeLevel
    instance_id: int
    parent_id: int | None = None


@dataclass
class Course:
    id: int
    category: int = 0
    fullname: str = ""
    shortname: str = ""
    format: str = "topics"
    theme: str = ""


@dataclass
class Category:
    """Course category. ``path`` is the id chain from the root, e.g. ``/1/4/7``."""

    id: int
    name: str = ""
    path: str = ""
    theme: str = ""

    @property
    def ancestor_ids(self) -> list[int]:
        """Parent ids, immediate parent first."""
        ids = [int(part) for part in self.path.strip("/").split("/") if part]
        if ids and ids[-1] == self.id:
            ids.pop()
        return list(reversed(ids))


@dataclass
class CourseModule:
    """Raw course-module reference, e.g. a row from a listing."""

    id: int
    course: int
    instance: int = 0
    modname: str = ""


@dataclass
class CanonicalModule:
    """Course module enriched with authoritative metadata."""

    id: int
    course: int
    instance: int
    modname: str
    name: str = ""
    visible: bool = True


@dataclass
class ActivityRecord:
    """Row from an activity's own table (forum, quiz, ...)."""

    id: int
    course: int
    name: str = ""
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class UserState:
    """The requesting user as seen by the page."""

    id: int = 0
    logged_in: bool = False
    editing: bool = False
    theme: str = ""
    cohort_theme: str = ""
    language: str = "en"
    direction: str = "ltr"
    device_type: str = "default"
    capabilities: frozenset[str] = frozenset()

    def has_capability(self, capability: str, scope: Scope | None = None) -> bool:
        return capability in self.capabilities

    def has_any_capability(
        self, capabilities: list[str], scope: Scope | None = None
    ) -> bool:
        return any(self.has_capability(cap, scope) for cap in capabilities)


@dataclass(frozen=True)
class AlternateVersion:
    title: str
    url: str
    mimetype: str
