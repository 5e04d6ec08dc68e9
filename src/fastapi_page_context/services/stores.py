"""Record stores — CourseStore, CategoryStore, ModuleInfoProvider and in-memory backends."""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from fastapi_page_context.exceptions import NotFound
from fastapi_page_context.models import (
    ActivityRecord,
    CanonicalModule,
    Category,
    Course,
    CourseModule,
)


@runtime_checkable
class CourseStore(Protocol):
    """Pluggable course lookup."""

    def get_by_id(self, course_id: int) -> Course: ...


@runtime_checkable
class CategoryStore(Protocol):
    """Pluggable course-category lookup."""

    def get_by_id(self, category_id: int) -> Category: ...
    def list_by_ids(self, category_ids: Iterable[int]) -> dict[int, Category]: ...


@runtime_checkable
class ModuleInfoProvider(Protocol):
    """Authoritative course-module metadata."""

    def canonicalize(
        self, module: CourseModule, course: Course
    ) -> CanonicalModule: ...
    def get_by_id(self, module_id: int) -> CanonicalModule: ...
    def load_activity_record(
        self, module: CanonicalModule
    ) -> ActivityRecord | None: ...


class InMemoryCourseStore:
    """Dict-backed course store. Returns copies so callers cannot mutate it."""

    def __init__(self, courses: Iterable[Course] = ()) -> None:
        self._courses: dict[int, Course] = {}
        for course in courses:
            self.add(course)

    def add(self, course: Course) -> None:
        self._courses[course.id] = course

    def get_by_id(self, course_id: int) -> Course:
        try:
            return copy.deepcopy(self._courses[course_id])
        except KeyError:
            raise NotFound("course", course_id) from None


class InMemoryCategoryStore:
    """Dict-backed category store."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[int, Category] = {}
        for category in categories:
            self.add(category)

    def add(self, category: Category) -> None:
        self._categories[category.id] = category

    def get_by_id(self, category_id: int) -> Category:
        try:
            return self._categories[category_id]
        except KeyError:
            raise NotFound("category", category_id) from None

    def list_by_ids(self, category_ids: Iterable[int]) -> dict[int, Category]:
        found: dict[int, Category] = {}
        for category_id in category_ids:
            category = self._categories.get(category_id)
            if category is not None:
                found[category_id] = category
        return found


class InMemoryModuleInfo:
    """Module metadata held in memory, keyed by course-module id."""

    def __init__(
        self,
        modules: Iterable[CanonicalModule] = (),
        records: Iterable[tuple[str, ActivityRecord]] = (),
    ) -> None:
        self._modules: dict[int, CanonicalModule] = {}
        self._records: dict[tuple[str, int], ActivityRecord] = {}
        for module in modules:
            self.add(module)
        for modname, record in records:
            self.add_record(modname, record)

    def add(self, module: CanonicalModule) -> None:
        self._modules[module.id] = module

    def add_record(self, modname: str, record: ActivityRecord) -> None:
        self._records[(modname, record.id)] = record

    def canonicalize(self, module: CourseModule, course: Course) -> CanonicalModule:
        canonical = self.get_by_id(module.id)
        if canonical.course != course.id:
            raise NotFound("course module", module.id)
        return canonical

    def get_by_id(self, module_id: int) -> CanonicalModule:
        try:
            return self._modules[module_id]
        except KeyError:
            raise NotFound("course module", module_id) from None

    def load_activity_record(self, module: CanonicalModule) -> ActivityRecord | None:
        return self._records.get((module.modname, module.instance))
