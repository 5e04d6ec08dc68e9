"""Shared pytest fixtures for fastapi-page-context tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.requests import Request

from fastapi_page_context.config import PageSettings
from fastapi_page_context.context import RequestPageContext
from fastapi_page_context.models import (
    ActivityRecord,
    CanonicalModule,
    Category,
    Course,
    UserState,
)
from fastapi_page_context.services import (
    ConfiguredThemeResolver,
    InMemoryCategoryStore,
    InMemoryCourseStore,
    InMemoryModuleInfo,
    InMemoryScopeResolver,
    InMemorySessionStore,
    PageServices,
    ThemeHandle,
)

WWWROOT = "http://lms.test"


@pytest.fixture
def make_request() -> Any:
    """Factory for creating mock Starlette Request objects."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        session: dict[str, Any] | None = None,
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "scheme": "http",
            "server": ("lms.test", 80),
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        if session is not None:
            scope["session"] = session
        return Request(scope)

    return _make


@pytest.fixture
def settings() -> PageSettings:
    return PageSettings(wwwroot=WWWROOT, site_name="Test LMS")


@pytest.fixture
def site() -> Course:
    return Course(id=1, category=0, fullname="Test LMS", shortname="LMS", format="site")


@pytest.fixture
def courses(site: Course) -> InMemoryCourseStore:
    return InMemoryCourseStore(
        [
            site,
            Course(id=5, category=0, fullname="Front matter", format="topics"),
            Course(id=10, category=7, fullname="Physics", format="weeks", theme="lab"),
            Course(id=11, category=4, fullname="Chemistry"),
        ]
    )


@pytest.fixture
def categories() -> InMemoryCategoryStore:
    return InMemoryCategoryStore(
        [
            Category(id=1, name="Faculties", path="/1"),
            Category(id=4, name="Science", path="/1/4", theme="ocean"),
            Category(id=7, name="Physics", path="/1/4/7"),
        ]
    )


@pytest.fixture
def modules() -> InMemoryModuleInfo:
    return InMemoryModuleInfo(
        [
            CanonicalModule(id=20, course=10, instance=3, modname="forum", name="News"),
            CanonicalModule(id=21, course=11, instance=8, modname="quiz", name="Quiz 1"),
        ],
        records=[("forum", ActivityRecord(id=3, course=10, name="News"))],
    )


@pytest.fixture
def themes(settings: PageSettings) -> ConfiguredThemeResolver:
    return ConfiguredThemeResolver(
        settings,
        [
            ThemeHandle(name="boost", layouts={"base": {"regions": ["side-pre"]}}),
            ThemeHandle(name="classic"),
            ThemeHandle(name="ocean"),
            ThemeHandle(name="lab"),
        ],
    )


@pytest.fixture
def session() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def services(
    site: Course,
    courses: InMemoryCourseStore,
    categories: InMemoryCategoryStore,
    modules: InMemoryModuleInfo,
    themes: ConfiguredThemeResolver,
    session: InMemorySessionStore,
) -> PageServices:
    return PageServices(
        site=site,
        courses=courses,
        categories=categories,
        modules=modules,
        themes=themes,
        scopes=InMemoryScopeResolver(),
        session=session,
    )


@pytest.fixture
def editor() -> UserState:
    return UserState(
        id=2,
        logged_in=True,
        editing=True,
        capabilities=frozenset({"site:manageblocks", "course:manageactivities"}),
    )


@pytest.fixture
def make_page(settings: PageSettings, services: PageServices) -> Any:
    """Factory for pages sharing the fixture services (and session)."""

    def _make(**kwargs: Any) -> RequestPageContext:
        return RequestPageContext(settings, services, **kwargs)

    return _make


@pytest.fixture
def page(make_page: Any) -> RequestPageContext:
    return make_page()
