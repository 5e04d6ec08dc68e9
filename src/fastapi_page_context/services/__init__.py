"""Collaborators the page context delegates to."""

from __future__ import annotations

from dataclasses import dataclass, field

from fastapi_page_context.config import PageSettings
from fastapi_page_context.models import Course
from fastapi_page_context.services.blocks import (
    BlockManager,
    BlockManagerFactory,
    DefaultBlockManager,
    DefaultBlockManagerFactory,
)
from fastapi_page_context.services.navigation import (
    DefaultNavigationFactory,
    NavigationFactory,
    NavigationHandle,
    NavigationKind,
)
from fastapi_page_context.services.requirements import RequirementsCollector
from fastapi_page_context.services.scopes import (
    InMemoryScopeResolver,
    SecurityScopeResolver,
)
from fastapi_page_context.services.session import (
    InMemorySessionStore,
    RequestSessionStore,
    SessionStore,
    rotate_session_secret,
    session_secret,
)
from fastapi_page_context.services.stores import (
    CategoryStore,
    CourseStore,
    InMemoryCategoryStore,
    InMemoryCourseStore,
    InMemoryModuleInfo,
    ModuleInfoProvider,
)
from fastapi_page_context.services.theme import (
    ConfiguredThemeResolver,
    ThemeHandle,
    ThemeResolver,
)


@dataclass
class PageServices:
    """Everything a page needs from the outside world, in one bundle."""

    site: Course
    courses: CourseStore
    categories: CategoryStore
    modules: ModuleInfoProvider
    themes: ThemeResolver
    scopes: SecurityScopeResolver
    session: SessionStore = field(default_factory=InMemorySessionStore)
    blocks: BlockManagerFactory = field(default_factory=DefaultBlockManagerFactory)
    navigation: NavigationFactory = field(default_factory=DefaultNavigationFactory)

    @classmethod
    def in_memory(
        cls, settings: PageSettings, *, site_name: str = "Site"
    ) -> PageServices:
        """Build a bundle of empty in-memory collaborators around a site course."""
        site = Course(
            id=settings.site_course_id,
            category=0,
            fullname=site_name,
            shortname=site_name,
            format="site",
        )
        return cls(
            site=site,
            courses=InMemoryCourseStore([site]),
            categories=InMemoryCategoryStore(),
            modules=InMemoryModuleInfo(),
            themes=ConfiguredThemeResolver(settings),
            scopes=InMemoryScopeResolver(),
        )


__all__ = [
    "BlockManager",
    "BlockManagerFactory",
    "CategoryStore",
    "ConfiguredThemeResolver",
    "CourseStore",
    "DefaultBlockManager",
    "DefaultBlockManagerFactory",
    "DefaultNavigationFactory",
    "InMemoryCategoryStore",
    "InMemoryCourseStore",
    "InMemoryModuleInfo",
    "InMemoryScopeResolver",
    "InMemorySessionStore",
    "ModuleInfoProvider",
    "NavigationFactory",
    "NavigationHandle",
    "NavigationKind",
    "PageServices",
    "RequestSessionStore",
    "RequirementsCollector",
    "SecurityScopeResolver",
    "SessionStore",
    "ThemeHandle",
    "ThemeResolver",
    "rotate_session_secret",
    "session_secret",
]
