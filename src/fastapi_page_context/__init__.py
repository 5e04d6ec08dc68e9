"""FastAPI Page Context - request-scoped page state with an ordered output lifecycle."""

from fastapi_page_context.body_classes import standard_body_classes, url_to_class_name
from fastapi_page_context.config import ContextTransitionRule, PageSettings
from fastapi_page_context.context import RequestPageContext
from fastapi_page_context.dependency import (
    PageContextFactory,
    edited_page_dependency,
    page_context_dependency,
)
from fastapi_page_context.exceptions import (
    InvalidTransition,
    NotFound,
    PageContextException,
    PageInternalError,
    PreconditionViolation,
    Tampered,
)
from fastapi_page_context.hooks import (
    OnPrimaryCourseChange,
    OnStartingOutput,
    OnTransition,
    PageHook,
)
from fastapi_page_context.models import (
    ActivityRecord,
    AlternateVersion,
    CanonicalModule,
    Category,
    Course,
    CourseModule,
    Scope,
    ScopeLevel,
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
    RequestSessionStore,
    ThemeHandle,
)
from fastapi_page_context.snapshot import capture_edit_snapshot, restore_edit_snapshot
from fastapi_page_context.state import PageState
from fastapi_page_context.trace import LifecycleTrace, ThemeInitialisation, TraceEntry

__all__ = [
    "ActivityRecord",
    "AlternateVersion",
    "CanonicalModule",
    "Category",
    "ConfiguredThemeResolver",
    "ContextTransitionRule",
    "Course",
    "CourseModule",
    "InMemoryCategoryStore",
    "InMemoryCourseStore",
    "InMemoryModuleInfo",
    "InMemoryScopeResolver",
    "InMemorySessionStore",
    "InvalidTransition",
    "LifecycleTrace",
    "NotFound",
    "OnPrimaryCourseChange",
    "OnStartingOutput",
    "OnTransition",
    "PageContextException",
    "PageContextFactory",
    "PageHook",
    "PageInternalError",
    "PageServices",
    "PageSettings",
    "PageState",
    "PreconditionViolation",
    "RequestPageContext",
    "RequestSessionStore",
    "Scope",
    "ScopeLevel",
    "Tampered",
    "ThemeHandle",
    "ThemeInitialisation",
    "TraceEntry",
    "UserState",
    "capture_edit_snapshot",
    "edited_page_dependency",
    "page_context_dependency",
    "restore_edit_snapshot",
    "standard_body_classes",
    "url_to_class_name",
]
