"""RequestPageContext — per-request page state, lifecycle and lazy services."""

from __future__ import annotations

import copy
import logging
import re
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from starlette.datastructures import URL

from fastapi_page_context._types import RequestOrigin
from fastapi_page_context.body_classes import standard_body_classes
from fastapi_page_context.config import PageSettings
from fastapi_page_context.exceptions import (
    InvalidTransition,
    NotFound,
    PreconditionViolation,
)
from fastapi_page_context.hooks import PageHook
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
from fastapi_page_context.services import PageServices
from fastapi_page_context.services.blocks import BlockManager
from fastapi_page_context.services.navigation import NavigationKind
from fastapi_page_context.services.requirements import RequirementsCollector
from fastapi_page_context.services.session import SessionStore
from fastapi_page_context.services.theme import ThemeHandle
from fastapi_page_context.snapshot import capture_edit_snapshot
from fastapi_page_context.state import PageState
from fastapi_page_context.trace import LifecycleTrace, ThemeInitialisation, TraceEntry

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " | "

_T = TypeVar("_T")
_TAG_RE = re.compile(r"<[^>]*>")


class RequestPageContext:
    """All page-scoped configuration and service handles for one request.

    The page moves through ``PageState`` strictly in order. Most setters are
    only legal before output starts; anything that could change the theme
    is rejected once the theme has been resolved, except for web-service
    requests, which legitimately work across many courses.
    """

    def __init__(
        self,
        settings: PageSettings,
        services: PageServices,
        *,
        user: UserState | None = None,
        origin: RequestOrigin = "web",
        primary: bool = False,
        script: str | None = None,
        request_url: str | None = None,
        hooks: Iterable[PageHook] = (),
        debug: bool = False,
    ) -> None:
        self._settings = settings
        self._services = services
        self._user = user if user is not None else UserState()
        self._origin: RequestOrigin = origin
        self._primary = primary
        self._script = script
        self._request_url = request_url
        self._hooks: list[PageHook] = list(hooks)
        self._created = time.perf_counter()
        self._trace: LifecycleTrace | None = LifecycleTrace() if debug else None

        self._state = PageState.BEFORE_HEADER
        self._course: Course | None = None
        self._module: CanonicalModule | None = None
        self._activity_record: ActivityRecord | None = None
        self._context: Scope | None = None
        # Immediate category first; ancestors are None until fully loaded.
        self._categories: dict[int, Category | None] | None = None
        self._body_classes: dict[str, None] = {}
        self._title = ""
        self._heading = ""
        self._heading_menu: str | None = None
        self._page_type: str | None = None
        self._page_layout = "base"
        self._layout_options: dict[str, Any] | None = None
        self._subpage = ""
        self._docs_path: str | None = None
        self._url: URL | None = None
        self._redirect_url: URL | None = None
        self._alternate_versions: dict[str, AlternateVersion] = {}
        self._blocks_editing_cap = settings.blocks_editing_capability
        self._other_editing_caps: list[str] = []
        self._block_actions_done = False
        self._cacheable = True
        self._focus_control = ""
        self._button = ""
        self._theme: ThemeHandle | None = None
        self._theme_initialised: ThemeInitialisation | None = None
        self._handles: dict[str, Any] = {}
        self._requires: RequirementsCollector | None = None
        self._saved_requires: RequirementsCollector | None = None
        self._periodic_refresh_delay: int | None = None
        self._popup_notifications_allowed = True
        self._settings_menu_forced = False
        self._header_actions: list[str] = []
        self._region_settings_in_header_actions = False
        self._has_secondary_navigation = True
        self._has_tablist_secondary_navigation = False
        self._secondary_active_tab: str | None = None
        self._primary_active_tab: str | None = None
        self._navigation_overflow = True
        self._force_lock_all_blocks = False
        self._show_course_index = True

    # Request identity ==========================================================

    @property
    def settings(self) -> PageSettings:
        return self._settings

    @property
    def services(self) -> PageServices:
        return self._services

    @property
    def session(self) -> SessionStore:
        return self._services.session

    @property
    def user(self) -> UserState:
        return self._user

    @property
    def origin(self) -> RequestOrigin:
        return self._origin

    @property
    def is_primary(self) -> bool:
        return self._primary

    @property
    def trace(self) -> LifecycleTrace | None:
        return self._trace

    def _elapsed_ms(self) -> float:
        return (time.perf_counter() - self._created) * 1000

    # Lifecycle =================================================================

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def header_printed(self) -> bool:
        return self._state.order >= PageState.IN_BODY.order

    def advance(self, target: PageState) -> None:
        """Move to the next lifecycle state. Only the direct successor is accepted."""
        if self._state.successor is not target:
            raise InvalidTransition(self._state, target)

        if target is PageState.PRINTING_HEADER:
            self._starting_output()

        previous = self._state
        self._state = target
        logger.debug("Page state %s -> %s", previous, target)

        if self._trace is not None:
            self._trace.entries.append(
                TraceEntry(previous=previous, current=target, elapsed_ms=self._elapsed_ms())
            )
        for hook in self._hooks:
            hook.on_transition(self, previous, target)

    def _starting_output(self) -> None:
        blocks = self.blocks
        blocks.load_blocks()
        if not self._block_actions_done:
            redirect = blocks.process_url_actions(self)
            self._block_actions_done = True
            if redirect:
                self._redirect_url = self.url
        blocks.create_all_instances()

        if self._settings.maintenance_enabled:
            settings = self._settings
            link = (
                f'<a href="{settings.wwwroot}/{settings.admin_dir}'
                f'/settings.php?section=maintenancemode">Maintenance mode</a> '
            )
            self.set_button(link + self._button)
            self.set_title("Maintenance mode")

        self.add_body_classes(standard_body_classes(self))

        for hook in self._hooks:
            hook.on_starting_output(self)

    @property
    def redirect_url(self) -> URL | None:
        """Set when block URL actions asked for a redirect while output started."""
        return self._redirect_url

    # Course, module and activity ===============================================

    @property
    def course(self) -> Course:
        """The page course, or the site course when none was set."""
        if self._course is None:
            return self._services.site
        return self._course

    @property
    def explicit_course(self) -> Course | None:
        return self._course

    def set_course(self, course: Course) -> None:
        """Set the page course, taking a private copy of it.

        Sets the context to the course scope if no context was set yet.
        """
        if not getattr(course, "id", None):
            raise PreconditionViolation(
                "The course passed to set_course() does not look like a proper course object."
            )

        self._ensure_theme_not_set()

        if self._course is not None and self._course.id != course.id:
            self._categories = None

        self._course = copy.deepcopy(course)

        if self._primary:
            for hook in self._hooks:
                hook.on_primary_course_change(self, self._course)

        if self._context is None:
            self.set_context(self._services.scopes.course_scope(self._course.id))

        if self._course.id != self._services.site.id:
            self.add_body_class(f"format-{self._course.format}")
        else:
            self.add_body_class("format-site")

    @property
    def module(self) -> CanonicalModule | None:
        return self._module

    def set_module(
        self,
        module: CourseModule | CanonicalModule,
        course: Course | None = None,
        record: ActivityRecord | None = None,
    ) -> None:
        """Set the course module this page belongs to.

        When no course is set yet and none is passed, the module's course is
        looked up. A page already set to another course must be given the
        matching course explicitly.
        """
        if not getattr(module, "id", None) or not getattr(module, "course", None):
            raise PreconditionViolation(
                "Invalid module. It has to be a canonical module or a course-module record."
            )

        change_course = self._course is None or self._course.id != module.course
        if change_course:
            if course is None:
                if self._course is not None:
                    raise PreconditionViolation(
                        f"The module belongs to course {module.course} but the page"
                        f" course is {self._course.id}; pass the course explicitly."
                    )
                course = self._services.courses.get_by_id(module.course)
            if course.id != module.course:
                raise PreconditionViolation(
                    "The course passed to set_module() does not correspond to the module."
                )
        else:
            course = self.course

        # Resolve everything that can fail before the page is touched.
        if not isinstance(module, CanonicalModule):
            module = self._services.modules.canonicalize(module, course)
        if change_course:
            self.set_course(course)

        if self._module is None or self._module.id != module.id:
            self._activity_record = None
        self._module = module

        if self._context is None or self._context.level is not ScopeLevel.BLOCK:
            self.set_context(self._services.scopes.module_scope(module.id))

        if record is not None:
            self.set_activity_record(record)

    def set_activity_record(self, record: ActivityRecord) -> None:
        if self._module is None:
            raise PreconditionViolation(
                "You cannot call set_activity_record() until after the module has been set."
            )
        if record.id != self._module.instance or record.course != self.course.id:
            raise PreconditionViolation(
                "The activity record does not seem to correspond to the module that has been set."
            )
        self._activity_record = record

    @property
    def activity_record(self) -> ActivityRecord | None:
        if self._activity_record is None and self._module is not None:
            self._activity_record = self._services.modules.load_activity_record(
                self._module
            )
        return self._activity_record

    @property
    def activity_name(self) -> str | None:
        if self._module is None:
            return None
        return self._module.modname

    # Context scope =============================================================

    @property
    def context(self) -> Scope:
        if self._context is None:
            if self._origin != "cli":
                logger.warning(
                    "Page context was not set. You may have forgotten to call"
                    " set_context(); the page may not display correctly as a result"
                )
            self._context = self._services.scopes.system_scope()
        return self._context

    def set_context(self, scope: Scope | None) -> None:
        """Set the main scope of the page.

        ``None`` only makes sure some scope is set (error handling paths).
        Switching between unrelated levels is allowed but logged.
        """
        if scope is None:
            if self._context is None:
                self._context = self._services.scopes.system_scope()
            return

        current = self._context
        if current is not None and scope.id != current.id:
            if not self._settings.is_safe_transition(current, scope):
                logger.warning(
                    "Unsupported modification of page context from %s to %s",
                    current.level.value,
                    scope.level.value,
                )

        self._context = scope

    # Categories ================================================================

    def set_category_by_id(self, category_id: int) -> None:
        """Make this a category page: site course, category scope."""
        if self._categories is not None:
            raise PreconditionViolation(
                "Course category already set. You cannot change it now."
            )
        if self._course is not None:
            raise PreconditionViolation(
                "Course has already been set. You cannot change the category now."
            )
        self._ensure_theme_not_set()
        category = self._services.categories.get_by_id(category_id)
        self.set_course(self._services.site)
        self._store_category_chain(category)
        self.set_context(self._services.scopes.category_scope(category_id))

    @property
    def category(self) -> Category | None:
        chain = self._ensure_category_loaded()
        for category in chain.values():
            return category
        return None

    @property
    def categories(self) -> list[Category]:
        """Categories of the page course, immediate parent first, root last."""
        return [c for c in self._ensure_categories_loaded().values() if c is not None]

    @property
    def category_ids(self) -> list[int]:
        return list(self._ensure_category_loaded())

    @property
    def immediate_category_id(self) -> int:
        """Immediate category id without touching the store."""
        if self._categories:
            return next(iter(self._categories))
        if self._course is not None and self._course.category:
            return self._course.category
        return 0

    def _ensure_category_loaded(self) -> dict[int, Category | None]:
        if self._categories is not None:
            return self._categories
        if self._course is None:
            raise PreconditionViolation(
                "Attempt to get the course category for this page before the course was set."
            )
        if self._course.category == 0:
            self._categories = {}
        else:
            self._load_category(self._course.category)
        assert self._categories is not None
        return self._categories

    def _load_category(self, category_id: int) -> None:
        self._store_category_chain(self._services.categories.get_by_id(category_id))

    def _store_category_chain(self, category: Category) -> None:
        chain: dict[int, Category | None] = {category.id: category}
        for parent_id in category.ancestor_ids:
            chain[parent_id] = None
        self._categories = chain

    def _ensure_categories_loaded(self) -> dict[int, Category | None]:
        chain = self._ensure_category_loaded()
        missing = [category_id for category_id, c in chain.items() if c is None]
        if not missing:
            return chain
        found = self._services.categories.list_by_ids(missing)
        for category_id in missing:
            try:
                chain[category_id] = found[category_id]
            except KeyError:
                raise NotFound("category", category_id) from None
        return chain

    # URL and page type =========================================================

    @property
    def url(self) -> URL:
        if self._url is None:
            fallback = URL(self._request_url or self._settings.wwwroot + "/")
            logger.warning("This page did not call set_url(). Using %s", fallback)
            self._url = fallback.remove_query_params("sesskey")
        return self._url

    def has_set_url(self) -> bool:
        return self._url is not None

    def set_url(self, url: str | URL, params: Mapping[str, Any] | None = None) -> None:
        """Set the canonical address of the page.

        Accepts a full address or one starting with ``/`` (relative to the
        site root). The first call also derives the page type from the path
        when none was set.
        """
        if self._state is not PageState.BEFORE_HEADER:
            raise PreconditionViolation(
                "Cannot call set_url() after output has been started."
            )

        wwwroot = self._settings.wwwroot
        raw = str(url)
        if not raw.startswith("http"):
            if raw.startswith("/"):
                raw = wwwroot + raw
            else:
                raise PreconditionViolation(
                    "Invalid url, has to be full url or in shortened form starting with /."
                )

        parsed = URL(raw)
        if params:
            parsed = parsed.include_query_params(**{k: v for k, v in params.items()})
        self._url = parsed

        full = str(parsed.replace(query="", fragment=""))
        if full != wwwroot and not full.startswith(wwwroot + "/"):
            logger.warning(
                "Most probably incorrect set_url() argument, it does not match the site root: %s",
                full,
            )
        short = full[len(wwwroot) + 1 :] if full.startswith(wwwroot + "/") else ""

        if self._page_type is None:
            self._page_type = self._default_page_type(short)

    def ensure_param_not_in_url(self, param: str) -> None:
        self._url = self.url.remove_query_params(param)

    @staticmethod
    def _default_page_type(script: str) -> str:
        path = script.replace(".php", "")
        if path.endswith("/"):
            path += "index"
        if not path or path == "index":
            return "site-index"
        return path.replace("/", "-")

    @property
    def page_type(self) -> str:
        if self._page_type is None:
            script = (self._script or "").lstrip("/")
            admin = self._settings.admin_dir
            if script.startswith(admin):
                script = "admin" + script[len(admin) :]
            self._page_type = self._default_page_type(script)
        return self._page_type

    def set_page_type(self, page_type: str) -> None:
        self._page_type = page_type

    @property
    def body_id(self) -> str:
        return f"page-{self.page_type}"

    @property
    def docs_path(self) -> str:
        if self._docs_path is not None:
            return self._docs_path
        return self.page_type.replace("-", "/")

    def set_docs_path(self, path: str) -> None:
        self._docs_path = path

    # Layout ====================================================================

    @property
    def page_layout(self) -> str:
        return self._page_layout

    def set_page_layout(self, layout: str) -> None:
        """Set the layout; a layout forced in the session always wins."""
        forced = self.session.get("force_page_layout")
        if forced:
            layout = str(forced)
        if layout != self._page_layout:
            self._ensure_theme_not_set()
            self._layout_options = None
        self._page_layout = layout

    @property
    def layout_options(self) -> dict[str, Any]:
        if self._layout_options is None:
            self._layout_options = self.theme.layout_options(self._page_layout)
        return self._layout_options

    @property
    def subpage(self) -> str:
        return self._subpage

    def set_subpage(self, subpage: str | None) -> None:
        self._subpage = subpage or ""

    # Body classes and alternate versions =======================================

    @property
    def body_classes(self) -> str:
        return " ".join(self._body_classes)

    def has_body_class(self, name: str) -> bool:
        return name in self._body_classes

    def add_body_class(self, name: str) -> None:
        if self._state is not PageState.BEFORE_HEADER:
            raise PreconditionViolation(
                "Cannot call add_body_class() after output has been started."
            )
        self._body_classes[name] = None

    def add_body_classes(self, names: Iterable[str]) -> None:
        for name in names:
            self.add_body_class(name)

    @property
    def alternate_versions(self) -> dict[str, AlternateVersion]:
        return dict(self._alternate_versions)

    def add_alternate_version(self, title: str, url: str, mimetype: str) -> None:
        if self._state is not PageState.BEFORE_HEADER:
            raise PreconditionViolation(
                "Cannot call add_alternate_version() after output has been started."
            )
        self._alternate_versions[mimetype] = AlternateVersion(
            title=title, url=url, mimetype=mimetype
        )

    # Display strings ===========================================================

    @property
    def title(self) -> str:
        return self._title

    def set_title(self, title: str, append_site_name: bool = True) -> None:
        title = _TAG_RE.sub("", title).replace('"', "&quot;")
        if append_site_name:
            site_name = (self._settings.site_name or self._services.site.shortname).strip()
            title += TITLE_SEPARATOR + (site_name or "Site")
        self._title = title

    @property
    def heading(self) -> str:
        return self._heading

    def set_heading(self, heading: str) -> None:
        self._heading = heading

    @property
    def heading_menu(self) -> str | None:
        return self._heading_menu

    def set_heading_menu(self, menu: str | None) -> None:
        self._heading_menu = menu

    @property
    def focus_control(self) -> str:
        return self._focus_control

    def set_focus_control(self, control_id: str) -> None:
        self._focus_control = control_id

    @property
    def button(self) -> str:
        return self._button

    def set_button(self, html: str) -> None:
        self._button = html

    @property
    def header_actions(self) -> list[str]:
        return list(self._header_actions)

    def add_header_action(self, html: str) -> None:
        self._header_actions.append(html)

    # Theme =====================================================================

    @property
    def theme(self) -> ThemeHandle:
        if self._theme is None:
            self.initialise_theme_and_output()
        assert self._theme is not None
        return self._theme

    @property
    def where_theme_was_initialised(self) -> ThemeInitialisation | None:
        return self._theme_initialised

    def initialise_theme_and_output(self) -> None:
        """Resolve and lock the theme for this page. Safe to call repeatedly."""
        if self._theme_initialised is not None:
            return

        # Detect an unset context before anything depends on it.
        self.context  # noqa: B018

        if self._course is None:
            self.set_course(self._services.site)

        if self._theme is None:
            name = self._services.themes.resolve_name(self)
            self._theme = self._services.themes.load(name)
        self._theme.setup_blocks(self._page_layout, self.blocks)

        self._theme_initialised = ThemeInitialisation(
            theme=self._theme.name,
            state=self._state,
            course_id=self.course.id,
            page_layout=self._page_layout,
            elapsed_ms=self._elapsed_ms(),
        )
        logger.debug("Initialised %s", self._theme_initialised)

    @property
    def block_manipulations(self) -> dict[str, str]:
        """Region swaps the theme asks for. Empty unless the user reads right to left."""
        if self._user.direction != "rtl":
            return {}
        return dict(self.theme.block_rtl_manipulations)

    def apply_theme_region_manipulations(self, region: str) -> str:
        """The region a block placed in ``region`` is shown in.

        Only swapped when the block manager knows both regions.
        """
        swapped = self.block_manipulations.get(region)
        if swapped is None:
            return region
        blocks = self.blocks
        if blocks.is_known_region(region) and blocks.is_known_region(swapped):
            return swapped
        return region

    def force_theme(self, name: str) -> None:
        self._ensure_theme_not_set()
        self._theme = self._services.themes.load(name)

    def reload_theme(self) -> None:
        if self._theme is not None:
            self._theme = self._services.themes.load(self._theme.name)

    def reset_theme_and_output(self) -> None:
        """Forget the theme and everything that selected it.

        For code that must render for several courses in one request.
        """
        self._theme = None
        self._theme_initialised = None
        self._layout_options = None
        self._course = None
        self._categories = None
        self._module = None
        self._activity_record = None
        self._context = None
        if self._primary:
            site = copy.deepcopy(self._services.site)
            for hook in self._hooks:
                hook.on_primary_course_change(self, site)

    def _ensure_theme_not_set(self) -> None:
        # Web services may process many course contexts in a single request.
        if self._origin == "ws":
            return
        if self._theme is not None:
            where = self._theme_initialised or "forced with force_theme()"
            raise PreconditionViolation(
                "The theme has already been set up for this page ready for output."
                " Therefore, you can no longer change the theme, or anything that"
                " might affect what the current theme is, for example, the course."
                f" ({where})"
            )

    # Lazy service handles ======================================================

    def _cached(self, key: str, build: Callable[[], _T]) -> _T:
        if key not in self._handles:
            logger.debug("Building %s", key)
            self._handles[key] = build()
        value: _T = self._handles[key]
        return value

    @property
    def blocks(self) -> BlockManager:
        return self._cached("blocks", lambda: self._services.blocks.create(self))

    def _navigation(self, kind: NavigationKind) -> Any:
        return self._cached(
            f"navigation.{kind.value}",
            lambda: self._services.navigation.create(kind, self),
        )

    @property
    def navigation(self) -> Any:
        return self._navigation(NavigationKind.GLOBAL)

    @property
    def navbar(self) -> Any:
        return self._navigation(NavigationKind.NAVBAR)

    @property
    def settings_navigation(self) -> Any:
        return self._navigation(NavigationKind.SETTINGS)

    @property
    def flat_navigation(self) -> Any:
        return self._navigation(NavigationKind.FLAT)

    @property
    def primary_navigation(self) -> Any:
        return self._navigation(NavigationKind.PRIMARY)

    @property
    def secondary_navigation(self) -> Any:
        return self._navigation(NavigationKind.SECONDARY)

    def set_secondary_navigation_handle(self, navigation: Any) -> None:
        self._handles[f"navigation.{NavigationKind.SECONDARY.value}"] = navigation

    @property
    def requires(self) -> RequirementsCollector:
        if self._requires is None:
            self._requires = RequirementsCollector()
        return self._requires

    def start_collecting_javascript_requirements(self) -> None:
        """Swap in a fragment collector so only fragment assets are gathered."""
        if self.requires.fragment:
            raise PreconditionViolation("JavaScript collection has already been started.")
        if self._theme_initialised is None:
            raise PreconditionViolation(
                "The page header needs to be output before collecting JavaScript requirements."
            )
        self._saved_requires = self._requires
        self._requires = RequirementsCollector(fragment=True)

    def end_collecting_javascript_requirements(self) -> None:
        if self._saved_requires is None:
            raise PreconditionViolation("JavaScript collection has not been started.")
        self._requires = self._saved_requires
        self._saved_requires = None

    # Editing ===================================================================

    @property
    def editing_capabilities(self) -> frozenset[str]:
        return frozenset(self.all_editing_caps())

    @property
    def blocks_editing_capability(self) -> str:
        return self._blocks_editing_cap

    @property
    def other_editing_capabilities(self) -> list[str]:
        return list(self._other_editing_caps)

    def all_editing_caps(self) -> list[str]:
        return [*self._other_editing_caps, self._blocks_editing_cap]

    def set_blocks_editing_capability(self, capability: str) -> None:
        self._blocks_editing_cap = capability

    def add_editing_capability(self, capability: str | Iterable[str]) -> None:
        """Add capabilities that, besides the blocks one, allow editing mode."""
        caps = [capability] if isinstance(capability, str) else list(capability)
        for cap in caps:
            if cap not in self._other_editing_caps:
                self._other_editing_caps.append(cap)

    def user_allowed_editing(self) -> bool:
        return self._user.has_any_capability(self.all_editing_caps(), self.context)

    def user_is_editing(self) -> bool:
        return self._user.editing and self.user_allowed_editing()

    def user_can_edit_blocks(self) -> bool:
        if self._force_lock_all_blocks:
            return False
        return self._user.has_capability(self._blocks_editing_cap, self.context)

    @property
    def force_lock_all_blocks(self) -> bool:
        return self._force_lock_all_blocks

    def lock_all_blocks(self) -> None:
        self._force_lock_all_blocks = True

    def set_block_actions_done(self, done: bool = True) -> None:
        self._block_actions_done = done

    def capture_edit_snapshot(self) -> str | None:
        """Store an edit snapshot of this page in the session; see ``snapshot``."""
        return capture_edit_snapshot(self)

    # Flags =====================================================================

    @property
    def cacheable(self) -> bool:
        return self._cacheable

    def set_cacheable(self, cacheable: bool) -> None:
        self._cacheable = cacheable

    @property
    def periodic_refresh_delay(self) -> int | None:
        return self._periodic_refresh_delay

    def set_periodic_refresh_delay(self, delay: int | None = None) -> None:
        if self._state is not PageState.BEFORE_HEADER:
            raise PreconditionViolation(
                "You cannot set a periodic refresh delay after the header has been printed."
            )
        self._periodic_refresh_delay = delay

    @property
    def popup_notifications_allowed(self) -> bool:
        return self._popup_notifications_allowed

    def set_popup_notifications_allowed(self, allowed: bool) -> None:
        self._popup_notifications_allowed = allowed

    @property
    def settings_menu_forced(self) -> bool:
        return self._settings_menu_forced

    def force_settings_menu(self, forced: bool = True) -> None:
        self._settings_menu_forced = forced

    @property
    def region_settings_in_header_actions(self) -> bool:
        return self._region_settings_in_header_actions

    def set_region_settings_in_header_actions(self, value: bool) -> None:
        self._region_settings_in_header_actions = value

    @property
    def has_secondary_navigation(self) -> bool:
        return self._has_secondary_navigation

    @property
    def has_tablist_secondary_navigation(self) -> bool:
        return self._has_tablist_secondary_navigation

    def set_secondary_navigation(self, visible: bool, tablist: bool = False) -> None:
        self._has_secondary_navigation = visible
        self._has_tablist_secondary_navigation = tablist

    @property
    def secondary_active_tab(self) -> str | None:
        return self._secondary_active_tab

    def set_secondary_active_tab(self, key: str) -> None:
        self._secondary_active_tab = key

    @property
    def primary_active_tab(self) -> str | None:
        return self._primary_active_tab

    def set_primary_active_tab(self, key: str) -> None:
        self._primary_active_tab = key

    @property
    def navigation_overflow(self) -> bool:
        return self._navigation_overflow

    def set_navigation_overflow(self, state: bool) -> None:
        self._navigation_overflow = state

    @property
    def show_course_index(self) -> bool:
        return self._show_course_index

    def set_show_course_index(self, state: bool) -> None:
        self._show_course_index = state

    def debug_summary(self) -> str:
        summary = f"General type: {self.page_layout}. "
        summary += f"Context {self.context.level.value} (context id {self.context.id}). "
        summary += f"Page type {self.page_type}. "
        if self.subpage:
            summary += f"Sub-page {self.subpage}. "
        return summary
