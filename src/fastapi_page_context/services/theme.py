"""Theme resolution — ThemeResolver, ThemeHandle, ConfiguredThemeResolver."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from fastapi_page_context.config import PageSettings
from fastapi_page_context.exceptions import NotFound

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext
    from fastapi_page_context.services.blocks import BlockManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThemeHandle:
    """A loaded theme: its name and per-layout options.

    Layout options may name the block ``regions`` of the layout and its
    ``defaultregion``. ``block_rtl_manipulations`` maps a region to the one
    it is shown in for right-to-left languages.
    """

    name: str
    layouts: dict[str, dict[str, Any]] = field(default_factory=dict)
    block_rtl_manipulations: dict[str, str] = field(default_factory=dict)

    def layout_options(self, layout: str) -> dict[str, Any]:
        return dict(self.layouts.get(layout, {}))

    def setup_blocks(self, layout: str, blocks: BlockManager) -> None:
        options = self.layouts.get(layout, {})
        blocks.add_regions(options.get("regions", ()), custom=False)
        if options.get("defaultregion"):
            blocks.set_default_region(options["defaultregion"])


@runtime_checkable
class ThemeResolver(Protocol):
    """Chooses and loads the theme for a page."""

    def load(self, name: str) -> ThemeHandle: ...
    def resolve_name(self, page: RequestPageContext) -> str: ...


class ConfiguredThemeResolver:
    """Walks ``settings.theme_order`` and returns the first matching theme.

    Sources are course, category, session, user, cohort and site; each
    non-site source is skipped unless its ``allow_*`` flag is set (session
    overrides are always honoured).
    """

    def __init__(
        self, settings: PageSettings, themes: Iterable[ThemeHandle] = ()
    ) -> None:
        self._settings = settings
        self._themes: dict[str, ThemeHandle] = {theme.name: theme for theme in themes}

    def register(self, theme: ThemeHandle) -> None:
        self._themes[theme.name] = theme

    def load(self, name: str) -> ThemeHandle:
        if not self._themes:
            return ThemeHandle(name=name)
        try:
            return self._themes[name]
        except KeyError:
            raise NotFound("theme", name) from None

    def resolve_name(self, page: RequestPageContext) -> str:
        settings = self._settings
        course = page.explicit_course
        user = page.user

        for source in settings.theme_order:
            if source == "course":
                if settings.allow_course_themes and course is not None and course.theme:
                    return course.theme
            elif source == "category":
                if settings.allow_category_themes and course is not None:
                    for category in page.categories:
                        if category.theme:
                            return category.theme
            elif source == "session":
                session_theme = page.session.get("theme")
                if session_theme:
                    return str(session_theme)
            elif source == "user":
                if settings.allow_user_themes and user.theme:
                    return user.theme
            elif source == "cohort":
                if settings.allow_cohort_themes and user.cohort_theme:
                    return user.cohort_theme
            elif source == "site":
                return settings.theme or settings.default_theme

        logger.warning("Error resolving the theme to use for this page")
        return settings.default_theme
