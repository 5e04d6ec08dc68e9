"""Typed site settings consulted by the page context."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fastapi_page_context.models import Scope, ScopeLevel

ThemeSource = Literal["course", "category", "session", "user", "cohort", "site"]

DEFAULT_THEME_ORDER: List[ThemeSource] = [
    "course",
    "category",
    "session",
    "user",
    "cohort",
    "site",
]


class ContextTransitionRule(BaseModel):
    """One allowed context switch for the advisory check.

    ``target`` is a scope level name, ``"*"`` for any level, or ``"child"``
    for a scope whose parent is the current one.
    """

    model_config = ConfigDict(frozen=True)

    source: ScopeLevel
    target: str = "*"

    def allows(self, current: Scope, new: Scope) -> bool:
        if current.level != self.source:
            return False
        if self.target == "*":
            return True
        if self.target == "child":
            return new.parent_id == current.id
        return new.level.value == self.target


def _default_transitions() -> List[ContextTransitionRule]:
    return [
        ContextTransitionRule(source=ScopeLevel.SYSTEM),
        ContextTransitionRule(source=ScopeLevel.COURSE),
        ContextTransitionRule(source=ScopeLevel.MODULE, target="child"),
    ]


class PageSettings(BaseModel):
    """Site-wide policy for page contexts. Shared read-only across requests."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    wwwroot: str = "http://localhost"
    admin_dir: str = "admin"
    site_course_id: int = Field(default=1, ge=1)
    site_name: str = ""

    theme_order: List[ThemeSource] = Field(
        default_factory=lambda: list(DEFAULT_THEME_ORDER)
    )
    allow_course_themes: bool = False
    allow_category_themes: bool = False
    allow_user_themes: bool = False
    allow_cohort_themes: bool = False
    theme: Optional[str] = None
    default_theme: str = "boost"

    blocks_editing_capability: str = "site:manageblocks"
    safe_context_transitions: List[ContextTransitionRule] = Field(
        default_factory=_default_transitions
    )
    edited_page_limit: int = Field(default=50, ge=1)

    maintenance_enabled: bool = False
    blocks_drag: bool = False
    theme_designer_mode: bool = False

    ws_path_prefix: str = "/webservice/"

    @field_validator("wwwroot", mode="before")
    @classmethod
    def strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.rstrip("/")
        return value

    @field_validator("theme_order", mode="after")
    @classmethod
    def ensure_site_fallback(cls, value: List[ThemeSource]) -> List[ThemeSource]:
        if not value or value[-1] != "site":
            return [*value, "site"]
        return value

    def is_safe_transition(self, current: Scope, new: Scope) -> bool:
        return any(rule.allows(current, new) for rule in self.safe_context_transitions)
