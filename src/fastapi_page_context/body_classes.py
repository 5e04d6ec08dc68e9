"""Standard CSS classes for the page <body>, computed as output starts."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext


def url_to_class_name(url: str) -> str:
    """Turn a site address into a class, e.g. ``example-com--8080--sub-dir``."""
    bits = urlsplit(url)
    class_name = (bits.hostname or "").replace(".", "-")
    if bits.port:
        class_name += f"--{bits.port}"
    path = bits.path.strip("/")
    if path:
        class_name += "--" + path.replace("/", "-")
    return class_name


def _legacy_class(page_type: str) -> str | None:
    if page_type == "site-index":
        return "course"
    if page_type.startswith("admin-"):
        return "admin"
    return None


def standard_body_classes(page: RequestPageContext) -> list[str]:
    """Classes describing the page type, layout, location and user state."""
    settings = page.settings
    user = page.user
    page_type = page.page_type
    classes: list[str] = []

    legacy = _legacy_class(page_type)
    if legacy:
        classes.append(legacy)

    bits = page_type.strip().split("-")
    for i in range(1, len(bits)):
        classes.append("path-" + "-".join(bits[:i]))

    classes.append(f"dir-{user.direction}")
    classes.append(f"lang-{user.language}")
    classes.append(url_to_class_name(settings.wwwroot))
    classes.append(f"pagelayout-{page.page_layout}")
    classes.append(f"course-{page.course.id}")
    classes.append(f"context-{page.context.id}")

    module = page.module
    if module is not None:
        classes.append(f"cmid-{module.id}")
        classes.append(f"cm-type-{module.modname}")

    if settings.allow_category_themes and page.explicit_course is not None:
        for category_id in page.category_ids:
            classes.append(f"category-{category_id}")
    else:
        category_id = page.immediate_category_id
        if category_id:
            classes.append(f"category-{category_id}")

    if not user.logged_in:
        classes.append("notloggedin")
    if page.user_is_editing():
        classes.append("editing")
    if settings.blocks_drag:
        classes.append("drag")
    if user.device_type != "default":
        classes.append(f"{user.device_type}theme")
    if settings.theme_designer_mode:
        classes.append("themedesignermode")

    return classes
