"""Edit snapshots — rebuild an editing page in a later request.

While a user is editing, ``capture_edit_snapshot`` stores a compact record
of the page (scope, address, course or module, layout overrides and editing
capabilities) in the session, keyed by a hash over the record and the
session secret. ``restore_edit_snapshot`` checks that hash and replays the
setters on a fresh page, so AJAX-style follow-up requests get the same page
without re-running the page script.

Records are kept in an insertion-ordered mapping under ``edited_pages``;
re-capturing a page moves it to the end, and the oldest entries are dropped
once ``PageSettings.edited_page_limit`` is exceeded.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from typing import TYPE_CHECKING, Any

from fastapi_page_context._types import PageFactoryCallback
from fastapi_page_context.exceptions import NotFound, PreconditionViolation, Tampered
from fastapi_page_context.services.session import session_secret

if TYPE_CHECKING:
    from fastapi_page_context.context import RequestPageContext

logger = logging.getLogger(__name__)

EDITED_PAGES_KEY = "edited_pages"


def _snapshot_hash(record: dict[str, Any], secret: str) -> str:
    payload = json.dumps({**record, "sesskey": secret}, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _local_url(page: RequestPageContext) -> str:
    wwwroot = page.settings.wwwroot
    full = str(page.url.replace(fragment=""))
    if full != wwwroot and not full.startswith(wwwroot + "/"):
        raise PreconditionViolation(f"Page url {full} is not local to the site")
    return full[len(wwwroot) :] or "/"


def build_snapshot_record(page: RequestPageContext) -> dict[str, Any]:
    """The minimal record needed to rebuild ``page``."""
    record: dict[str, Any] = {
        "contextid": page.context.id,
        "url": _local_url(page),
    }
    if page.module is not None:
        record["cmid"] = page.module.id
    elif page.course.id:
        record["courseid"] = page.course.id

    for key, value in (
        ("pagelayout", page.page_layout),
        ("pagetype", page.page_type),
        ("subpage", page.subpage),
    ):
        if value:
            record[key] = value

    if page.blocks_editing_capability != page.settings.blocks_editing_capability:
        record["bcap"] = page.blocks_editing_capability
    if page.other_editing_capabilities:
        record["caps"] = page.other_editing_capabilities
    if page.force_lock_all_blocks:
        record["forcelock"] = True
    return record


def capture_edit_snapshot(page: RequestPageContext) -> str | None:
    """Store a snapshot of an editing page; returns its key, or None when not editing."""
    if not page.user_is_editing():
        return None

    record = build_snapshot_record(page)
    session = page.session
    key = _snapshot_hash(record, session_secret(session))

    pages: dict[str, Any] = dict(session.get(EDITED_PAGES_KEY) or {})
    pages.pop(key, None)
    pages[key] = record
    limit = page.settings.edited_page_limit
    while len(pages) > limit:
        evicted = next(iter(pages))
        del pages[evicted]
        logger.debug("Evicted edit snapshot %s", evicted)
    session.set(EDITED_PAGES_KEY, pages)
    return key


def restore_edit_snapshot(
    key: str, make_page: PageFactoryCallback
) -> RequestPageContext:
    """Rebuild the page stored under ``key`` on a fresh page from ``make_page``.

    Raises ``NotFound`` when no record exists and ``Tampered`` when the hash
    no longer matches (for example after the session secret rotated).
    Callers usually fall back to building the page from the live request.
    """
    page = make_page()
    session = page.session
    pages = session.get(EDITED_PAGES_KEY) or {}
    record = pages.get(key)
    if record is None:
        raise NotFound("edit snapshot", key)
    if not isinstance(record, dict) or not hmac.compare_digest(
        key, _snapshot_hash(record, session_secret(session))
    ):
        raise Tampered(key)

    services = page.services
    page.set_context(services.scopes.instance_by_id(record["contextid"]))
    if "cmid" in record:
        module = services.modules.get_by_id(record["cmid"])
        page.set_module(module, services.courses.get_by_id(module.course))
    elif "courseid" in record:
        page.set_course(services.courses.get_by_id(record["courseid"]))

    page.set_url(record["url"])
    if "pagelayout" in record:
        page.set_page_layout(record["pagelayout"])
    if "pagetype" in record:
        page.set_page_type(record["pagetype"])
    if "subpage" in record:
        page.set_subpage(record["subpage"])

    if "bcap" in record:
        page.set_blocks_editing_capability(record["bcap"])
    if "caps" in record:
        page.add_editing_capability(record["caps"])
    if record.get("forcelock"):
        page.lock_all_blocks()
    return page
