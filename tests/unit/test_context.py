"""Tests for RequestPageContext accessors and setters."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from fastapi_page_context.context import RequestPageContext
from fastapi_page_context.exceptions import NotFound, PreconditionViolation
from fastapi_page_context.models import (
    ActivityRecord,
    CanonicalModule,
    Course,
    CourseModule,
    ScopeLevel,
)
from fastapi_page_context.state import PageState


def _start_output(page: RequestPageContext) -> None:
    if not page.has_set_url():
        page.set_url("/index.php")
    page.advance(PageState.PRINTING_HEADER)


class TestBodyClasses:
    def test_add_and_deduplicate(self, page: RequestPageContext) -> None:
        page.add_body_class("wide")
        page.add_body_class("wide")
        assert page.body_classes.split().count("wide") == 1
        assert page.has_body_class("wide")

    def test_bulk_add(self, page: RequestPageContext) -> None:
        page.add_body_classes(["a", "b", "a"])
        assert page.body_classes.split() == ["a", "b"]

    def test_frozen_after_output_starts(self, page: RequestPageContext) -> None:
        page.add_body_class("before")
        _start_output(page)
        with pytest.raises(PreconditionViolation):
            page.add_body_class("after")
        with pytest.raises(PreconditionViolation):
            page.add_body_classes(["after"])
        assert not page.has_body_class("after")

    def test_alternate_versions_frozen_after_output(
        self, page: RequestPageContext
    ) -> None:
        page.add_alternate_version("RSS", "/rss.xml", "application/rss+xml")
        assert page.alternate_versions["application/rss+xml"].title == "RSS"
        _start_output(page)
        with pytest.raises(PreconditionViolation):
            page.add_alternate_version("Atom", "/atom.xml", "application/atom+xml")


class TestCourse:
    def test_defaults_to_site_course(self, page: RequestPageContext) -> None:
        assert page.course.id == 1
        assert page.explicit_course is None

    def test_rejects_course_without_id(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.set_course(Course(id=0))

    def test_stores_private_copy(self, page: RequestPageContext) -> None:
        course = Course(id=5, fullname="Original")
        page.set_course(course)
        course.fullname = "Changed by caller"
        assert page.course.fullname == "Original"
        assert page.course is not course

    def test_sets_course_scope_when_context_unset(
        self, page: RequestPageContext
    ) -> None:
        page.set_course(Course(id=5))
        assert page.context.level is ScopeLevel.COURSE
        assert page.context.instance_id == 5

    def test_keeps_existing_context(self, page: RequestPageContext) -> None:
        system = page.services.scopes.system_scope()
        page.set_context(system)
        page.set_course(Course(id=5))
        assert page.context == system

    def test_format_body_class(self, page: RequestPageContext) -> None:
        page.set_course(Course(id=10, category=7, format="weeks"))
        assert page.has_body_class("format-weeks")

    def test_site_course_format_class(
        self, page: RequestPageContext, site: Course
    ) -> None:
        page.set_course(site)
        assert page.has_body_class("format-site")

    def test_change_clears_category_chain(self, page: RequestPageContext) -> None:
        page.set_course(Course(id=11, category=4))
        assert [c.id for c in page.categories] == [4, 1]
        page.set_course(Course(id=10, category=7))
        assert [c.id for c in page.categories] == [7, 4, 1]

    def test_same_course_keeps_category_chain(self, page: RequestPageContext) -> None:
        page.set_course(Course(id=11, category=4))
        first = page.categories
        page.set_course(Course(id=11, category=4))
        assert page.categories == first


class TestModule:
    def test_auto_resolves_course(self, page: RequestPageContext) -> None:
        page.set_module(CourseModule(id=20, course=10, instance=3, modname="forum"))
        assert page.course.id == 10
        assert isinstance(page.module, CanonicalModule)
        assert page.module.name == "News"
        assert page.activity_name == "forum"

    def test_sets_module_scope(self, page: RequestPageContext) -> None:
        page.set_module(CourseModule(id=20, course=10))
        assert page.context.level is ScopeLevel.MODULE
        assert page.context.instance_id == 20

    def test_keeps_block_scope(self, page: RequestPageContext) -> None:
        scopes: Any = page.services.scopes
        module_scope = scopes.module_scope(20, course_id=10)
        block_scope = scopes.block_scope(99, module_scope)
        page.set_context(block_scope)
        page.set_module(CourseModule(id=20, course=10))
        assert page.context == block_scope

    def test_mismatch_with_current_course_rejected(
        self, page: RequestPageContext
    ) -> None:
        page.set_course(Course(id=11, category=4))
        with pytest.raises(PreconditionViolation):
            page.set_module(CourseModule(id=20, course=10))
        assert page.module is None
        assert page.course.id == 11

    def test_explicit_course_must_match(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.set_module(CourseModule(id=20, course=10), course=Course(id=11))

    def test_explicit_matching_course_overrides_current(
        self, page: RequestPageContext, courses: Any
    ) -> None:
        page.set_course(Course(id=11, category=4))
        page.set_module(CourseModule(id=20, course=10), course=courses.get_by_id(10))
        assert page.course.id == 10
        assert page.module is not None and page.module.id == 20

    def test_unknown_course_propagates_not_found(
        self, page: RequestPageContext
    ) -> None:
        with pytest.raises(NotFound):
            page.set_module(CourseModule(id=30, course=404))

    def test_unknown_module_leaves_page_untouched(
        self, page: RequestPageContext
    ) -> None:
        with pytest.raises(NotFound):
            page.set_module(CourseModule(id=99, course=10))
        assert page.explicit_course is None
        assert page.module is None
        page.set_module(CourseModule(id=20, course=10))
        assert page.course.id == 10

    def test_invalid_module_rejected(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.set_module(CourseModule(id=0, course=10))

    def test_activity_record_lazy_loaded(self, page: RequestPageContext) -> None:
        page.set_module(CourseModule(id=20, course=10))
        record = page.activity_record
        assert record is not None and record.name == "News"
        assert page.activity_record is record

    def test_activity_record_none_without_module(
        self, page: RequestPageContext
    ) -> None:
        assert page.activity_record is None

    def test_explicit_activity_record_checked(self, page: RequestPageContext) -> None:
        page.set_module(
            CourseModule(id=20, course=10),
            record=ActivityRecord(id=3, course=10, name="Given"),
        )
        assert page.activity_record is not None
        assert page.activity_record.name == "Given"
        with pytest.raises(PreconditionViolation):
            page.set_activity_record(ActivityRecord(id=4, course=10))

    def test_activity_record_requires_module(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.set_activity_record(ActivityRecord(id=3, course=10))


class TestContextScope:
    def test_unset_defaults_to_system_with_warning(
        self, page: RequestPageContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="fastapi_page_context.context"):
            scope = page.context
        assert scope.level is ScopeLevel.SYSTEM
        assert "was not set" in caplog.text

    def test_none_sets_system_when_unset(self, page: RequestPageContext) -> None:
        page.set_context(None)
        assert page.context.level is ScopeLevel.SYSTEM

    def test_none_keeps_existing(self, page: RequestPageContext) -> None:
        course_scope = page.services.scopes.course_scope(5)
        page.set_context(course_scope)
        page.set_context(None)
        assert page.context == course_scope

    def test_safe_transition_not_flagged(
        self, page: RequestPageContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        scopes = page.services.scopes
        page.set_context(scopes.system_scope())
        with caplog.at_level(logging.WARNING, logger="fastapi_page_context.context"):
            page.set_context(scopes.course_scope(5))
        assert "Unsupported modification" not in caplog.text

    def test_module_to_child_block_not_flagged(
        self, page: RequestPageContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        scopes: Any = page.services.scopes
        module_scope = scopes.module_scope(20, course_id=10)
        page.set_context(module_scope)
        with caplog.at_level(logging.WARNING, logger="fastapi_page_context.context"):
            page.set_context(scopes.block_scope(99, module_scope))
        assert "Unsupported modification" not in caplog.text

    def test_suspicious_transition_warns_but_applies(
        self, page: RequestPageContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        scopes = page.services.scopes
        page.set_context(scopes.module_scope(20))
        category_scope = scopes.category_scope(7)
        with caplog.at_level(logging.WARNING, logger="fastapi_page_context.context"):
            page.set_context(category_scope)
        assert "Unsupported modification of page context from module to category" in (
            caplog.text
        )
        assert page.context == category_scope


class TestCategories:
    def test_root_category_course_has_empty_chain(
        self, page: RequestPageContext
    ) -> None:
        page.set_course(Course(id=5, category=0))
        assert page.categories == []
        assert page.category is None

    def test_chain_immediate_parent_first(self, page: RequestPageContext) -> None:
        page.set_course(Course(id=10, category=7))
        assert page.category is not None and page.category.id == 7
        assert [c.id for c in page.categories] == [7, 4, 1]

    def test_immediate_category_known_before_ancestors(
        self, page: RequestPageContext, categories: Any
    ) -> None:
        calls: list[list[int]] = []
        original = categories.list_by_ids

        def tracking(ids: Any) -> Any:
            calls.append(list(ids))
            return original(ids)

        categories.list_by_ids = tracking
        page.set_course(Course(id=10, category=7))
        assert page.category_ids == [7, 4, 1]
        assert calls == []
        page.categories
        page.categories
        assert calls == [[4, 1]]

    def test_requires_course(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.categories

    def test_unknown_category_not_found(self, page: RequestPageContext) -> None:
        page.set_course(Course(id=12, category=404))
        with pytest.raises(NotFound):
            page.categories

    def test_set_category_by_id(self, page: RequestPageContext) -> None:
        page.set_category_by_id(7)
        assert page.course.id == page.services.site.id
        assert page.explicit_course is not None
        assert page.context.level is ScopeLevel.CATEGORY
        assert page.context.instance_id == 7
        assert [c.id for c in page.categories] == [7, 4, 1]

    def test_set_category_twice_rejected(self, page: RequestPageContext) -> None:
        page.set_category_by_id(7)
        with pytest.raises(PreconditionViolation, match="already set"):
            page.set_category_by_id(4)

    def test_unknown_category_can_be_retried(self, page: RequestPageContext) -> None:
        with pytest.raises(NotFound):
            page.set_category_by_id(999)
        assert page.explicit_course is None
        page.set_category_by_id(7)
        assert page.context.instance_id == 7

    def test_set_category_after_course_rejected(
        self, page: RequestPageContext
    ) -> None:
        page.set_course(Course(id=5))
        with pytest.raises(PreconditionViolation):
            page.set_category_by_id(7)


class TestUrl:
    def test_root_relative_expanded(self, page: RequestPageContext) -> None:
        page.set_url("/course/view.php", {"id": 5})
        assert str(page.url) == "http://lms.test/course/view.php?id=5"
        assert page.has_set_url()

    def test_absolute_accepted(self, page: RequestPageContext) -> None:
        page.set_url("http://lms.test/my/")
        assert page.url.path == "/my/"
        assert page.page_type == "my-index"

    def test_malformed_rejected(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.set_url("course/view.php")

    def test_page_type_derived_from_first_url(self, page: RequestPageContext) -> None:
        page.set_url("/course/view.php", {"id": 5})
        assert page.page_type == "course-view"
        page.set_url("/mod/forum/view.php")
        assert page.page_type == "course-view"

    def test_page_type_derived_after_lazy_handles(self, make_page: Any) -> None:
        page = make_page(script="/index.php")
        page.blocks
        page.navigation
        page.set_url("/course/view.php", {"id": 5})
        assert page.page_type == "course-view"

    def test_explicit_page_type_not_overwritten(
        self, page: RequestPageContext
    ) -> None:
        page.set_page_type("course-view-weeks")
        page.set_url("/course/view.php")
        assert page.page_type == "course-view-weeks"

    def test_site_index_page_type(self, page: RequestPageContext) -> None:
        page.set_url("/index.php")
        assert page.page_type == "site-index"

    def test_page_type_from_script(self, make_page: Any) -> None:
        page = make_page(script="/admin/settings.php")
        assert page.page_type == "admin-settings"
        assert page.body_id == "page-admin-settings"
        assert page.docs_path == "admin/settings"

    def test_foreign_url_warns(
        self, page: RequestPageContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="fastapi_page_context.context"):
            page.set_url("https://elsewhere.test/page.php")
        assert "does not match the site root" in caplog.text

    def test_unset_url_falls_back_to_request_without_sesskey(
        self, make_page: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        page = make_page(request_url="http://lms.test/blocks/edit.php?id=3&sesskey=abc")
        with caplog.at_level(logging.WARNING, logger="fastapi_page_context.context"):
            url = page.url
        assert str(url) == "http://lms.test/blocks/edit.php?id=3"
        assert "did not call set_url" in caplog.text

    def test_ensure_param_not_in_url(self, page: RequestPageContext) -> None:
        page.set_url("/course/view.php", {"id": 5, "bui_editid": 9})
        page.ensure_param_not_in_url("bui_editid")
        assert "bui_editid" not in page.url.query

    def test_frozen_after_output(self, page: RequestPageContext) -> None:
        _start_output(page)
        with pytest.raises(PreconditionViolation):
            page.set_url("/other.php")


class TestDisplayAndFlags:
    def test_title_appends_site_name(self, page: RequestPageContext) -> None:
        page.set_title("<b>Grades</b>")
        assert page.title == "Grades | Test LMS"

    def test_title_without_site_name(self, page: RequestPageContext) -> None:
        page.set_title('Say "hi"', append_site_name=False)
        assert page.title == "Say &quot;hi&quot;"

    def test_subpage_normalised(self, page: RequestPageContext) -> None:
        page.set_subpage(None)
        assert page.subpage == ""
        page.set_subpage("tab2")
        assert page.subpage == "tab2"

    def test_heading_menu_and_focus_settable_after_output(
        self, page: RequestPageContext
    ) -> None:
        _start_output(page)
        page.set_heading_menu("<menu/>")
        page.set_focus_control("id_name")
        assert page.heading_menu == "<menu/>"
        assert page.focus_control == "id_name"

    def test_periodic_refresh_only_before_output(
        self, page: RequestPageContext
    ) -> None:
        page.set_periodic_refresh_delay(30)
        assert page.periodic_refresh_delay == 30
        _start_output(page)
        with pytest.raises(PreconditionViolation):
            page.set_periodic_refresh_delay(10)

    def test_independent_flags(self, page: RequestPageContext) -> None:
        page.set_cacheable(False)
        page.set_popup_notifications_allowed(False)
        page.set_show_course_index(False)
        page.set_secondary_navigation(False, tablist=True)
        page.set_navigation_overflow(False)
        page.set_region_settings_in_header_actions(True)
        page.force_settings_menu()
        assert page.cacheable is False
        assert page.popup_notifications_allowed is False
        assert page.show_course_index is False
        assert page.has_secondary_navigation is False
        assert page.has_tablist_secondary_navigation is True
        assert page.navigation_overflow is False
        assert page.region_settings_in_header_actions is True
        assert page.settings_menu_forced is True

    def test_active_tabs_and_header_actions(self, page: RequestPageContext) -> None:
        page.set_primary_active_tab("home")
        page.set_secondary_active_tab("grades")
        page.add_header_action("<button/>")
        assert page.primary_active_tab == "home"
        assert page.secondary_active_tab == "grades"
        assert page.header_actions == ["<button/>"]

    def test_debug_summary(self, page: RequestPageContext) -> None:
        page.set_url("/course/view.php")
        page.set_subpage("s1")
        summary = page.debug_summary()
        assert "General type: base." in summary
        assert "Page type course-view." in summary
        assert "Sub-page s1." in summary


class TestEditing:
    def test_editing_capabilities(self, page: RequestPageContext) -> None:
        page.add_editing_capability("course:manageactivities")
        page.add_editing_capability(["course:manageactivities", "course:update"])
        assert page.editing_capabilities == frozenset(
            {"site:manageblocks", "course:manageactivities", "course:update"}
        )

    def test_user_is_editing(self, make_page: Any, editor: Any) -> None:
        page = make_page(user=editor)
        assert page.user_is_editing() is True
        assert page.user_can_edit_blocks() is True

    def test_editing_needs_capability(self, make_page: Any, editor: Any) -> None:
        page = make_page(user=editor)
        page.set_blocks_editing_capability("site:config")
        assert page.user_allowed_editing() is False
        assert page.user_is_editing() is False

    def test_lock_all_blocks(self, make_page: Any, editor: Any) -> None:
        page = make_page(user=editor)
        page.lock_all_blocks()
        assert page.force_lock_all_blocks is True
        assert page.user_can_edit_blocks() is False


class TestLazyHandles:
    def test_blocks_cached(self, page: RequestPageContext) -> None:
        assert page.blocks is page.blocks

    def test_navigation_variants_cached_and_distinct(
        self, page: RequestPageContext
    ) -> None:
        handles = [
            page.navigation,
            page.navbar,
            page.settings_navigation,
            page.flat_navigation,
            page.primary_navigation,
            page.secondary_navigation,
        ]
        assert len({id(h) for h in handles}) == 6
        assert page.navigation is handles[0]
        assert page.secondary_navigation is handles[5]

    def test_factory_called_once(self, page: RequestPageContext) -> None:
        calls: list[Any] = []

        class _Factory:
            def create(self, kind: Any, page: RequestPageContext) -> object:
                calls.append(kind)
                return object()

        page.services.navigation = _Factory()
        page.settings_navigation
        page.settings_navigation
        assert len(calls) == 1

    def test_secondary_navigation_replaceable(self, page: RequestPageContext) -> None:
        custom = object()
        page.set_secondary_navigation_handle(custom)
        assert page.secondary_navigation is custom

    def test_requires_cached(self, page: RequestPageContext) -> None:
        page.requires.require_js("/lib/a.js")
        assert page.requires.js_urls == ["/lib/a.js"]

    def test_fragment_collection_requires_theme(self, page: RequestPageContext) -> None:
        with pytest.raises(PreconditionViolation):
            page.start_collecting_javascript_requirements()

    def test_fragment_collection_swaps_collector(
        self, page: RequestPageContext
    ) -> None:
        page.set_context(page.services.scopes.system_scope())
        page.requires.require_js("/lib/page.js")
        page.initialise_theme_and_output()
        page.start_collecting_javascript_requirements()
        assert page.requires.fragment is True
        page.requires.require_js("/lib/fragment.js")
        with pytest.raises(PreconditionViolation):
            page.start_collecting_javascript_requirements()
        page.end_collecting_javascript_requirements()
        assert page.requires.js_urls == ["/lib/page.js"]
        with pytest.raises(PreconditionViolation):
            page.end_collecting_javascript_requirements()


class TestScenarios:
    def test_course_page_with_root_category(self, page: RequestPageContext) -> None:
        page.set_url("/course/view.php", {"id": 5})
        assert page.page_type == "course-view"
        page.set_course(Course(id=5, category=0))
        assert page.categories == []

    def test_category_page(self, page: RequestPageContext) -> None:
        page.set_category_by_id(7)
        assert page.course.id == page.services.site.id
        assert page.context == page.services.scopes.category_scope(7)
        with pytest.raises(PreconditionViolation, match="category already set"):
            page.set_category_by_id(7)
