"""
Edit snapshot example.

Demonstrates:
- Session-backed pages with Starlette's SessionMiddleware
- Loading the user per request
- Capturing an edit snapshot on a module page
- Restoring the same page in a follow-up request with ?pagehash=
"""

from fastapi import Depends, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from fastapi_page_context import (
    CanonicalModule,
    Course,
    CourseModule,
    InMemoryModuleInfo,
    PageContextFactory,
    PageServices,
    PageSettings,
    RequestPageContext,
    UserState,
    edited_page_dependency,
    page_context_dependency,
)

settings = PageSettings(wwwroot="http://localhost:8000", site_name="Demo LMS")
services = PageServices.in_memory(settings)
services.courses.add(Course(id=2, fullname="Physics 101", format="weeks"))
services.modules = InMemoryModuleInfo(
    [CanonicalModule(id=7, course=2, instance=1, modname="forum", name="Announcements")]
)

EDITOR = UserState(
    id=3,
    logged_in=True,
    editing=True,
    capabilities=frozenset({"site:manageblocks"}),
)


async def load_user(request: Request) -> UserState:
    if request.headers.get("x-demo-user") == "editor":
        return EDITOR
    return UserState()


factory = PageContextFactory(settings, services, user_loader=load_user)


async def module_page(page: RequestPageContext, request: Request) -> None:
    cmid = int(request.query_params["id"])
    module = page.services.modules.get_by_id(cmid)
    page.set_module(CourseModule(id=module.id, course=module.course))
    page.set_url("/mod/forum/view.php", {"id": cmid})


app = FastAPI(title="Edit Snapshot Example")
app.add_middleware(SessionMiddleware, secret_key="change-me")


@app.get("/mod/forum/view.php")
async def view_forum(
    page: RequestPageContext = Depends(page_context_dependency(factory, module_page)),
):
    """Full page view. Editing users get a key for follow-up requests."""
    return {
        "module": page.module.name if page.module else None,
        "pagehash": page.capture_edit_snapshot(),
    }


@app.post("/lib/ajax/blocks.php")
async def move_block(page: RequestPageContext = Depends(edited_page_dependency(factory))):
    """Follow-up request that needs the same page as the view it came from."""
    return {
        "restored": page.has_set_url(),
        "url": str(page.url),
        "can_edit_blocks": page.user_can_edit_blocks(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with a cookie jar so the session survives:
    # curl -c jar -b jar -H "x-demo-user: editor" "http://localhost:8000/mod/forum/view.php?id=7"
    # curl -c jar -b jar -H "x-demo-user: editor" -X POST \
    #      "http://localhost:8000/lib/ajax/blocks.php?pagehash=<pagehash from above>"
