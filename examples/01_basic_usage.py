"""
Basic usage example of fastapi-page-context.

Demonstrates:
- Building in-memory services around a site course
- Using the page context as a FastAPI dependency
- Setting course, url and title in a prepare callback
- Walking the output lifecycle in an endpoint
"""

from fastapi import Depends, FastAPI, Request

from fastapi_page_context import (
    Course,
    InMemorySessionStore,
    PageContextFactory,
    PageServices,
    PageSettings,
    PageState,
    RequestPageContext,
    page_context_dependency,
)

settings = PageSettings(wwwroot="http://localhost:8000", site_name="Demo LMS")
services = PageServices.in_memory(settings, site_name="Demo LMS")
services.courses.add(Course(id=2, fullname="Physics 101", shortname="PHY101"))

# Demo only: one session shared by every request
session = InMemorySessionStore()
factory = PageContextFactory(settings, services, session_store=lambda request: session)


async def course_page(page: RequestPageContext, request: Request) -> None:
    """Configure the page from ?id= before the endpoint runs."""
    course = page.services.courses.get_by_id(int(request.query_params.get("id", 1)))
    page.set_course(course)
    page.set_url("/course/view.php", {"id": course.id})
    page.set_title(course.fullname)


app = FastAPI(title="Basic Page Context Example")


@app.get("/course/view.php")
async def view_course(
    page: RequestPageContext = Depends(page_context_dependency(factory, course_page)),
):
    """Render a course page header."""
    theme = page.theme
    page.advance(PageState.PRINTING_HEADER)
    header = {
        "title": page.title,
        "body_id": page.body_id,
        "body_classes": page.body_classes,
        "theme": theme.name,
    }
    page.advance(PageState.IN_BODY)
    page.advance(PageState.DONE)
    return header


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl "http://localhost:8000/course/view.php?id=2"
    # curl "http://localhost:8000/course/view.php?id=99"   -> 404
