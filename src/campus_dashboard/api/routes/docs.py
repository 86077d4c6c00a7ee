"""Admin-only API documentation routes.

FastAPI's built-in ``/docs`` and ``/openapi.json`` are disabled; these routes
serve the same content behind an admin check.
"""

from fastapi import APIRouter, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from fastapi.responses import HTMLResponse, JSONResponse

from campus_dashboard.config import API_DESCRIPTION, API_TITLE, API_VERSION
from campus_dashboard.core.dependencies import AdminUser

router = APIRouter(tags=["Docs"])

OPENAPI_URL = "/api/openapi.json"


def build_openapi_schema(app) -> dict:
    """Generate the OpenAPI document once and cache it on the app.

    The ``BearerAuth`` scheme comes from the current-user dependency.
    """
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=API_TITLE,
        version=API_VERSION,
        description=API_DESCRIPTION,
        routes=app.routes,
    )
    app.openapi_schema = schema
    return schema


@router.get(OPENAPI_URL, include_in_schema=False)
def openapi_json(request: Request, admin: AdminUser) -> JSONResponse:
    return JSONResponse(build_openapi_schema(request.app))


@router.get("/api-docs", include_in_schema=False)
def swagger_ui(admin: AdminUser) -> HTMLResponse:
    return get_swagger_ui_html(openapi_url=OPENAPI_URL, title=f"{API_TITLE} - Docs")
