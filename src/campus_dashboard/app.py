"""Main FastAPI application module.

This module initializes the FastAPI application, configures middleware
(CORS, cookie sessions, authentication) and registers all route handlers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from campus_dashboard.api.routes import (
    account,
    auth,
    calendar,
    coaching_slots,
    courses,
    docs,
    groups,
    reports,
    sessions,
    users,
)
from campus_dashboard.config import (
    API_DESCRIPTION,
    API_HOST,
    API_PORT,
    API_TITLE,
    API_VERSION,
    CORS_ALLOWED_ORIGINS,
    SESSION_COOKIE_NAME,
    SESSION_HTTPS_ONLY,
    SESSION_MAX_AGE,
    SESSION_SECRET_KEY,
)
from campus_dashboard.core.database import init_db
from campus_dashboard.core.error_handlers import setup_exception_handlers
from campus_dashboard.core.logging_config import setup_logging
from campus_dashboard.core.middleware import AuthMiddleware

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    logger.info("Starting %s %s", API_TITLE, API_VERSION)
    init_db()
    yield
    logger.info("Shutting down %s", API_TITLE)


# Initialize FastAPI application; docs are served by the admin-only docs router
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)

# Middleware added last runs first: CORS -> session cookie -> auth check
app.add_middleware(AuthMiddleware)
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET_KEY,
    session_cookie=SESSION_COOKIE_NAME,
    max_age=SESSION_MAX_AGE,
    same_site="lax",
    https_only=SESSION_HTTPS_ONLY,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Register route handlers
app.include_router(auth.router)
app.include_router(account.router)
app.include_router(courses.router)
app.include_router(sessions.router)
app.include_router(coaching_slots.router)
app.include_router(groups.router)
app.include_router(users.router)
app.include_router(reports.router)
app.include_router(calendar.router)
app.include_router(docs.router)


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """Return API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "docs": {
            "swagger": "/api-docs",
            "openapi": docs.OPENAPI_URL,
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    logger.info("API docs: http://%s:%s/api-docs (admin login required)", API_HOST, API_PORT)
    uvicorn.run("campus_dashboard.app:app", host=API_HOST, port=API_PORT, reload=True)
