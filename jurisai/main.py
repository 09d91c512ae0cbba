"""
FastAPI application bootstrap with: \n
- Lifespan-managed initialization of the database (tables + permission catalogue) \n
- CORS configured for the frontend \n
- Versioned API routers (user, chat, document analysis, articles, admin) \n
- A handler that turns unusable sessions into 401 responses clearing the cookie \n

Environment contract (from `settings`): \n
- INIT_MODE: if 'runtime', create tables and seed permissions during app startup. \n
- FRONTEND_URL: allowed CORS origin. \n
- API_PREFIX: prefix of every API route. \n
"""

import os
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from jurisai.api.user_routes import router as user_router
from jurisai.api.chat_routes import router as chat_router
from jurisai.api.document_analysis_routes import router as document_analysis_router
from jurisai.api.article_routes import router as article_router
from jurisai.api.admin_routes import router as admin_router
from jurisai.api.utils import InvalidSessionError
from jurisai.database.config.config import settings
from jurisai.database.config.connection_engine import connection_engine, metadata
from jurisai.database.core.permission_funcs import seed_permissions
import jurisai.database.entities  # noqa: F401  registers every table on `metadata`

logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup (before yielding):
        * Ensure the upload directory exists.
        * If INIT_MODE == 'runtime':
            - Create the tables that do not exist yet.
            - Insert missing permission rows (idempotent).
    """
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)

    if settings.INIT_MODE == "runtime":
        logger.info("Creating tables and seeding permissions...")
        metadata.create_all(connection_engine)
        seed_permissions()
        logger.info("Database ready.")
    else:
        logger.info("Skipping runtime init (INIT_MODE=%s).", settings.INIT_MODE)

    yield
    logger.info("App shutting down.")


# Instantiate the FastAPI app with lifespan handler
app = FastAPI(title="JurisAI", lifespan=lifespan)
"""Instatiates a FastAPI application object
    The lifespan=lifespan argument registers a custom startup lifecycle manager that
    creates the schema and seeds the permission catalogue when INIT_MODE == 'runtime'.
"""

# -----------------------
# CORS configuration
# -----------------------
url = settings.FRONTEND_URL
"""The allowed frontend origin (URL) used for CORS configuration."""

app.add_middleware(
    CORSMiddleware,
    allow_origins=[url],      # Frontend origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidSessionError)
async def invalid_session_handler(request: Request, exc: InvalidSessionError):
    """Reject the request with 401 and remove the stale session cookie."""
    response = JSONResponse(status_code=401, content={"detail": exc.detail})
    response.delete_cookie(key=settings.COOKIE_NAME, path="/")
    return response


# -----------------------
# API routes
# -----------------------
for router in (user_router, chat_router, document_analysis_router, article_router, admin_router):
    app.include_router(router, prefix=settings.API_PREFIX)


@app.get("/health")
def health():
    return {"status": "ok"}
