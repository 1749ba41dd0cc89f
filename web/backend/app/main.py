"""FastAPI application for the Joke Drop service.

Provides REST API endpoints wrapping the jokedrop package for:
- Registration, login and profiles
- The follow graph and follow suggestions
- Joke submission, listing and trending
- The moderation queue (approve/reject) and its audit trail
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Ensure the jokedrop package is importable by adding the project root to sys.path.
_project_root = str(Path(__file__).resolve().parents[3])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jokedrop import __version__
from jokedrop.errors import JokeDropError
from jokedrop.logs import configure_logging
from web.backend.app.middleware.auth import get_services
from web.backend.app.routers import accounts, jokes, moderation, social

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    services = get_services()
    configure_logging(services.settings.debug)
    logger.info(
        "Joke Drop API %s ready (storage=%s, trending=%s)",
        __version__,
        services.settings.storage,
        services.settings.trending_policy.value,
    )
    yield


app = FastAPI(
    title="Joke Drop API",
    description=(
        "REST API for Joke Drop. "
        "Provides endpoints for accounts, the follow graph, "
        "joke submission, trending and moderation."
    ),
    version=__version__,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error rendering: {"success": false, "error": "..."}
# ---------------------------------------------------------------------------


@app.exception_handler(JokeDropError)
async def jokedrop_error_handler(request: Request, exc: JokeDropError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"{location}: {message}" if location else message},
    )


# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(accounts.router)
app.include_router(social.router)
app.include_router(jokes.router)
app.include_router(moderation.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "Joke Drop API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
