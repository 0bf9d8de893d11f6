"""
patternkit studio FastAPI application.

Entry point for the studio server: preview synchronization channel, editor
API, script delivery and exports.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from studio.config import settings
from studio.routes import export as export_routes
from studio.routes import patterns as pattern_routes
from studio.routes import scripts as script_routes
from studio.routes import session as session_routes
from studio.routes import ws as ws_routes
from studio.services.patterns import pattern_registry
from studio.services.session import session

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown logic:
    - Log the bound styleguide
    - Drop every preview connection and pending request on shutdown
    """
    # Startup
    logger.info(
        "studio: starting (environment=%s, styleguide=%s, %d patterns)",
        settings.ENVIRONMENT,
        pattern_registry.styleguide,
        len(pattern_registry),
    )

    yield

    # Shutdown
    logger.info("studio: shutting down, %d previews connected", session.connection_count)
    session.close()


app = FastAPI(
    title="patternkit studio",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(ws_routes.router)
app.include_router(script_routes.router)
app.include_router(session_routes.router)
app.include_router(pattern_routes.router)
app.include_router(export_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
