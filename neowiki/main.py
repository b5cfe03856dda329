#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
NeoWiki — FastAPI application factory
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neowiki.core.config import get_settings
from neowiki.core.database import create_all_tables, dispose_engine, get_session_factory, init_db
from neowiki.routes import pages, render, search
from neowiki.services.pages import list_titles
from neowiki.services.title_index import TitleIndex


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    init_db()
    await create_all_tables()   # safe: CREATE TABLE IF NOT EXISTS
    await _load_title_index(app.state.title_index)
    yield
    await dispose_engine()


async def _load_title_index(index: TitleIndex) -> None:
    async with get_session_factory()() as session:
        index.rebuild(await list_titles(session))


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A wiki rendering NamuMark-style markup to sanitized HTML.",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.title_index = TitleIndex()

    # ── CORS ──────────────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── API routers ───────────────────────────────────────────────────────

    prefix = "/api/v1"

    app.include_router(pages.router,  prefix=prefix)
    app.include_router(render.router, prefix=prefix)
    app.include_router(search.router, prefix=prefix)

    # ── Global exception handlers ─────────────────────────────────────────

    @app.exception_handler(404)
    async def not_found(request: Request, exc):
        detail = getattr(exc, "detail", None) or "Not found"
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": detail},
        )

    @app.exception_handler(500)
    async def server_error(request: Request, exc):
        log.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # ── Health check ──────────────────────────────────────────────────────

    @app.get("/api/health", tags=["system"])
    async def health():
        return {
            "status":  "ok",
            "version": settings.app_version,
            "app":     settings.app_name,
            "titles":  len(app.state.title_index),
        }

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
