# src/codegram/main.py
"""Main entry point for the CodeGram application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from codegram.api.v1 import (
    bookmarks_router,
    comments_router,
    content_router,
    follows_router,
    likes_router,
    notifications_router,
    realtime_router,
)
from codegram.core.errors import ServiceError
from codegram.core.settings import settings
from codegram.realtime import RealtimeGateway, build_message_bus
from codegram.services import ExpiredBugSweeper

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="CodeGram API",
    description="Social network for developers with real-time notifications",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers; the generic content delete route goes last
app.include_router(likes_router, prefix="/api")
app.include_router(bookmarks_router, prefix="/api")
app.include_router(follows_router, prefix="/api")
app.include_router(comments_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(content_router, prefix="/api")
app.include_router(realtime_router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.info(
        "%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.detail
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Resource already exists"})


@app.on_event("startup")
async def on_startup() -> None:
    gateway = RealtimeGateway(build_message_bus(settings))
    await gateway.start()
    app.state.gateway = gateway
    logger.info("Realtime gateway started with %s backend", settings.realtime_backend)

    sweeper = ExpiredBugSweeper()
    await sweeper.start()
    app.state.bug_sweeper = sweeper


@app.on_event("shutdown")
async def on_shutdown() -> None:
    sweeper: ExpiredBugSweeper | None = getattr(app.state, "bug_sweeper", None)
    if sweeper:
        await sweeper.stop()
    gateway: RealtimeGateway | None = getattr(app.state, "gateway", None)
    if gateway:
        await gateway.stop()
        app.state.gateway = None


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Social network for developers with real-time notifications",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("codegram.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
