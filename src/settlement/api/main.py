"""
FastAPI application entry point.

This module instantiates the FastAPI app, configures logging and CORS
from the settings and registers the API routers. When run via
``uvicorn`` the app will be served as an ASGI application.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.config import get_settings
from ..core.utils.logger import configure_logging
from .routers import negotiations as negotiations_router


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Factory for the FastAPI app."""
    settings = get_settings()
    configure_logging(settings.log_level, trace_engines=settings.trace_engines)
    app = FastAPI(title=settings.app_title, version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(negotiations_router.router)
    logger.info("Settlement Tracker API ready (env=%s)", settings.env)
    return app


def main() -> None:
    import uvicorn

    uvicorn.run("settlement.api.main:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
