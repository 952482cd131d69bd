"""
FastAPI application entrypoint for the session bridge.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from stayreal.api.routes import bridge_command_error_handler, router as api_router
from stayreal.bridge import SessionBridge
from stayreal.core.config import AppSettings, get_settings
from stayreal.core.errors import BridgeCommandError
from stayreal.core.logging import configure_logging


def create_app(
    settings: AppSettings | None = None, bridge: SessionBridge | None = None
) -> FastAPI:
    """Factory for the FastAPI application.

    When ``bridge`` is supplied the caller keeps ownership of it; otherwise a
    bridge is built from ``settings`` at startup and closed on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if bridge is not None:
            app.state.bridge = bridge
            yield
            return
        owned = SessionBridge.from_settings(settings)
        app.state.bridge = owned
        try:
            yield
        finally:
            await owned.aclose()

    app = FastAPI(
        title="StayReal Session Bridge",
        version="0.1.0",
        description="Command surface for credentials, regions and moments.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.bridge = bridge
    app.add_exception_handler(BridgeCommandError, bridge_command_error_handler)
    app.include_router(api_router, prefix="/api")
    return app


__all__ = ["create_app"]
