"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import Depends, FastAPI

from quickwords import __version__
from quickwords.config import Settings, get_settings
from quickwords.dependencies import get_model_client
from quickwords.logging import configure_logging
from quickwords.preferences import Preferences
from quickwords.services.model_client import TextModelClient
from quickwords.websocket_handlers import websocket_endpoint


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create application resources during startup and clean up on shutdown."""

    settings = get_settings()
    app.state.preferences = Preferences(settings.default_max_turns)
    async with httpx.AsyncClient() as client:
        app.state.http_client = client
        yield
        del app.state.http_client


def create_app() -> FastAPI:
    """Application factory."""

    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Related Words WebSocket Service",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/version")
    async def version(settings: Settings = Depends(get_settings)) -> dict[str, str]:
        return {"version": __version__, "environment": settings.environment}

    @app.get("/availability")
    async def availability(
        model_client: TextModelClient = Depends(get_model_client),
        settings: Settings = Depends(get_settings),
    ) -> dict[str, str | bool]:
        available = await model_client.check_availability()
        return {"model": settings.chat_model, "available": available}

    app.add_api_websocket_route("/ws", websocket_endpoint)

    return app


app = create_app()
