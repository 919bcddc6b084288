"""Dependency providers for the FastAPI application."""

import httpx
from fastapi import Depends
from starlette.requests import HTTPConnection

from quickwords.config import Settings, get_settings
from quickwords.models import GenerationOptions
from quickwords.preferences import Preferences
from quickwords.services.generation import GenerationController
from quickwords.services.model_client import OpenAIModelClient, TextModelClient


async def get_http_client(connection: HTTPConnection) -> httpx.AsyncClient:
    """Retrieve the shared AsyncClient from application state."""

    return connection.app.state.http_client  # type: ignore[return-value]


async def get_preferences(connection: HTTPConnection) -> Preferences:
    """Retrieve the shared preference store from application state."""

    return connection.app.state.preferences  # type: ignore[return-value]


async def get_model_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> TextModelClient:
    """Dependency provider for the text model client."""

    return OpenAIModelClient(client=client, settings=settings)


async def get_generation_controller(
    model_client: TextModelClient = Depends(get_model_client),
    preferences: Preferences = Depends(get_preferences),
    settings: Settings = Depends(get_settings),
) -> GenerationController:
    """A fresh controller per connection; each consumer owns its own run state."""

    return GenerationController(
        model_client,
        preferences,
        options=GenerationOptions(
            temperature=settings.temperature, max_tokens=settings.max_tokens
        ),
        turn_delay=settings.turn_delay,
    )
