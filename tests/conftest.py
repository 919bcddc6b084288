"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TURN_DELAY", "0")

from quickwords.main import create_app  # noqa: E402
from quickwords.models import GenerationOptions  # noqa: E402
from quickwords.preferences import Preferences  # noqa: E402
from quickwords.services.generation import GenerationController  # noqa: E402
from quickwords.services.model_client import Session  # noqa: E402


class FakeModelClient:
    """Scripted text model: returns (or raises) the queued items in order."""

    def __init__(self, responses: list[str | Exception] | None = None, available: bool = True) -> None:
        self.responses = list(responses or [])
        self.available = available
        self.prompts: list[str] = []
        self.sessions: list[Session] = []
        self.options: list[GenerationOptions] = []

    async def check_availability(self) -> bool:
        return self.available

    def create_session(self, instructions: str) -> Session:
        session = Session(instructions=instructions)
        self.sessions.append(session)
        return session

    async def respond(self, session: Session, prompt: str, options: GenerationOptions) -> str:
        self.prompts.append(prompt)
        self.options.append(options)
        item = self.responses.pop(0) if self.responses else ""
        if isinstance(item, Exception):
            raise item
        session.record(prompt, item)
        return item


@pytest.fixture(autouse=True)
def configure_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def make_controller() -> Callable[..., GenerationController]:
    def factory(client: FakeModelClient, max_turns: int = 5) -> GenerationController:
        preferences = Preferences()
        preferences.max_turns = max_turns
        return GenerationController(client, preferences, turn_delay=0)

    return factory
