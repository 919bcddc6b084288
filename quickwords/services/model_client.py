"""Text model capability and its adapter for OpenAI-compatible chat completions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from quickwords.config import Settings
from quickwords.exceptions import (
    ContextExhaustedError,
    ModelClientError,
    ModelUnavailableError,
    UnsupportedInputError,
)
from quickwords.models import GenerationOptions

logger = logging.getLogger(__name__)

_CONTEXT_CODES = frozenset({"context_length_exceeded", "string_above_max_length"})
_UNSUPPORTED_CODES = frozenset(
    {"unsupported_language", "unsupported_locale", "unsupported_country_region_territory"}
)
_UNAVAILABLE_CODES = frozenset({"model_not_found", "invalid_api_key", "model_disabled"})
_UNAVAILABLE_STATUSES = frozenset({401, 403, 404})


@dataclass
class Session:
    """Conversational context: a fixed instruction plus every completed turn."""

    instructions: str
    turns: list[dict[str, str]] = field(default_factory=list)

    def messages(self, prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.instructions},
            *self.turns,
            {"role": "user", "content": prompt},
        ]

    def record(self, prompt: str, reply: str) -> None:
        self.turns.append({"role": "user", "content": prompt})
        self.turns.append({"role": "assistant", "content": reply})


class TextModelClient(Protocol):
    """Opaque capability that generates text from a prompt within a session."""

    async def check_availability(self) -> bool: ...

    def create_session(self, instructions: str) -> Session: ...

    async def respond(
        self, session: Session, prompt: str, options: GenerationOptions
    ) -> str: ...


class OpenAIModelClient:
    """Wrapper around an OpenAI-compatible chat completions endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self._base_url = settings.model_base_url.rstrip("/")

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.openai_api_key}",
            "Content-Type": "application/json",
        }

    async def check_availability(self) -> bool:
        """Return whether the configured model can be reached."""

        try:
            response = await self._client.get(
                f"{self._base_url}/models/{self._settings.chat_model}",
                headers=self._headers,
                timeout=self._settings.model_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Model availability check failed",
                extra={"status_code": exc.response.status_code},
            )
            return False
        except httpx.HTTPError as exc:
            logger.warning("Model availability check errored", exc_info=exc)
            return False
        return True

    def create_session(self, instructions: str) -> Session:
        return Session(instructions=instructions)

    async def respond(
        self, session: Session, prompt: str, options: GenerationOptions
    ) -> str:
        """Send ``prompt`` with the session history and return the reply text."""

        payload: dict[str, Any] = {
            "model": self._settings.chat_model,
            "messages": session.messages(prompt),
            "temperature": options.temperature,
        }
        if options.max_tokens is not None:
            payload["max_tokens"] = options.max_tokens

        try:
            response = await self._client.post(
                f"{self._base_url}/chat/completions",
                headers=self._headers,
                json=payload,
                timeout=self._settings.model_timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Chat completion timed out", exc_info=exc)
            raise ModelClientError("Model request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Chat completion failed",
                extra={
                    "status_code": exc.response.status_code,
                    "response_text": exc.response.text,
                },
            )
            raise _classify(exc.response) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected chat HTTP error")
            raise ModelClientError("Model request failed") from exc

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Malformed chat response", extra={"raw_response": response.text})
            raise ModelClientError("Invalid chat response payload") from exc

        if not isinstance(content, str) or not content.strip():
            raise ModelClientError("Model returned empty content")

        reply = content.strip()
        session.record(prompt, reply)
        return reply


def _classify(response: httpx.Response) -> ModelClientError:
    """Map an error response to an exception by its structured code."""

    status_code = response.status_code
    try:
        error = response.json().get("error") or {}
    except (ValueError, AttributeError):
        error = {}
    if not isinstance(error, dict):
        error = {}
    codes = {str(error.get("code") or ""), str(error.get("type") or "")}

    if codes & _CONTEXT_CODES:
        return ContextExhaustedError("Model context window exhausted", status_code=status_code)
    if codes & _UNSUPPORTED_CODES:
        return UnsupportedInputError(
            "Model does not support this language", status_code=status_code
        )
    if codes & _UNAVAILABLE_CODES or status_code in _UNAVAILABLE_STATUSES:
        return ModelUnavailableError("Model is unavailable", status_code=status_code)
    return ModelClientError("Model returned an error", status_code=status_code)
