"""Pydantic models shared across application layers."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ErrorKind(str, Enum):
    """Failure modes a generation run can end in."""

    MODEL_UNAVAILABLE = "model_unavailable"
    CONTEXT_EXHAUSTED = "context_exhausted"
    UNSUPPORTED_INPUT = "unsupported_input"
    GENERIC_FAILURE = "generic_failure"


class GenerationOptions(BaseModel):
    """Sampling options passed to the text model on every turn."""

    temperature: float = 1.5
    max_tokens: int | None = Field(default=None, gt=0)


class GenerationRequest(BaseModel):
    """A single turn of a run."""

    model_config = ConfigDict(frozen=True)

    topic: str
    turn_index: int = Field(ge=0)
    max_turns: int = Field(ge=1)

    @property
    def is_first_turn(self) -> bool:
        return self.turn_index == 0

    @property
    def prompt(self) -> str:
        # Repeating the first prompt verbatim makes the model echo its earlier answer.
        if self.is_first_turn:
            return f"Generate related words for: {self.topic}"
        return f"Generate more related words for: {self.topic}"


class GenerationState(BaseModel):
    """Snapshot published to observers after every change."""

    model_config = ConfigDict(frozen=True)

    words: tuple[str, ...] = ()
    is_generating: bool = False
    current_topic: str = ""
    last_error: ErrorKind | None = None
    error_message: str | None = None
    model_available: bool = False


class GenerateMessage(BaseModel):
    action: Literal["generate"]
    topic: str = Field(min_length=1, description="Word or short phrase to expand.")


class ClearMessage(BaseModel):
    action: Literal["clear"]


class DismissErrorMessage(BaseModel):
    action: Literal["dismiss_error"]


class PrewarmMessage(BaseModel):
    action: Literal["prewarm"]


class SetMaxTurnsMessage(BaseModel):
    action: Literal["set_max_turns"]
    max_turns: int


# Incoming WebSocket payload, dispatched on "action".
MessageIn = Annotated[
    Union[
        GenerateMessage,
        ClearMessage,
        DismissErrorMessage,
        PrewarmMessage,
        SetMaxTurnsMessage,
    ],
    Field(discriminator="action"),
]


class StateFrame(BaseModel):
    """State frame pushed to WebSocket clients."""

    type: Literal["state"] = "state"
    state: GenerationState


class ErrorResponse(BaseModel):
    """Error frame returned to WebSocket clients."""

    error: str
    detail: str | None = None


class PreferencesFrame(BaseModel):
    """Acknowledges a preference change."""

    type: Literal["preferences"] = "preferences"
    max_turns: int
