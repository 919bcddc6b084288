"""WebSocket handlers for the application."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Annotated

from fastapi import Depends, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, TypeAdapter, ValidationError
from starlette.websockets import WebSocketState

from quickwords.config import Settings, get_settings
from quickwords.dependencies import get_generation_controller, get_preferences
from quickwords.models import (
    ClearMessage,
    DismissErrorMessage,
    ErrorKind,
    ErrorResponse,
    GenerateMessage,
    MessageIn,
    PreferencesFrame,
    PrewarmMessage,
    SetMaxTurnsMessage,
    StateFrame,
)
from quickwords.preferences import Preferences
from quickwords.services.generation import ERROR_MESSAGES, GenerationController

logger = logging.getLogger(__name__)

_message_adapter: TypeAdapter[MessageIn] = TypeAdapter(MessageIn)


async def websocket_endpoint(
    websocket: WebSocket,
    controller: Annotated[GenerationController, Depends(get_generation_controller)],
    preferences: Annotated[Preferences, Depends(get_preferences)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Main WebSocket workflow: topic → generation turns → streamed word lists."""

    await websocket.accept()
    should_close = True
    logger.info(
        "WebSocket connection accepted",
        extra={"client": _client_repr(websocket)},
    )

    outbox: asyncio.Queue[BaseModel] = asyncio.Queue()
    unsubscribe = controller.subscribe(lambda state: outbox.put_nowait(StateFrame(state=state)))
    sender = asyncio.create_task(_drain(websocket, outbox))
    runs: set[asyncio.Task[None]] = set()

    try:
        await controller.check_availability()

        while True:
            try:
                message = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.ws_inactivity_timeout,
                )
            except asyncio.TimeoutError:
                logger.info(
                    "WebSocket inactive; closing",
                    extra={"client": _client_repr(websocket)},
                )
                await _flush(outbox, sender)
                await websocket.close(code=status.WS_1000_NORMAL_CLOSURE)
                should_close = False
                break
            except WebSocketDisconnect:
                logger.info(
                    "WebSocket client disconnected",
                    extra={"client": _client_repr(websocket)},
                )
                should_close = False
                break

            try:
                payload = _message_adapter.validate_json(message)
            except ValidationError:
                outbox.put_nowait(
                    ErrorResponse(error="invalid_payload", detail="Invalid JSON payload.")
                )
                continue

            if isinstance(payload, GenerateMessage):
                topic = payload.topic.strip()
                detail = _validate_topic(topic, settings)
                if detail is not None:
                    outbox.put_nowait(ErrorResponse(error="validation_error", detail=detail))
                    continue
                if not controller.state.model_available:
                    outbox.put_nowait(
                        ErrorResponse(
                            error=ErrorKind.MODEL_UNAVAILABLE.value,
                            detail=ERROR_MESSAGES[ErrorKind.MODEL_UNAVAILABLE],
                        )
                    )
                    continue
                run = asyncio.create_task(controller.generate(topic))
                runs.add(run)
                run.add_done_callback(runs.discard)
            elif isinstance(payload, ClearMessage):
                controller.clear_words()
            elif isinstance(payload, DismissErrorMessage):
                controller.clear_error()
            elif isinstance(payload, PrewarmMessage):
                controller.prewarm()
            elif isinstance(payload, SetMaxTurnsMessage):
                preferences.max_turns = payload.max_turns
                outbox.put_nowait(PreferencesFrame(max_turns=preferences.max_turns))
    finally:
        unsubscribe()
        pending = [sender, *runs]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if should_close and websocket.application_state == WebSocketState.CONNECTED:
            with suppress(RuntimeError, WebSocketDisconnect):
                await websocket.close()
        logger.info(
            "WebSocket connection closed",
            extra={"client": _client_repr(websocket)},
        )


def _validate_topic(topic: str, settings: Settings) -> str | None:
    """Return a user-facing reason the topic is rejected, or ``None``."""

    if not topic:
        return "Topic must not be empty."
    if len(topic) > settings.max_topic_length:
        return f"Topic length exceeds limit of {settings.max_topic_length} characters."
    if len(topic.split()) > settings.max_topic_words:
        return f"You can only enter up to {settings.max_topic_words} words."
    return None


async def _drain(websocket: WebSocket, outbox: asyncio.Queue[BaseModel]) -> None:
    """Forward queued frames to the client in order."""

    while True:
        frame = await outbox.get()
        try:
            await websocket.send_text(frame.model_dump_json())
        finally:
            outbox.task_done()


async def _flush(outbox: asyncio.Queue[BaseModel], sender: asyncio.Task[None]) -> None:
    """Wait until every queued frame has been sent, unless the sender died."""

    if sender.done():
        return
    joined = asyncio.create_task(outbox.join())
    await asyncio.wait({joined, sender}, return_when=asyncio.FIRST_COMPLETED)
    joined.cancel()


def _client_repr(websocket: WebSocket) -> str:
    """Render the remote client for logging purposes."""

    client = websocket.client
    if client is None:
        return "unknown"
    return f"{client.host}:{client.port}"
