"""Iterative related-word generation against a text model."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from quickwords.exceptions import ContextExhaustedError, ServiceError
from quickwords.models import ErrorKind, GenerationOptions, GenerationRequest, GenerationState
from quickwords.preferences import Preferences
from quickwords.services.accumulator import WordAccumulator
from quickwords.services.model_client import Session, TextModelClient
from quickwords.services.parser import parse_words

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "You are a helpful assistant that generates related words to a word or phrase "
    "provided to you.\n"
    "When given a word, generate as many related synonyms or associated words as you "
    "can. Aim to generate at least 25 related words. It's ok if you can't think of many "
    "words, but please try your best.\n"
    "Return only the words, separated by commas. Do not include explanations or "
    "additional text."
)

ERROR_MESSAGES = {
    ErrorKind.MODEL_UNAVAILABLE: (
        "The language model isn't available. Check that it is enabled and reachable."
    ),
    ErrorKind.UNSUPPORTED_INPUT: (
        "The language model doesn't support this language yet. Try a different word."
    ),
    ErrorKind.GENERIC_FAILURE: (
        "Something went wrong while generating words. Try again, or use fewer "
        "generation turns."
    ),
}

StateListener = Callable[[GenerationState], None]


class GenerationController:
    """Runs up to ``max_turns`` prompts per topic and publishes the words found.

    All state lives on the event loop that calls into the controller; the only
    suspension points are the model call and the pause between turns. Starting
    a new run, or clearing the words, abandons the previous run at its next
    suspension point and discards anything it returns afterwards. A new run
    waits for the abandoned one to stop before sending its first prompt.
    """

    def __init__(
        self,
        client: TextModelClient,
        preferences: Preferences,
        *,
        instructions: str = INSTRUCTIONS,
        options: GenerationOptions | None = None,
        turn_delay: float = 0.5,
    ) -> None:
        self._client = client
        self._preferences = preferences
        self._instructions = instructions
        self._options = options or GenerationOptions()
        self._turn_delay = turn_delay
        self._accumulator = WordAccumulator()
        self._session: Session | None = None
        self._session_used = False
        self._run_token = 0
        self._run_stopped: asyncio.Event | None = None
        self._listeners: list[StateListener] = []
        self._state = GenerationState()

    @property
    def state(self) -> GenerationState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for every published state; returns an unsubscribe."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def check_availability(self) -> bool:
        try:
            available = await self._client.check_availability()
        except ServiceError as exc:
            logger.warning("Availability check raised", extra={"error_code": exc.code})
            available = False

        if available:
            changes: dict[str, Any] = {"model_available": True}
            if self._state.last_error is ErrorKind.MODEL_UNAVAILABLE:
                changes.update(last_error=None, error_message=None)
            self._publish(**changes)
        else:
            logger.warning("Text model unavailable")
            self._publish(
                model_available=False,
                last_error=ErrorKind.MODEL_UNAVAILABLE,
                error_message=ERROR_MESSAGES[ErrorKind.MODEL_UNAVAILABLE],
            )
        return available

    def prewarm(self) -> None:
        """Create a fresh session ahead of the next topic."""

        if not self._state.model_available or self._state.is_generating:
            return
        if self._session is None or self._session_used:
            self._new_session()
            logger.debug("Session prewarmed")

    async def generate(self, topic: str) -> None:
        """Run the turns for ``topic``, superseding any run still in flight.

        The superseded run is allowed to stop before this run's first prompt;
        a session never has two prompts outstanding.
        """

        topic = topic.strip()
        if not topic:
            return
        if not self._state.model_available:
            logger.info("Generation refused; model unavailable", extra={"topic": topic})
            return

        self._run_token += 1
        token = self._run_token
        max_turns = self._preferences.max_turns

        previous = self._run_stopped
        stopped = asyncio.Event()
        self._run_stopped = stopped
        # The old run's late reply lands in its session; don't carry it forward.
        superseding = previous is not None and not previous.is_set()

        if topic != self._state.current_topic:
            self._accumulator.reset()
            if self._session is None or self._session_used or superseding:
                self._new_session()
            self._publish(words=(), current_topic=topic)
        elif self._session is None or superseding:
            self._new_session()

        self._publish(is_generating=True, last_error=None, error_message=None)
        logger.info("Generation started", extra={"topic": topic, "max_turns": max_turns})

        try:
            if superseding:
                await previous.wait()
            await self._run(topic, token, max_turns)
        finally:
            stopped.set()
            if token == self._run_token:
                self._publish(is_generating=False)
                logger.info(
                    "Generation finished",
                    extra={"topic": topic, "word_count": len(self._accumulator)},
                )

    def clear_words(self) -> None:
        self._accumulator.reset()
        self._publish(words=(), current_topic="")

    def clear_error(self) -> None:
        if self._state.last_error is ErrorKind.MODEL_UNAVAILABLE and not self._state.model_available:
            return
        self._publish(last_error=None, error_message=None)

    async def _run(self, topic: str, token: int, max_turns: int) -> None:
        for turn_index in range(max_turns):
            if turn_index > 0:
                await asyncio.sleep(self._turn_delay)
            if not self._is_current(topic, token):
                logger.info("Run superseded", extra={"topic": topic, "turn": turn_index})
                return

            request = GenerationRequest(topic=topic, turn_index=turn_index, max_turns=max_turns)
            if self._session is None:
                self._new_session()
            session = self._session
            self._session_used = True

            try:
                raw = await self._client.respond(session, request.prompt, self._options)
            except ContextExhaustedError:
                if not self._is_current(topic, token):
                    return
                logger.info(
                    "Context exhausted; starting a new session",
                    extra={"topic": topic, "turn": turn_index},
                )
                self._new_session()
                continue
            except ServiceError as exc:
                logger.warning(
                    "Generation turn failed",
                    extra={"topic": topic, "turn": turn_index, "error_code": exc.code},
                )
                if self._is_current(topic, token):
                    self._abort(exc.kind)
                return
            except Exception:
                logger.exception(
                    "Unexpected generation failure", extra={"topic": topic, "turn": turn_index}
                )
                if self._is_current(topic, token):
                    self._abort(ErrorKind.GENERIC_FAILURE)
                return

            if not self._is_current(topic, token):
                logger.info("Discarding stale response", extra={"topic": topic})
                return

            self._merge(parse_words(raw))

    def _merge(self, candidates: list[str]) -> None:
        for candidate in candidates:
            if self._accumulator.try_add(candidate):
                self._publish(words=self._accumulator.snapshot())

    def _abort(self, kind: ErrorKind) -> None:
        changes: dict[str, Any] = {"last_error": kind, "error_message": ERROR_MESSAGES[kind]}
        if kind is ErrorKind.MODEL_UNAVAILABLE:
            changes["model_available"] = False
        self._publish(**changes)

    def _is_current(self, topic: str, token: int) -> bool:
        return token == self._run_token and topic == self._state.current_topic

    def _new_session(self) -> None:
        self._session = self._client.create_session(self._instructions)
        self._session_used = False

    def _publish(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)
