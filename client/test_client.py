"""Simple WebSocket client for manual testing."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import time
from typing import Any

import websockets

DEFAULT_URL = "ws://127.0.0.1:8000/ws"


async def run_client(url: str, topic: str, max_turns: int | None, timeout: float) -> list[str]:
    """Connect to the WebSocket service, request a topic, and print words as they arrive."""

    logger = logging.getLogger("test_client")
    start = time.perf_counter()
    started = False
    shown = 0
    words: list[str] = []

    async with websockets.connect(url, ping_interval=None) as websocket:
        if max_turns is not None:
            await websocket.send(json.dumps({"action": "set_max_turns", "max_turns": max_turns}))
        await websocket.send(json.dumps({"action": "generate", "topic": topic}))
        logger.info("Requested related words for %r", topic)

        while True:
            message = await asyncio.wait_for(websocket.recv(), timeout=timeout)
            frame: dict[str, Any] = json.loads(message)

            if "error" in frame:
                logger.error("Received error frame: %s", frame.get("detail") or frame["error"])
                raise SystemExit(1)
            if frame.get("type") != "state":
                continue

            state = frame["state"]
            words = state["words"]
            for word in words[shown:]:
                print(word, flush=True)
            shown = len(words)

            if state["is_generating"]:
                started = True
            elif started:
                if state["last_error"]:
                    logger.error("Generation ended with error: %s", state["error_message"])
                break

    elapsed = time.perf_counter() - start
    logger.info("Received %d words in %.2fs", len(words), elapsed)
    return words


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the related words service.")
    parser.add_argument("--url", default=DEFAULT_URL, help="WebSocket URL (default: %(default)s)")
    parser.add_argument("--topic", required=True, help="Word or short phrase to expand.")
    parser.add_argument("--turns", type=int, help="Generation turns per topic (3-10).")
    parser.add_argument(
        "--timeout", type=float, default=60.0, help="Seconds to wait between frames."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        asyncio.run(run_client(args.url, args.topic, args.turns, args.timeout))
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        pass


if __name__ == "__main__":  # pragma: no cover
    main()
