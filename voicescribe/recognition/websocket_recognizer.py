"""Recognizer bridged to a browser's speech recognition over a websocket."""

import logging
from typing import Any, Awaitable, Callable, Dict

from .base import AbstractRecognizer, RecognitionListener
from ..models.recognition import RecognitionEvent

logger = logging.getLogger(__name__)


class WebSocketRecognizer(AbstractRecognizer):
    """Drives the browser recognizer with control messages and relays its events.

    Every start opens a new run; events tagged with an older run number are
    ignored so a late 'end' from a stopped run cannot end its successor.
    """

    def __init__(self, send: Callable[[Dict[str, Any]], Awaitable[None]], available: bool = False):
        """Initialize websocket recognizer.

        Args:
            send: Coroutine function delivering a JSON message to the browser
            available: Whether the browser reported speech recognition support
        """
        super().__init__()
        self.send = send
        self.available = available
        self.run = 0

    def is_available(self) -> bool:
        return self.available

    async def start(self, language: str, listener: RecognitionListener) -> None:
        self.run += 1
        self.language = language
        self.listener = listener
        await self.send({
            "type": "recognizer.start",
            "lang": language,
            "continuous": True,
            "interimResults": True,
            "run": self.run,
        })
        logger.debug(f"Requested browser recognizer run {self.run} in {language}")

    async def stop(self) -> None:
        await self.send({"type": "recognizer.stop", "run": self.run})

    def dispatch(self, message: Dict[str, Any]) -> bool:
        """Forward a browser recognizer event to the listener.

        Args:
            message: Parsed websocket message with a 'recognizer.*' type

        Returns:
            True if the message was delivered

        Raises:
            ValueError: If a result event is malformed
        """
        if self.listener is None:
            logger.debug(f"Dropping {message.get('type')}: recognizer not started")
            return False

        run = message.get("run")
        if run is not None and run != self.run:
            logger.debug(f"Dropping {message.get('type')} from stale run {run} (current {self.run})")
            return False

        kind = message.get("type")
        if kind == "recognizer.start":
            self.listener.on_start()
        elif kind == "recognizer.result":
            self.listener.on_result(RecognitionEvent.from_dict(message))
        elif kind == "recognizer.error":
            self.listener.on_error(str(message.get("error", "unknown")))
        elif kind == "recognizer.end":
            self.listener.on_end()
        else:
            logger.warning(f"Unknown recognizer message type: {kind}")
            return False
        return True
