"""Websocket bridge between a browser tab and a live recognition session.

The browser runs the platform speech recognizer. It forwards recognizer
events and user commands over the socket; the server drives the recognizer
with control messages and streams session state and notifications back.
"""

import json
import uuid
import asyncio
import logging
from typing import Any, Dict

from aiohttp import web, WSMsgType
from pubsub import pub

from .keys import AI_SERVICE_KEY, CONFIG_KEY
from ..config import VoiceScribeConfig
from ..models.recognition import Notification, SessionSnapshot
from ..recognition.base import Enricher
from ..recognition.publisher import SessionPublisher
from ..recognition.session import RecognitionSession
from ..recognition.websocket_recognizer import WebSocketRecognizer

logger = logging.getLogger(__name__)


class LiveSessionBridge:
    """Owns one recognition session for the lifetime of one websocket."""

    def __init__(self, ws: web.WebSocketResponse, enricher: Enricher, config: VoiceScribeConfig):
        self.ws = ws
        self.outbox: asyncio.Queue = asyncio.Queue()
        self.topic = f"live.s{uuid.uuid4().hex}"
        self.publisher = SessionPublisher(self.topic)
        self.recognizer = WebSocketRecognizer(self.send)
        self.session = RecognitionSession(
            recognizer=self.recognizer,
            enricher=enricher,
            publisher=self.publisher,
            default_language=config.get('session.default_language', 'pt-BR'),
            enhanced_mode=config.get('session.enhanced_mode', True),
            enhance_min_length=config.get('session.enhance_min_length', 20),
            restart_delay=config.get('session.restart_delay_seconds', 0.5),
            tick_interval=config.get('session.tick_interval_seconds', 1.0),
            audio_level_interval=config.get('session.audio_level_interval_seconds', 0.15),
        )

    async def send(self, message: Dict[str, Any]) -> None:
        await self.outbox.put(message)

    def on_state(self, snapshot: SessionSnapshot) -> None:
        self.outbox.put_nowait({"type": "state", "state": snapshot.to_dict()})

    def on_notification(self, notification: Notification) -> None:
        self.outbox.put_nowait({"type": "notification", **notification.to_dict()})

    async def _write_loop(self) -> None:
        while True:
            message = await self.outbox.get()
            try:
                await self.ws.send_json(message)
            except ConnectionResetError:
                logger.debug("Websocket closed while sending, dropping outgoing messages")
                return

    async def run(self) -> None:
        """Serve the socket until the browser disconnects."""
        pub.subscribe(self.on_state, self.publisher.state_topic)
        pub.subscribe(self.on_notification, self.publisher.notification_topic)
        writer = asyncio.get_running_loop().create_task(self._write_loop())
        logger.info(f"Live session opened on topic {self.topic}")

        try:
            async for msg in self.ws:
                if msg.type == WSMsgType.TEXT:
                    await self.handle_message(msg.data)
                elif msg.type == WSMsgType.ERROR:
                    logger.warning(f"Websocket error: {self.ws.exception()}")
        finally:
            await self.session.close()
            pub.unsubscribe(self.on_state, self.publisher.state_topic)
            pub.unsubscribe(self.on_notification, self.publisher.notification_topic)
            pub.getDefaultTopicMgr().delTopic(self.topic)
            writer.cancel()
            await asyncio.gather(writer, return_exceptions=True)
            logger.info(f"Live session closed on topic {self.topic}")

    async def handle_message(self, data: str) -> None:
        try:
            message = json.loads(data)
        except json.JSONDecodeError:
            message = None
        if not isinstance(message, dict):
            await self.send({"type": "error", "message": "Mensagem inválida"})
            return

        kind = message.get("type")
        if kind == "hello":
            self.recognizer.available = bool(message.get("speechRecognition"))
            await self.send({"type": "state", "state": self.session.snapshot().to_dict()})
        elif kind == "command":
            await self.handle_command(message)
        elif isinstance(kind, str) and kind.startswith("recognizer."):
            try:
                self.recognizer.dispatch(message)
            except ValueError as e:
                logger.warning(f"Rejected recognizer event: {e}")
                await self.send({"type": "error", "message": "Mensagem inválida"})
        else:
            await self.send({"type": "error", "message": f"Tipo de mensagem desconhecido: {kind}"})

    async def handle_command(self, message: Dict[str, Any]) -> None:
        command = message.get("command")
        if command == "start":
            result = await self.session.start()
        elif command == "stop":
            result = await self.session.stop()
        elif command == "clear":
            self.session.clear()
            result = {"success": True}
        elif command == "switchLanguage":
            language = message.get("language")
            if not isinstance(language, str) or not language:
                await self.send({"type": "error", "message": "Idioma é obrigatório"})
                return
            result = await self.session.switch_language(language)
        elif command == "toggleEnhancedMode":
            result = {"success": True, "enhancedMode": self.session.toggle_enhanced_mode()}
        else:
            await self.send({"type": "error", "message": f"Comando desconhecido: {command}"})
            return

        await self.send({"type": "command.result", "command": command, "result": result})


async def live_session(request: web.Request) -> web.WebSocketResponse:
    ws = web.WebSocketResponse(heartbeat=30.0)
    await ws.prepare(request)

    bridge = LiveSessionBridge(ws, request.app[AI_SERVICE_KEY], request.app[CONFIG_KEY])
    await bridge.run()
    return ws
