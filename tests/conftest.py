"""Pytest configuration and fixtures for VoiceScribe tests."""

import json
import uuid
import asyncio
import logging
import tempfile
from typing import Any, Dict, List, Optional

import pytest
from pubsub import pub

from voicescribe.ai import AIProviderError
from voicescribe.config import VoiceScribeConfig
from voicescribe.models import LanguageDetection, TextEnhancement
from voicescribe.recognition.base import AbstractRecognizer, RecognitionListener
from voicescribe.recognition.publisher import SessionPublisher


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class FakeEngine:
    """Completion engine returning queued replies and recording prompts."""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    async def send_prompt(self, prompt: str, system_prompt: Optional[str] = None,
                          json_mode: bool = False, **kwargs) -> str:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "json_mode": json_mode})
        if not self.replies:
            raise AIProviderError("No reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


class ScriptedRecognizer(AbstractRecognizer):
    """Recognizer driven by the test through the stored listener."""

    def __init__(self, available: bool = True, fail_start: bool = False):
        super().__init__()
        self.available = available
        self.fail_start = fail_start
        self.starts: List[str] = []
        self.stops = 0

    def is_available(self) -> bool:
        return self.available

    async def start(self, language: str, listener: RecognitionListener) -> None:
        if self.fail_start:
            raise RuntimeError("microphone busy")
        self.language = language
        self.listener = listener
        self.starts.append(language)
        listener.on_start()

    async def stop(self) -> None:
        self.stops += 1


class FakeEnricher:
    """Enricher whose replies are futures the test resolves when it wants."""

    def __init__(self):
        self.detect_calls: List[str] = []
        self.enhance_calls: List[str] = []
        self.enhance_targets: List[Optional[str]] = []
        self.detections: List[asyncio.Future] = []
        self.enhancements: List[asyncio.Future] = []

    async def detect_language(self, text: str) -> LanguageDetection:
        self.detect_calls.append(text)
        future = asyncio.get_running_loop().create_future()
        self.detections.append(future)
        return await future

    async def enhance_text(self, text: str, target_language: Optional[str] = None) -> TextEnhancement:
        self.enhance_calls.append(text)
        self.enhance_targets.append(target_language)
        future = asyncio.get_running_loop().create_future()
        self.enhancements.append(future)
        return await future


class EventCollector:
    """Subscribes to a session topic and keeps everything it receives."""

    def __init__(self, topic: str):
        self.topic = topic
        self.snapshots = []
        self.notifications = []
        pub.subscribe(self.on_state, f"{topic}.state")
        pub.subscribe(self.on_notification, f"{topic}.notification")

    def on_state(self, snapshot):
        self.snapshots.append(snapshot)

    def on_notification(self, notification):
        self.notifications.append(notification)

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]

    def close(self) -> None:
        pub.unsubscribe(self.on_state, f"{self.topic}.state")
        pub.unsubscribe(self.on_notification, f"{self.topic}.notification")
        pub.getDefaultTopicMgr().delTopic(self.topic)


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def recognizer():
    return ScriptedRecognizer()


@pytest.fixture
def enricher():
    return FakeEnricher()


@pytest.fixture
def session_topic():
    """Unique pubsub topic per test."""
    return f"test.s{uuid.uuid4().hex}"


@pytest.fixture
def collector(session_topic):
    events = EventCollector(session_topic)
    yield events
    events.close()


@pytest.fixture
def publisher(session_topic, collector):
    return SessionPublisher(session_topic)


@pytest.fixture
def test_config(temp_data_dir):
    """Configuration with fast timers and a temporary data directory."""
    return VoiceScribeConfig(overrides={
        "storage": {"data_directory": temp_data_dir},
        "session": {
            "restart_delay_seconds": 0.01,
            "tick_interval_seconds": 0.05,
            "audio_level_interval_seconds": 0.02,
        },
        "logging": {"file_path": f"{temp_data_dir}/logs/test.log"},
    })


@pytest.fixture
def make_engine():
    """Factory for engines preloaded with replies."""
    return FakeEngine
