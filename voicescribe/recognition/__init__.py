"""Live recognition module for VoiceScribe."""

from .base import AbstractRecognizer, RecognitionListener, Enricher, ABORTED_ERROR
from .heuristic import detect_language_heuristic, language_display_name, LANGUAGE_NAMES
from .publisher import SessionPublisher
from .session import RecognitionSession
from .websocket_recognizer import WebSocketRecognizer

__all__ = [
    "AbstractRecognizer",
    "RecognitionListener",
    "Enricher",
    "ABORTED_ERROR",
    "detect_language_heuristic",
    "language_display_name",
    "LANGUAGE_NAMES",
    "SessionPublisher",
    "RecognitionSession",
    "WebSocketRecognizer",
]
