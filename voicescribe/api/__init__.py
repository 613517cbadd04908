"""HTTP and websocket API for VoiceScribe."""

from .app import create_app
from .keys import CONFIG_KEY, AI_SERVICE_KEY, STORE_KEY
from .live import LiveSessionBridge

__all__ = [
    "create_app",
    "CONFIG_KEY",
    "AI_SERVICE_KEY",
    "STORE_KEY",
    "LiveSessionBridge",
]
