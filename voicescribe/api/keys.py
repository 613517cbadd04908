"""Typed application keys shared by the request handlers."""

from aiohttp import web

from ..ai.service import AIService
from ..config import VoiceScribeConfig
from ..storage.base import SessionStore

CONFIG_KEY = web.AppKey("config", VoiceScribeConfig)
AI_SERVICE_KEY = web.AppKey("ai_service", AIService)
STORE_KEY = web.AppKey("store", SessionStore)
