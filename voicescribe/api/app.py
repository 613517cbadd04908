"""aiohttp application factory."""

import logging

from aiohttp import web

from .keys import CONFIG_KEY, AI_SERVICE_KEY, STORE_KEY
from .live import live_session
from .routes import routes, error_middleware
from ..ai.service import AIService
from ..config import VoiceScribeConfig
from ..storage.base import SessionStore

logger = logging.getLogger(__name__)


def create_app(config: VoiceScribeConfig, ai_service: AIService, store: SessionStore) -> web.Application:
    """Build the web application with its collaborators attached.

    Args:
        config: Application configuration
        ai_service: AI enrichment client shared by all requests
        store: Session store for sessions and analyses

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[error_middleware])
    app[CONFIG_KEY] = config
    app[AI_SERVICE_KEY] = ai_service
    app[STORE_KEY] = store

    app.add_routes(routes)
    app.router.add_get("/api/live", live_session)

    logger.info(f"Web application created with {type(store).__name__}")
    return app
