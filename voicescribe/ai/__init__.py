"""AI enrichment module for VoiceScribe."""

from .engine import AIProviderError, CompletionEngine
from .chatgpt_engine import ChatGPTEngine
from .gemini_engine import GeminiEngine
from .service import AIService, clamp_confidence
from ..config import VoiceScribeConfig

__all__ = [
    "AIProviderError",
    "CompletionEngine",
    "ChatGPTEngine",
    "GeminiEngine",
    "AIService",
    "clamp_confidence",
    "create_ai_service",
]


def create_ai_service(config: VoiceScribeConfig) -> AIService:
    """Build the AI service for the configured provider."""
    provider = config.get('ai.provider', 'openai')
    api_key = config.get_ai_api_key(provider)
    timeout = config.get('ai.request_timeout_seconds', 60)

    if provider == "gemini":
        engine = GeminiEngine(
            api_key=api_key,
            model=config.get('ai.gemini.model', 'gemini-2.0-flash-exp'),
            timeout_seconds=timeout,
        )
    else:
        engine = ChatGPTEngine(
            api_key=api_key,
            model=config.get('ai.openai.model', 'gpt-4'),
            timeout_seconds=timeout,
        )
    return AIService(engine)
