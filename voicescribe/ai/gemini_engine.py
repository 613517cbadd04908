"""Gemini engine calling the generateContent REST endpoint."""

import logging
import asyncio
import aiohttp
from typing import Optional, Dict, Any

from .engine import AIProviderError

logger = logging.getLogger(__name__)


class GeminiEngine:
    """Engine for sending prompts to Google Gemini models."""

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash-exp",
                 base_url: str = "https://generativelanguage.googleapis.com/v1beta",
                 timeout_seconds: float = 60.0):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

        logger.info(f"GeminiEngine initialized with model: {model}")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def send_prompt(self, prompt: str, system_prompt: Optional[str] = None,
                          json_mode: bool = False, temperature: Optional[float] = None) -> str:
        """Send a prompt to Gemini and return the concatenated text parts.

        Raises:
            AIProviderError: If the API call fails or the reply has no text
        """
        data: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if system_prompt:
            data["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        generation_config: Dict[str, Any] = {}
        if json_mode:
            generation_config["responseMimeType"] = "application/json"
        if temperature is not None:
            generation_config["temperature"] = temperature
        if generation_config:
            data["generationConfig"] = generation_config

        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.endpoint, headers=headers, json=data) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise AIProviderError(f"Gemini API error: {response.status} - {error_text}")

                    result = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AIProviderError(f"Gemini request failed: {e}") from e
        except ValueError as e:
            raise AIProviderError(f"Gemini returned invalid JSON: {e}") from e

        try:
            parts = result["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIProviderError("Resposta vazia do modelo") from e

        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise AIProviderError("Resposta vazia do modelo")
        return text.strip()
