"""ChatGPT engine for sending prompts and getting responses."""

import logging
import asyncio
import aiohttp
from typing import Optional, Dict, Any

from .engine import AIProviderError

logger = logging.getLogger(__name__)


class ChatGPTEngine:
    """Simple engine for sending prompts to ChatGPT and getting responses."""

    def __init__(self, api_key: str, model: str = "gpt-4",
                 base_url: str = "https://api.openai.com/v1/chat/completions",
                 timeout_seconds: float = 60.0):
        """Initialize ChatGPT engine.

        Args:
            api_key: OpenAI API key
            model: ChatGPT model to use
            base_url: Chat completions endpoint
            timeout_seconds: Total timeout for one request
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

        logger.info(f"ChatGPTEngine initialized with model: {model}")

    async def send_prompt(self, prompt: str, system_prompt: Optional[str] = None,
                          json_mode: bool = False, temperature: Optional[float] = None,
                          max_tokens: Optional[int] = None) -> str:
        """Send a prompt to ChatGPT and get the response.

        Args:
            prompt: User prompt to send to ChatGPT
            system_prompt: Optional system instructions
            json_mode: Ask the model for a JSON object reply
            temperature: Temperature for response generation (0.0 to 1.0)
            max_tokens: Maximum tokens in response

        Returns:
            Response text from ChatGPT

        Raises:
            AIProviderError: If the API call fails
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        data: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if json_mode:
            data["response_format"] = {"type": "json_object"}
        if temperature is not None:
            data["temperature"] = temperature
        if max_tokens is not None:
            data["max_tokens"] = max_tokens

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.base_url, headers=headers, json=data) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise AIProviderError(f"ChatGPT API error: {response.status} - {error_text}")

                    result = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AIProviderError(f"ChatGPT request failed: {e}") from e
        except ValueError as e:
            raise AIProviderError(f"ChatGPT returned invalid JSON: {e}") from e

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIProviderError(f"Unexpected ChatGPT response: {result}") from e

        logger.debug(f"ChatGPT replied with {len(content or '')} characters")
        return (content or "").strip()
