"""Completion engine protocol shared by the AI providers."""

from typing import Optional, Protocol


class AIProviderError(Exception):
    """Raised when a model call fails or returns an unusable reply."""


class CompletionEngine(Protocol):
    """Protocol for engines that turn a prompt into a model reply."""

    async def send_prompt(self, prompt: str, system_prompt: Optional[str] = None,
                          json_mode: bool = False, **kwargs) -> str:
        """Send a prompt to the engine and get the response text."""
        ...
