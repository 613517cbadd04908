"""Abstract recognizer and the interfaces the live session depends on."""

from abc import ABC, abstractmethod
from typing import Optional, Protocol
import logging

from ..models.analysis import LanguageDetection, TextEnhancement
from ..models.recognition import RecognitionEvent

logger = logging.getLogger(__name__)

# Error code reported when the user cancels recognition
ABORTED_ERROR = "aborted"


class RecognitionListener(Protocol):
    """Callbacks a recognizer delivers while it runs."""

    def on_start(self) -> None: ...

    def on_result(self, event: RecognitionEvent) -> None: ...

    def on_error(self, error: str) -> None: ...

    def on_end(self) -> None: ...


class Enricher(Protocol):
    """AI calls fired for finalized segments."""

    async def detect_language(self, text: str) -> LanguageDetection: ...

    async def enhance_text(self, text: str, target_language: Optional[str] = None) -> TextEnhancement: ...


class AbstractRecognizer(ABC):
    """Abstract base class for continuous speech recognizers."""

    def __init__(self):
        self.listener: Optional[RecognitionListener] = None
        self.language: Optional[str] = None

    @abstractmethod
    def is_available(self) -> bool:
        """Report whether the platform offers speech recognition."""
        pass

    @abstractmethod
    async def start(self, language: str, listener: RecognitionListener) -> None:
        """Begin continuous recognition with interim results.

        Args:
            language: Language tag the recognizer is locked to (e.g. 'pt-BR')
            listener: Receiver of start, result, error and end callbacks
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Ask the recognizer to stop; it reports on_end when it has."""
        pass
