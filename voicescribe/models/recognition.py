"""Recognition event and live session state models."""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


@dataclass
class RecognitionResult:
    """One recognizer hypothesis; interim unless is_final is set."""
    transcript: str
    is_final: bool = False
    confidence: Optional[float] = None


@dataclass
class RecognitionEvent:
    """A recognizer callback carrying results from result_index onwards."""
    results: List[RecognitionResult] = field(default_factory=list)
    result_index: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecognitionEvent":
        """Build an event from the browser's SpeechRecognitionEvent payload.

        Args:
            data: Dictionary with ``resultIndex`` and ``results``; each result
                  carries ``transcript``, ``isFinal`` and optional ``confidence``.

        Raises:
            ValueError: If the payload does not have that shape
        """
        items = data.get("results") or []
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise ValueError("results must be a list of objects")

        result_index = data.get("resultIndex", 0)
        if isinstance(result_index, bool) or not isinstance(result_index, int) or result_index < 0:
            raise ValueError(f"Invalid resultIndex: {result_index!r}")

        results = [
            RecognitionResult(
                transcript=str(item.get("transcript", "")),
                is_final=bool(item.get("isFinal", False)),
                confidence=item.get("confidence"),
            )
            for item in items
        ]
        return cls(results=results, result_index=result_index)


@dataclass
class Notification:
    """User-facing message raised by the live session."""
    title: str
    description: str
    variant: str = "default"  # "default" | "destructive"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "variant": self.variant,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a recognition session at one point in time."""
    is_recording: bool
    transcript: str
    interim_text: str
    current_language: str
    detected_language: str
    confidence: float
    enhanced_mode: bool
    detected_languages: tuple
    word_count: int
    recording_time_seconds: int
    audio_level_percent: float
    version: int

    @property
    def display_text(self) -> str:
        return self.transcript + self.interim_text

    @property
    def language_count(self) -> int:
        return len(self.detected_languages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isRecording": self.is_recording,
            "transcript": self.transcript,
            "interimText": self.interim_text,
            "displayText": self.display_text,
            "currentLanguage": self.current_language,
            "detectedLanguage": self.detected_language,
            "confidence": self.confidence,
            "enhancedMode": self.enhanced_mode,
            "detectedLanguages": list(self.detected_languages),
            "languageCount": self.language_count,
            "wordCount": self.word_count,
            "recordingTime": self.recording_time_seconds,
            "audioLevel": self.audio_level_percent,
            "version": self.version,
        }
