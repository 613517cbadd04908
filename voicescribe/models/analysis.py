"""AI enrichment result models."""

from dataclasses import dataclass, field
from typing import List, Dict, Any


@dataclass
class AnalysisResult:
    """Answer to a question asked about a transcript."""
    answer: str
    confidence: float
    related_topics: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "confidence": self.confidence,
            "relatedTopics": list(self.related_topics),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        return cls(
            answer=data["answer"],
            confidence=data["confidence"],
            related_topics=list(data.get("relatedTopics") or []),
        )


@dataclass
class LanguageDetection:
    """Detected language of a piece of text."""
    language: str       # Display name, e.g. "English (US)"
    confidence: float
    language_code: str  # e.g. "en-US", or "unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "confidence": self.confidence,
            "languageCode": self.language_code,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LanguageDetection":
        return cls(
            language=data["language"],
            confidence=data["confidence"],
            language_code=data["languageCode"],
        )


@dataclass
class TextEnhancement:
    """Grammar and punctuation corrected text."""
    enhanced_text: str
    corrections: List[str] = field(default_factory=list)
    confidence: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enhancedText": self.enhanced_text,
            "corrections": list(self.corrections),
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextEnhancement":
        return cls(
            enhanced_text=data["enhancedText"],
            corrections=list(data.get("corrections") or []),
            confidence=data["confidence"],
        )


@dataclass
class SentimentResult:
    """Sentiment rating (1 to 5 stars) of a piece of text."""
    rating: int
    confidence: float
    sentiment: str  # "positivo", "negativo" or "neutro"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rating": self.rating,
            "confidence": self.confidence,
            "sentiment": self.sentiment,
        }
