"""Data models for the VoiceScribe application."""

from .analysis import AnalysisResult, LanguageDetection, TextEnhancement, SentimentResult
from .session import StoredSession, StoredAnalysis
from .recognition import RecognitionResult, RecognitionEvent, Notification, SessionSnapshot

__all__ = [
    "AnalysisResult",
    "LanguageDetection",
    "TextEnhancement",
    "SentimentResult",
    "StoredSession",
    "StoredAnalysis",
    # Live session models
    "RecognitionResult",
    "RecognitionEvent",
    "Notification",
    "SessionSnapshot",
]
