"""Stored session and analysis records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any


@dataclass
class StoredSession:
    """A named transcription session persisted by the session store."""
    id: str
    title: str
    transcript: str = ""
    language: str = "pt-BR"
    duration_seconds: int = 0
    word_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used on the wire."""
        return {
            "id": self.id,
            "title": self.title,
            "transcript": self.transcript,
            "language": self.language,
            "durationSeconds": self.duration_seconds,
            "wordCount": self.word_count,
            "metadata": self.metadata,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredSession":
        return cls(
            id=data["id"],
            title=data["title"],
            transcript=data.get("transcript", ""),
            language=data.get("language", "pt-BR"),
            duration_seconds=data.get("durationSeconds", 0),
            word_count=data.get("wordCount", 0),
            metadata=data.get("metadata") or {},
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(data["updatedAt"]),
        )


@dataclass
class StoredAnalysis:
    """A saved question/answer pair, optionally attached to a session."""
    id: str
    session_id: Optional[str]
    question: str
    answer: str
    confidence: float = 0.5
    related_topics: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sessionId": self.session_id,
            "question": self.question,
            "answer": self.answer,
            "confidence": self.confidence,
            "relatedTopics": list(self.related_topics),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredAnalysis":
        return cls(
            id=data["id"],
            session_id=data.get("sessionId"),
            question=data["question"],
            answer=data["answer"],
            confidence=data.get("confidence", 0.5),
            related_topics=list(data.get("relatedTopics") or []),
            created_at=datetime.fromisoformat(data["createdAt"]),
        )
