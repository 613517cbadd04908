"""Request body validation for the persistence endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class SessionCreate(_RequestModel):
    title: str = Field(min_length=1, max_length=200)
    transcript: str = ""
    language: str = Field(default="pt-BR", min_length=2, max_length=35)
    duration_seconds: int = Field(default=0, ge=0, alias="durationSeconds")
    word_count: int = Field(default=0, ge=0, alias="wordCount")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SessionUpdate(_RequestModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    transcript: Optional[str] = None
    language: Optional[str] = Field(default=None, min_length=2, max_length=35)
    duration_seconds: Optional[int] = Field(default=None, ge=0, alias="durationSeconds")
    word_count: Optional[int] = Field(default=None, ge=0, alias="wordCount")
    metadata: Optional[Dict[str, Any]] = None

    def changes(self) -> Dict[str, Any]:
        """Fields present in the request, excluding explicit nulls."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class AnalysisCreate(_RequestModel):
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    related_topics: List[str] = Field(default_factory=list, alias="relatedTopics")
