"""Abstract session store for transcription sessions and saved analyses."""

import uuid
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Dict, Any, List, Optional

from ..models.session import StoredSession, StoredAnalysis

logger = logging.getLogger(__name__)

SESSION_FIELDS = frozenset(["title", "transcript", "language", "duration_seconds", "word_count", "metadata"])
ANALYSIS_FIELDS = frozenset(["session_id", "question", "answer", "confidence", "related_topics"])


class StorageError(Exception):
    """Raised when the underlying storage cannot be read or written."""


class SessionStore(ABC):
    """CRUD persistence for sessions and their analyses.

    Lookups of missing ids return None (or False for deletes) rather than
    raising; StorageError is reserved for I/O failures. Deleting a session
    also deletes the analyses attached to it.
    """

    @abstractmethod
    def create_session(self, data: Dict[str, Any]) -> StoredSession:
        pass

    @abstractmethod
    def list_sessions(self) -> List[StoredSession]:
        pass

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[StoredSession]:
        pass

    @abstractmethod
    def update_session(self, session_id: str, changes: Dict[str, Any]) -> Optional[StoredSession]:
        pass

    @abstractmethod
    def delete_session(self, session_id: str) -> bool:
        pass

    @abstractmethod
    def create_analysis(self, data: Dict[str, Any]) -> StoredAnalysis:
        pass

    @abstractmethod
    def list_analyses(self, session_id: str) -> List[StoredAnalysis]:
        pass

    @staticmethod
    def _generate_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def _check_fields(data: Dict[str, Any], allowed: frozenset) -> None:
        unknown = set(data) - allowed
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")

    def _build_session(self, data: Dict[str, Any]) -> StoredSession:
        self._check_fields(data, SESSION_FIELDS)
        now = datetime.now()
        return StoredSession(id=self._generate_id(), created_at=now, updated_at=now, **data)

    def _apply_changes(self, session: StoredSession, changes: Dict[str, Any]) -> StoredSession:
        self._check_fields(changes, SESSION_FIELDS)
        return replace(session, updated_at=datetime.now(), **changes)

    def _build_analysis(self, data: Dict[str, Any]) -> StoredAnalysis:
        self._check_fields(data, ANALYSIS_FIELDS)
        session_id = data.get("session_id")
        if session_id is not None and self.get_session(session_id) is None:
            raise ValueError(f"Session not found: {session_id}")
        return StoredAnalysis(id=self._generate_id(), **data)
