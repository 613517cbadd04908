"""In-memory session store; contents are lost on restart."""

import logging
import threading
from typing import Dict, Any, List, Optional

from .base import SessionStore
from ..models.session import StoredSession, StoredAnalysis

logger = logging.getLogger(__name__)


class MemorySessionStore(SessionStore):
    """Keeps sessions and analyses in dictionaries."""

    def __init__(self):
        self.sessions: Dict[str, StoredSession] = {}
        self.analyses: Dict[str, StoredAnalysis] = {}
        self.lock = threading.RLock()
        logger.info("MemorySessionStore initialized")

    def create_session(self, data: Dict[str, Any]) -> StoredSession:
        with self.lock:
            session = self._build_session(data)
            self.sessions[session.id] = session
        logger.info(f"Created session: {session.id}")
        return session

    def list_sessions(self) -> List[StoredSession]:
        with self.lock:
            return sorted(self.sessions.values(), key=lambda s: s.created_at)

    def get_session(self, session_id: str) -> Optional[StoredSession]:
        with self.lock:
            return self.sessions.get(session_id)

    def update_session(self, session_id: str, changes: Dict[str, Any]) -> Optional[StoredSession]:
        with self.lock:
            session = self.sessions.get(session_id)
            if session is None:
                return None
            updated = self._apply_changes(session, changes)
            self.sessions[session_id] = updated
        logger.info(f"Updated session: {session_id}")
        return updated

    def delete_session(self, session_id: str) -> bool:
        with self.lock:
            if self.sessions.pop(session_id, None) is None:
                return False
            orphaned = [a.id for a in self.analyses.values() if a.session_id == session_id]
            for analysis_id in orphaned:
                del self.analyses[analysis_id]
        logger.info(f"Deleted session {session_id} and {len(orphaned)} analyses")
        return True

    def create_analysis(self, data: Dict[str, Any]) -> StoredAnalysis:
        with self.lock:
            analysis = self._build_analysis(data)
            self.analyses[analysis.id] = analysis
        logger.info(f"Saved analysis {analysis.id} for session {analysis.session_id}")
        return analysis

    def list_analyses(self, session_id: str) -> List[StoredAnalysis]:
        with self.lock:
            found = [a for a in self.analyses.values() if a.session_id == session_id]
        return sorted(found, key=lambda a: a.created_at)
