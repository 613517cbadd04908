"""JSON file session store.

Layout under the data directory::

    sessions/<session_id>/session.json
    sessions/<session_id>/analyses/<analysis_id>.json
    analyses/<analysis_id>.json          (analyses without a session)
"""

import os
import json
import uuid
import shutil
import logging
import tempfile
from pathlib import Path
from typing import Dict, Any, List, Optional

from .base import SessionStore, StorageError
from ..models.session import StoredSession, StoredAnalysis

logger = logging.getLogger(__name__)


def _is_valid_id(record_id: str) -> bool:
    try:
        return str(uuid.UUID(record_id)) == record_id
    except (ValueError, TypeError, AttributeError):
        return False


class FileSessionStore(SessionStore):
    """Stores every session and analysis as its own JSON file."""

    def __init__(self, data_dir: str = "./data"):
        """Initialize file store with data directory.

        Args:
            data_dir: Base directory for storing all data
        """
        self.data_dir = Path(data_dir)
        self.sessions_dir = self.data_dir / "sessions"
        self.analyses_dir = self.data_dir / "analyses"

        # Create directory structure
        self._ensure_directories()

        logger.info(f"FileSessionStore initialized with data_dir: {self.data_dir}")

    def _ensure_directories(self) -> None:
        """Ensure all required directories exist."""
        try:
            for directory in [self.data_dir, self.sessions_dir, self.analyses_dir]:
                directory.mkdir(parents=True, exist_ok=True)
                logger.debug(f"Ensured directory exists: {directory}")
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self.data_dir}: {e}") from e

    def _session_file(self, session_id: str) -> Path:
        return self.sessions_dir / session_id / "session.json"

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        """Write JSON atomically by replacing the target with a temp file."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, path)
            except BaseException:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Error writing {path}: {e}")
            raise StorageError(f"Failed to write {path}: {e}") from e

    def _read_json(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading {path}: {e}")
            raise StorageError(f"Failed to read {path}: {e}") from e

    def _load_session(self, path: Path) -> StoredSession:
        data = self._read_json(path)
        try:
            return StoredSession.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Corrupt session file {path}: {e}") from e

    def _load_analysis(self, path: Path) -> StoredAnalysis:
        data = self._read_json(path)
        try:
            return StoredAnalysis.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"Corrupt analysis file {path}: {e}") from e

    def create_session(self, data: Dict[str, Any]) -> StoredSession:
        session = self._build_session(data)
        self._write_json(self._session_file(session.id), session.to_dict())
        logger.info(f"Session saved: {session.id}")
        return session

    def list_sessions(self) -> List[StoredSession]:
        """List all readable sessions sorted by creation time."""
        sessions = []
        try:
            paths = sorted(self.sessions_dir.glob("*/session.json"))
        except OSError as e:
            raise StorageError(f"Failed to list sessions: {e}") from e

        for path in paths:
            try:
                sessions.append(self._load_session(path))
            except StorageError as e:
                logger.warning(f"Skipping unreadable session: {e}")

        sessions.sort(key=lambda s: s.created_at)
        logger.debug(f"Found {len(sessions)} sessions")
        return sessions

    def get_session(self, session_id: str) -> Optional[StoredSession]:
        if not _is_valid_id(session_id):
            return None
        path = self._session_file(session_id)
        if not path.exists():
            logger.debug(f"Session file not found: {path}")
            return None
        return self._load_session(path)

    def update_session(self, session_id: str, changes: Dict[str, Any]) -> Optional[StoredSession]:
        session = self.get_session(session_id)
        if session is None:
            return None
        updated = self._apply_changes(session, changes)
        self._write_json(self._session_file(session_id), updated.to_dict())
        logger.info(f"Session updated: {session_id}")
        return updated

    def delete_session(self, session_id: str) -> bool:
        """Delete a session directory, including its analyses."""
        if not _is_valid_id(session_id):
            return False
        session_path = self.sessions_dir / session_id
        if not self._session_file(session_id).exists():
            return False
        try:
            shutil.rmtree(session_path)
        except OSError as e:
            logger.error(f"Error deleting session {session_id}: {e}")
            raise StorageError(f"Failed to delete session {session_id}: {e}") from e
        logger.info(f"Deleted session directory: {session_path}")
        return True

    def create_analysis(self, data: Dict[str, Any]) -> StoredAnalysis:
        analysis = self._build_analysis(data)
        if analysis.session_id is not None:
            path = self.sessions_dir / analysis.session_id / "analyses" / f"{analysis.id}.json"
        else:
            path = self.analyses_dir / f"{analysis.id}.json"
        self._write_json(path, analysis.to_dict())
        logger.info(f"Analysis saved: {path}")
        return analysis

    def list_analyses(self, session_id: str) -> List[StoredAnalysis]:
        if not _is_valid_id(session_id):
            return []
        analyses_path = self.sessions_dir / session_id / "analyses"
        if not analyses_path.exists():
            return []

        analyses = []
        for path in sorted(analyses_path.glob("*.json")):
            try:
                analyses.append(self._load_analysis(path))
            except StorageError as e:
                logger.warning(f"Skipping unreadable analysis: {e}")
        analyses.sort(key=lambda a: a.created_at)
        return analyses
