"""Session storage for VoiceScribe."""

from .base import SessionStore, StorageError
from .memory_store import MemorySessionStore
from .file_store import FileSessionStore
from ..config import VoiceScribeConfig

__all__ = [
    "SessionStore",
    "StorageError",
    "MemorySessionStore",
    "FileSessionStore",
    "create_session_store",
]


def create_session_store(config: VoiceScribeConfig) -> SessionStore:
    """Build the store selected by 'storage.backend' (memory or file)."""
    backend = config.get('storage.backend', 'memory')
    if backend == "file":
        return FileSessionStore(config.get_data_directory())
    if backend == "memory":
        return MemorySessionStore()
    raise ValueError(f"Unknown storage backend: {backend}")
