from .base import DEFAULT_KEY, AssignmentStore
from .file import FileStore
from .memory import MemoryStore
from .sqlite import SqlStore

__all__ = ["DEFAULT_KEY", "AssignmentStore", "FileStore", "MemoryStore", "SqlStore", "get_store"]


def get_store(backend_type: str, config: dict, logger=None):
    """Factory: return store instance for given backend type, or None if unknown."""
    config = config or {}
    key = config.get("key") or DEFAULT_KEY
    backend = (backend_type or "").lower()
    if backend == "sqlite":
        return SqlStore(key=key, logger=logger)
    if backend == "file":
        return FileStore(config.get("dir") or ".", key=key, logger=logger)
    if backend == "memory":
        return MemoryStore(key=key, logger=logger)
    return None
