"""
In-memory backend. Nothing survives the process; several stores may share one dict.
"""
from typing import Dict, Optional

from .base import AssignmentStore


class MemoryStore(AssignmentStore):
    backend_type = "memory"

    def __init__(self, key: Optional[str] = None, data: Optional[Dict[str, str]] = None, logger=None):
        super().__init__(key=key, logger=logger)
        self.data = data if data is not None else {}

    def read_raw(self) -> Optional[str]:
        return self.data.get(self.key)

    def write_raw(self, value: str) -> None:
        self.data[self.key] = value

    def clear(self) -> None:
        self.data.pop(self.key, None)
