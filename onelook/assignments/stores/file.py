"""
File backend: each slot is '<key>.json' inside a directory.
"""
import os
from pathlib import Path
from typing import Optional

from .base import AssignmentStore


class FileStore(AssignmentStore):
    backend_type = "file"

    def __init__(self, directory: str, key: Optional[str] = None, logger=None):
        super().__init__(key=key, logger=logger)
        self.directory = Path(os.path.expanduser(directory))

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def read_raw(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write_raw(self, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Atomic replace
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
