"""
SQLite backend: the slot is one row of the storage_entries table.
Requires init_db() to have been called.
"""
from typing import Optional

from onelook.core.models import delete_entry, get_entry_value, set_entry_value

from .base import AssignmentStore


class SqlStore(AssignmentStore):
    backend_type = "sqlite"

    def read_raw(self) -> Optional[str]:
        return get_entry_value(self.key)

    def write_raw(self, value: str) -> None:
        set_entry_value(self.key, value)

    def clear(self) -> None:
        delete_entry(self.key)
