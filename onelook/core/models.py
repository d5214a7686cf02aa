"""
Core DB models: a small key-value table backing the persisted assignment slot.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, String, DateTime, Text, select, delete

from onelook.core.db import Base, session_scope


def _utc_now() -> datetime:
    """UTC now as naive datetime for DateTime(timezone=False) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class StorageEntry(Base):
    """One named slot of the key-value store. value holds the raw serialized text."""
    __tablename__ = "storage_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=False), default=_utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=_utc_now, onupdate=_utc_now, nullable=False)


def get_entry_value(key: str) -> Optional[str]:
    """Return the raw value stored under key, or None when the slot is empty."""
    with session_scope() as session:
        row = session.execute(select(StorageEntry).where(StorageEntry.key == key)).scalars().first()
        return row.value if row else None


def set_entry_value(key: str, value: str) -> None:
    """Upsert the slot: overwrite value if key exists, insert otherwise."""
    now = _utc_now()
    with session_scope() as session:
        row = session.execute(select(StorageEntry).where(StorageEntry.key == key)).scalars().first()
        if row:
            row.value = value
            row.updated_at = now
        else:
            session.add(StorageEntry(key=key, value=value, created_at=now, updated_at=now))


def delete_entry(key: str) -> None:
    with session_scope() as session:
        session.execute(delete(StorageEntry).where(StorageEntry.key == key))

