"""
Persistent key/value storage.

Stands in for the browser's localStorage: string keys, string values,
surviving restarts. Backed by the storage_entries table.
"""

from typing import Optional

from ..models.storage_entry import StorageEntry
from .database import session_scope
from .logging_utils import get_service_logger

logger = get_service_logger(__name__)


class LocalStorage:
    """
    localStorage-style API over the storage database.

    Example:
        >>> storage = LocalStorage()
        >>> storage.set_item("token", "eyJ...")
        >>> storage.get_item("token")
        'eyJ...'
    """

    def get_item(self, key: str) -> Optional[str]:
        """Value stored under key, or None."""
        with session_scope() as session:
            entry = session.query(StorageEntry).filter_by(key=key).first()
            return entry.value if entry is not None else None

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        with session_scope() as session:
            entry = session.query(StorageEntry).filter_by(key=key).first()
            if entry is None:
                session.add(StorageEntry(key=key, value=value))
            else:
                entry.value = value
        logger.debug(f"Stored key '{key}'")

    def remove_item(self, key: str) -> None:
        """Delete key if present."""
        with session_scope() as session:
            session.query(StorageEntry).filter_by(key=key).delete()
        logger.debug(f"Removed key '{key}'")

    def clear(self) -> None:
        """Delete every stored key."""
        with session_scope() as session:
            session.query(StorageEntry).delete()


class MemoryStorage:
    """Non-persistent storage with the same API, for throwaway sessions."""

    def __init__(self):
        self._items = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()
