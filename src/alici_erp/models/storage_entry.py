"""
StorageEntry model for the local key/value store.

The dashboard keeps a handful of values between runs (the bearer token
under the "token" key). Each entry is one row keyed by a unique string.
"""

from sqlalchemy import Column, String, Text

from .base import BaseModel


class StorageEntry(BaseModel):
    """
    One persisted key/value pair.

    Attributes:
        key: Unique storage key (e.g. "token")
        value: Stored string value
    """

    __tablename__ = "storage_entries"

    key = Column(String(200), nullable=False, unique=True, index=True)
    value = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"StorageEntry(key='{self.key}')"
