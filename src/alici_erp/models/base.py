"""
Declarative base for the local storage tables.

Server data never lands in SQLite; only the client's own key/value rows
do, so the shared columns are just a surrogate key and timestamps.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

from ..utils.datetime_utils import utc_now

Base = declarative_base()


class BaseModel(Base):
    """Abstract table with id, created_at and updated_at columns."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)
