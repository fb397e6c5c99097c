"""
Local storage database for the ALICI ERP client.

Between runs the client keeps a few string values (the bearer token) in
a small SQLite file, the desktop counterpart of the browser's
localStorage. The engine is created lazily and the storage table is
created with it, so a first run on a clean machine needs no set-up step.
"""

from typing import Optional
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..utils.config import get_config
from ..models.base import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):
    """WAL journaling lets a second client process read while one writes."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_storage_engine(database_url: Optional[str] = None) -> Engine:
    """
    Create a storage engine and make sure the storage table exists.

    Args:
        database_url: SQLAlchemy URL; the configured storage file when None

    Returns:
        Engine bound to the storage database
    """
    if database_url is None:
        config = get_config()
        config.ensure_directories()
        database_url = config.storage_url

    logger.info(f"Opening local storage: {database_url}")

    if ":memory:" in database_url:
        # In-memory databases must share one connection
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url, connect_args={"check_same_thread": False, "timeout": 30})

    from ..models import storage_entry  # noqa: F401

    Base.metadata.create_all(engine)
    return engine


def get_engine() -> Engine:
    global _engine

    if _engine is None:
        _engine = create_storage_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _SessionFactory


@contextmanager
def session_scope():
    """
    Transactional scope: commits on success, rolls back on error.

    Example:
        with session_scope() as session:
            session.add(StorageEntry(key="token", value=token))
    """
    session: Session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

