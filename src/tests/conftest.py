"""Pytest configuration and fixtures for the client layer tests."""

import json
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import urlparse

import jwt
import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from alici_erp.models.base import Base
from alici_erp.services.app_context import create_app_context
from alici_erp.services.database import create_storage_engine
from alici_erp.services.local_storage import MemoryStorage
from alici_erp.utils.config import Config, reset_config

API_PREFIX = "/api"
TEST_RATE = Decimal("36.5")
SIGNING_KEY = "alici-erp-test-signing-key-0123456789abcdef"


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean storage database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Points the module-level session factory at it
    3. Drops the table and restores the factory afterwards
    """
    engine = create_storage_engine("sqlite:///:memory:")

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import alici_erp.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Each test starts from the default configuration."""
    for name in (
        "ALICI_ERP_API_URL",
        "ALICI_ERP_ENV",
        "ALICI_ERP_REQUEST_TIMEOUT",
        "ALICI_ERP_REQUEST_RETRIES",
        "ALICI_ERP_RETRY_BACKOFF",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


class FakeResponse:
    """The parts of requests.Response the client reads."""

    def __init__(self, status_code: int = 200, body: Any = None, content: Optional[bytes] = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        if content is None:
            content = json.dumps(body).encode("utf-8") if body is not None else b""
        self.content = content

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


@dataclass
class RecordedCall:
    method: str
    path: str
    params: Any
    json: Any
    headers: dict


class FakeSession:
    """
    Stand-in for requests.Session.

    Responses are registered per (method, path), where path is relative to
    the /api prefix. A registered exception is raised instead. Requests to
    unregistered routes fail the test.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method: str, path: str, body: Any = None, status_code: int = 200, content: Optional[bytes] = None, error: Exception = None):
        self.routes[(method.upper(), path)] = error or FakeResponse(status_code, body, content)

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = urlparse(url).path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        self.calls.append(RecordedCall(method, path, params, json, dict(headers or {})))
        route = self.routes.get((method.upper(), path))
        if route is None:
            raise AssertionError(f"Unexpected request: {method} {path}")
        if isinstance(route, Exception):
            raise route
        return route

    def calls_to(self, method: str, path: str):
        return [call for call in self.calls if call.method == method and call.path == path]


def make_token(expires_in: int = 3600, **claims) -> str:
    """Signed JWT for tests; the client never checks the signature."""
    payload = {"id": "u1", "username": "admin", "role": "ADMIN"}
    payload.update(claims)
    payload["exp"] = int(time.time()) + expires_in
    return jwt.encode(payload, SIGNING_KEY, algorithm="HS256")


@pytest.fixture
def api():
    return FakeSession()


@pytest.fixture
def ctx(api):
    """AppContext over the fake session, in-memory token storage and a 36.5 rate."""
    return create_app_context(
        config=Config("development"),
        storage=MemoryStorage(),
        session=api,
        exchange_rate=TEST_RATE,
        restore_session=False,
    )


@pytest.fixture
def token_factory():
    return make_token
