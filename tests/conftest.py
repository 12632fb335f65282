"""Shared test fixtures."""

import os
import tempfile
from collections.abc import Iterable, Iterator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest
from cassandra.cluster import Session


# Settings are cached on first use: configure the environment before any
# coursetrack module is imported.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="coursetrack-logs-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")


class FakeResultSet:
    """Minimal stand-in for a cassandra ResultSet."""

    def __init__(self, rows: Iterable[Any] = ()):
        self._rows = list(rows)

    def one(self) -> Any:
        return self._rows[0] if self._rows else None

    def __iter__(self) -> Iterator[Any]:
        return iter(self._rows)


@pytest.fixture
def result_set():
    """Factory for fake result sets."""
    return FakeResultSet


@pytest.fixture
def mock_session():
    """Mock Cassandra session.

    Prepared statements are the normalized CQL text so tests can tell which
    statement a call executed.
    """
    session = Mock(spec=Session)
    session.prepare = Mock(side_effect=lambda cql: " ".join(cql.split()))
    # Make aexecute awaitable (cassandra-asyncio-driver)
    session.aexecute = AsyncMock(return_value=FakeResultSet())
    return session


@pytest.fixture
def now() -> datetime:
    """A fixed request instant."""
    return datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def tutor_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_token():
    """Create bearer tokens for a (user id, role) pair."""
    from coursetrack.auth.security import create_access_token

    def _make(user_id: UUID, role: str = "learner") -> dict[str, str]:
        token = create_access_token({"sub": str(user_id), "role": role})
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def client():
    """Test client without lifespan (no database or Redis)."""
    from fastapi.testclient import TestClient

    from coursetrack.main import app

    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
