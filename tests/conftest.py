"""
Shared pytest fixtures.

Repositories and the HTTP layer run against an in-memory SQLite database
shared through a StaticPool, so every session sees the same data.
"""

import os

# Must be set before app.core.config is imported.
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["REDIS_URL"] = ""

from contextlib import contextmanager  # noqa: E402
from typing import Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.domain.marketplace.ports import TransactionManager  # noqa: E402
from app.infrastructure.marketplace.database import (  # noqa: E402
    SqlAlchemyTransactionManager,
    build_session_factory,
)
from app.infrastructure.marketplace.models import Base  # noqa: E402


class RecordingTransactionManager(TransactionManager):
    """In-memory TransactionManager that counts commits and rollbacks."""

    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        except Exception:
            if self._depth == 1:
                self.rollbacks += 1
            raise
        else:
            if self._depth == 1:
                self.commits += 1
        finally:
            self._depth -= 1


@pytest.fixture
def fake_tx() -> RecordingTransactionManager:
    return RecordingTransactionManager()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def tx(session) -> SqlAlchemyTransactionManager:
    return SqlAlchemyTransactionManager(session)


@pytest.fixture
def client(session_factory):
    """TestClient whose requests each get a fresh session on the test database."""
    from app.interfaces.marketplace.dependencies import get_cache, get_session
    from app.main import app

    def override_get_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    get_cache().clear()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    get_cache().clear()
