"""
Database engine, sessions and the transaction manager adapter.

One SQLAlchemy session per request. Repositories share it, and the
transaction manager commits or rolls back the work they queue on it.
"""

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.domain.marketplace.errors import StorageError
from app.domain.marketplace.ports import TransactionManager
from app.infrastructure.marketplace.models import Base

logger = logging.getLogger(__name__)


def build_engine(dsn: str, **kwargs) -> Engine:
    """Build a SQLAlchemy engine with connection health checks enabled."""
    return create_engine(dsn, pool_pre_ping=True, **kwargs)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process-wide engine built from application settings."""
    dsn = settings.get_database_dsn()
    if dsn.startswith("sqlite"):
        return build_engine(dsn)
    return build_engine(
        dsn,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Build a session factory whose sessions do not expire objects on commit."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    """Create every marketplace table that does not exist yet."""
    Base.metadata.create_all(engine)
    logger.info("Database schema ensured.")


class SqlAlchemyTransactionManager(TransactionManager):
    """Implements the TransactionManager port on one SQLAlchemy session.

    The outermost transaction() commits on success and rolls back on any
    exception. Nested calls join the outer one.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth > 0:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Transaction failed: %s", exc)
            raise StorageError("commit", str(exc)) from exc
        except Exception:
            self._session.rollback()
            raise
        finally:
            self._depth = 0
