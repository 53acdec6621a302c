"""State Stores - concrete world-state collaborators behind the StateStore protocol.

Invariants:
    - get() returns None for an absent key (the only "absent" sentinel)
    - Every SQLAlchemy exception is mapped to StateStoreError (core/errors.py)
    - SqlStateStore commits each write in its own session; a failed write rolls back

Design Decisions:
    - MemoryStateStore for tests and dev: a dict behind a lock, no IO
    - SqlStateStore uses a synchronous engine: invocations are synchronous and
      run on the caller's thread
    - In-memory SQLite shares one connection (StaticPool) so every thread sees
      the same tables
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, select, text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from contractapi.core.errors import StateStoreError
from contractapi.db.base import Base
from contractapi.models.world_state import WorldState

logger = logging.getLogger(__name__)


class MemoryStateStore:
    """Dict-backed world state."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._data: dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def snapshot(self) -> dict[str, bytes]:
        with self._lock:
            return dict(self._data)


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_pre_ping": True}


class SqlStateStore:
    """World state in a SQL table via SQLAlchemy."""

    def __init__(self, database_url: str, create_tables: bool = True):
        self.engine = create_engine(database_url, **_engine_kwargs(database_url))
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self, operation: str) -> Iterator[Session]:
        """Session with auto-rollback; SQLAlchemy errors become StateStoreError."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            session.rollback()
            logger.error(f"State store integrity error: {e}")
            raise StateStoreError("Integrity constraint violated", operation)
        except OperationalError as e:
            session.rollback()
            logger.error(f"State store operational error: {e}")
            raise StateStoreError("Connection or operational error", operation)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"State store error: {e}")
            raise StateStoreError("Database operation failed", operation)
        finally:
            session.close()

    def get(self, key: str) -> bytes | None:
        with self.session("get") as db:
            row = db.execute(
                select(WorldState.value).where(WorldState.key == key),
            ).scalar_one_or_none()
        return None if row is None else bytes(row)

    def put(self, key: str, value: bytes) -> None:
        with self.session("put") as db:
            row = db.get(WorldState, key)
            if row is None:
                db.add(WorldState(key=key, value=bytes(value)))
            else:
                row.value = bytes(value)
            db.commit()

    def delete(self, key: str) -> None:
        with self.session("delete") as db:
            row = db.get(WorldState, key)
            if row is not None:
                db.delete(row)
                db.commit()

    def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            with self.session("health_check") as db:
                db.execute(text("SELECT 1"))
            return True
        except StateStoreError as e:
            logger.error(f"State store health check failed: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
