"""Database connection and session management.

The store handle is created once by the application factory, kept on
``app.state.database`` and shared by every request. The engine itself is
created lazily on first use; concurrent first requests wait on the same
initialization instead of each opening their own engine.
"""

import logging
import threading
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

# Import models to ensure they are registered with Base.metadata
from virtuebox.models import Base

logger = logging.getLogger(__name__)


class Database:
    """Lazily initialized, shared SQLAlchemy engine and session factory."""

    def __init__(self, url: str):
        """Initialize the handle without connecting.

        Args:
            url: SQLAlchemy database URL.
        """
        self.url = url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._init_lock = threading.Lock()
        # Serializes partner id allocation + insert against this store
        self.allocation_lock = threading.Lock()

    @property
    def engine(self) -> Engine:
        return self._ensure_connected()

    def _ensure_connected(self) -> Engine:
        if self._engine is None:
            with self._init_lock:
                if self._engine is None:
                    self._connect()
        return self._engine

    def _connect(self) -> None:
        connect_args = {}
        if self.url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        engine = create_engine(self.url, connect_args=connect_args)
        Base.metadata.create_all(bind=engine)
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine
        )
        # Published last so other threads never see a half-built handle
        self._engine = engine
        logger.info("Database engine initialized (%s)", engine.url.get_backend_name())

    def session(self) -> Session:
        """Open a new session bound to the shared engine."""
        self._ensure_connected()
        return self._session_factory()

    def dispose(self) -> None:
        """Close pooled connections; the next use reconnects."""
        with self._init_lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                self._session_factory = None


def get_database(request: Request) -> Database:
    """Dependency returning the application's shared store handle."""
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for getting a request-scoped database session."""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
