"""Database configuration, connection caching and session management."""

import logging
import threading
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from pob_tracker.config import Settings, get_settings

logger = logging.getLogger(__name__)

Base: Any = declarative_base()


class ConnectionManager:
    """Lazily creates one pooled engine per process and hands out sessions.

    The engine and its session factory are cached together and only ever
    replaced wholesale: a failed initialization or a dropped connection clears
    the pair and the next caller builds a fresh one.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._state: tuple[Engine, sessionmaker] | None = None
        self._lock = threading.Lock()

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def is_connected(self) -> bool:
        """Whether an initialized engine is currently cached."""
        return self._state is not None

    def connect(self) -> Engine:
        """Return the cached engine, establishing it on first use."""
        engine, _ = self._connect()
        return engine

    def session(self) -> Session:
        """Open a new session bound to the cached engine."""
        _, session_factory = self._connect()
        return session_factory()

    def invalidate(self, engine: Engine | None = None) -> None:
        """Drop the cached engine so the next request reconnects.

        When ``engine`` is given, only invalidate if it is still the cached one.
        """
        with self._lock:
            state = self._state
            if state is None or (engine is not None and engine is not state[0]):
                return
            self._state = None
        state[0].dispose(close=False)
        logger.warning("Database connection cache invalidated")

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.connect().connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def _connect(self) -> tuple[Engine, sessionmaker]:
        state = self._state
        if state is not None:
            return state

        with self._lock:
            # Another thread may have finished initializing while we waited
            if self._state is not None:
                return self._state

            logger.info("Creating new database connection pool...")
            engine = self._create_engine()
            try:
                self._warm_pool(engine)
            except SQLAlchemyError as e:
                logger.error(f"Database connection error: {e}")
                engine.dispose()
                raise

            session_factory = sessionmaker(
                autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
            )
            self._state = (engine, session_factory)
            logger.info(f"Database connected successfully to: {engine.url.render_as_string()}")
            return self._state

    def _create_engine(self) -> Engine:
        settings = self.settings
        url = settings.database_url

        if url.startswith("sqlite"):
            engine = create_engine(url, connect_args={"check_same_thread": False})
        else:
            connect_args: dict[str, Any] = {"connect_timeout": settings.db_connect_timeout_seconds}
            if url.startswith("postgresql"):
                # Bounds every statement so a slow query surfaces as a storage error
                connect_args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"
            engine = create_engine(
                url,
                pool_pre_ping=True,
                pool_size=settings.db_pool_max_size,
                max_overflow=0,
                pool_timeout=settings.db_connect_timeout_seconds,
                pool_recycle=settings.db_pool_idle_timeout_seconds,
                connect_args=connect_args,
            )

        event.listen(engine, "connect", self._on_connect)
        event.listen(engine, "handle_error", self._on_error)
        return engine

    def _warm_pool(self, engine: Engine) -> None:
        connections = [engine.connect() for _ in range(max(1, self.settings.db_pool_min_size))]
        try:
            connections[0].execute(text("SELECT 1"))
        finally:
            for conn in connections:
                conn.close()

    def _on_connect(self, dbapi_connection, connection_record) -> None:
        logger.debug("Database connection established")

    def _on_error(self, context) -> None:
        if not context.is_disconnect:
            return
        logger.error(f"Database connection dropped: {context.original_exception}")

        # An engine still being warmed up is not cached yet, and its failure
        # already propagates out of _connect while the lock is held
        state = self._state
        if state is None or context.engine is not state[0]:
            return
        self.invalidate(context.engine)


connection_manager = ConnectionManager()


def connect() -> Engine:
    """Return a ready-to-use engine from the process-wide connection manager."""
    return connection_manager.connect()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = connection_manager.session()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize the database by creating all tables."""
    # Import all models here so they are registered with Base.metadata
    from pob_tracker import models  # noqa: F401

    Base.metadata.create_all(bind=connect())
