"""Database configuration and base setup for Release Control Tower."""

from typing import Generator, Optional

import structlog
from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# Default to a local SQLite database when DATABASE_URL is not provided.
DEFAULT_DATABASE_URL = "sqlite:///./release_control_tower.db"


def _ensure_sync_driver(url: URL) -> URL:
    """Force a synchronous driver for Alembic and the ORM engine."""

    if url.drivername.startswith("postgresql+"):
        # Normalize any async driver variants to psycopg (sync)
        if any(token in url.drivername for token in ("async", "aiopg")):
            url = url.set(drivername="postgresql+psycopg")
    elif url.drivername.startswith("sqlite+"):
        if "aiosqlite" in url.drivername:
            url = url.set(drivername="sqlite")

    return url


def get_database_url(raw_url: Optional[str] = None) -> str:
    """Return a database URL with a guaranteed synchronous driver."""

    url = make_url(raw_url or DEFAULT_DATABASE_URL)
    # str(url) would mask the password with ***
    return _ensure_sync_driver(url).render_as_string(hide_password=False)


def _is_memory_sqlite(database_url: str) -> bool:
    url = make_url(database_url)
    return url.database in (None, "", ":memory:")


class Database:
    """Owns the engine and session factory for one process.

    Usage:
        database = Database(settings.database_url)
        database.initialize()
        with database.session() as db:
            ...
        database.shutdown()
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 5,
        max_overflow: int = 20,
        pool_recycle: int = 3600,
    ):
        self.database_url = get_database_url(database_url)
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_recycle = pool_recycle
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=settings.db_pool_recycle,
        )

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database.initialize() has not been called")
        return self._engine

    def initialize(self) -> None:
        """Create the engine and the session factory."""
        if self._engine is not None:
            return

        if self.database_url.startswith("sqlite"):
            # SQLite configuration for development/testing
            kwargs = {"connect_args": {"check_same_thread": False}}
            if _is_memory_sqlite(self.database_url):
                kwargs["poolclass"] = StaticPool
            self._engine = create_engine(self.database_url, **kwargs)
        else:
            # PostgreSQL configuration for production
            self._engine = create_engine(
                self.database_url,
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_pre_ping=True,
                pool_recycle=self.pool_recycle,
                # Every session runs in UTC so stored timestamps are unambiguous
                connect_args={"connect_timeout": 10, "options": "-c timezone=utc"},
            )

        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=self._engine
        )
        logger.info(
            "Database engine created",
            driver=self._engine.url.drivername,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
        )

    def create_all(self) -> None:
        """Create all tables registered on ``Base``."""
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        """Open a new session. Caller must close it."""
        if self._session_factory is None:
            raise RuntimeError("Database.initialize() has not been called")
        return self._session_factory()

    def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed", error=str(e))
            return False

    def shutdown(self) -> None:
        """Dispose of pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


def get_database(request: Request) -> Database:
    """Dependency returning the Database attached to the running app."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency to get database session."""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
