#deploy_platform\infrastructure\postgres\database.py

"""SQLAlchemy database setup and session management."""

import logging
from typing import Dict, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from deploy_platform.infrastructure.postgres.config import Settings, settings as default_settings


logger = logging.getLogger(__name__)


# ============================================
# Base for ORM models
# ============================================
Base = declarative_base()


# ============================================
# Engine configuration
# ============================================
def create_db_engine(database_url: Optional[str] = None, config: Optional[Settings] = None, **kwargs) -> Engine:
    """
    Create SQLAlchemy engine.

    SQLite URLs skip pool sizing (tests pass their own poolclass via kwargs).
    """
    config = config or default_settings
    url = database_url or config.database_url

    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        return create_engine(url, echo=config.echo_sql, connect_args=connect_args, **kwargs)

    return create_engine(
        url,
        echo=config.echo_sql,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        **kwargs,
    )


# ============================================
# Session factory function
# ============================================
def get_session_factory(engine_instance: Engine) -> sessionmaker:
    """Get a session factory bound to the given engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine_instance,
        expire_on_commit=False
    )


# ============================================
# Database handle
# ============================================
class Database:
    """
    Explicit database handle.

    Opened at application startup, closed at shutdown, and handed to the
    repositories through its session factory.

    Usage:
        db = Database("sqlite://")
        db.open()
        repo = SqlUserRepository(db.session_factory)
    """

    def __init__(self, database_url: Optional[str] = None, config: Optional[Settings] = None, **engine_kwargs):
        self._config = config or default_settings
        self.database_url = database_url or self._config.database_url
        self._engine_kwargs = engine_kwargs
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        if self._engine is None:
            self._engine = create_db_engine(self.database_url, self._config, **self._engine_kwargs)
            self._session_factory = get_session_factory(self._engine)
            logger.info(f"Database engine opened ({self._engine.url.get_backend_name()})")
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None

    def session_factory(self):
        """
        New session from the bound factory.

        Repositories receive this method as their ``session_factory`` so a
        handle opened after wiring still works.
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def create_all(self) -> None:
        """Create all tables (tests and local runs - use Alembic in production)."""
        # Import models so they register on Base.metadata
        from deploy_platform.infrastructure.postgres import models  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        """Drop all tables (for testing only)."""
        from deploy_platform.infrastructure.postgres import models  # noqa: F401
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def status(self) -> Dict[str, object]:
        connected = self.ping()
        return {
            "status": "Connected" if connected else "Disconnected",
            "isConnected": connected,
        }
