"""
Park Sync - Database Connection Management
Provides SQLAlchemy Core connections and ORM sessions for the sync store.

The store is addressed by DATABASE_URL (PostgreSQL via psycopg2 in
production, SQLite in tests). When no URL is configured the pipeline runs
with simulated writes and never constructs an engine.
"""

from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..utils.config import DATABASE_PASSWORD, DATABASE_URL, config
from ..utils.logger import log_database_error, logger


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass


class DatabaseConnection:
    """
    Manages the store engine and hands out transactional connections.

    Features:
    - Lazily created engine
    - Health checks before connection use (pool_pre_ping)
    - Single shared in-memory connection for sqlite:// URLs (tests)
    """

    def __init__(self, url: Optional[str] = None, password: Optional[str] = None):
        self.url = url if url is not None else DATABASE_URL
        self.password = password if password is not None else DATABASE_PASSWORD
        self._engine: Optional[Engine] = None
        self._session_factory = None

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    def get_engine(self) -> Engine:
        """
        Get or create the SQLAlchemy engine.

        Raises:
            DatabaseConnectionError: If no URL is configured or the engine cannot be built
        """
        if self._engine is None:
            if not self.is_configured:
                raise DatabaseConnectionError("DATABASE_URL not configured")
            try:
                url = make_url(self.url)
                if self.password and not url.password:
                    url = url.set(password=self.password)

                if url.get_backend_name() == 'sqlite':
                    self._engine = create_engine(
                        url,
                        connect_args={"check_same_thread": False},
                        poolclass=StaticPool,
                    )
                else:
                    self._engine = create_engine(
                        url,
                        pool_pre_ping=True,
                        pool_recycle=3600,
                        hide_parameters=True,  # Prevent credentials from appearing in logs
                    )

                logger.info("Database engine initialized", extra={
                    "backend": url.get_backend_name(),
                    "host": url.host,
                    "database": url.database,
                    "environment": config.environment
                })

            except Exception as e:
                log_database_error(e, "Failed to create database engine")
                raise DatabaseConnectionError(f"Failed to create database engine: {e}") from e

        return self._engine

    @contextmanager
    def get_connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for a transactional connection.

        Commits on success, rolls back and re-raises on error.

        Example:
            >>> with db.get_connection() as conn:
            ...     conn.execute(text("SELECT 1"))
        """
        engine = self.get_engine()
        connection = engine.connect()
        try:
            yield connection
            connection.commit()
        except Exception as e:
            connection.rollback()
            log_database_error(e, "Transaction failed, rolled back")
            raise
        finally:
            connection.close()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Context manager for ORM sessions used by read queries."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.get_engine(), expire_on_commit=False)
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            log_database_error(e, "Session failed, rolled back")
            raise
        finally:
            session.close()

    def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.get_connection() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection test successful")
            return True
        except Exception as e:
            logger.error("Database connection test failed", extra={
                "error": str(e)
            })
            return False

    def close(self):
        """Close all connections in the pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database connection pool closed")
