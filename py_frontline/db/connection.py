"""Database connection utilities."""

from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import structlog
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.config import settings
from .models import Base

logger = structlog.get_logger()


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite only enforces foreign keys (and ON DELETE CASCADE) per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class Database:
    """Database connection manager."""

    def __init__(self):
        self.engine = None
        self.SessionLocal = None

    @property
    def initialized(self) -> bool:
        return self.SessionLocal is not None

    def initialize(self, database_url: Optional[str] = None):
        """Initialize database connection."""
        url = database_url or settings.database_url
        logger.info("Initializing database connection", url=url)

        self._ensure_parent_dir(url)

        # Create engine
        self.engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=False,  # Set to True for SQL debugging
        )
        event.listen(self.engine, "connect", _enable_foreign_keys)

        # Create session factory
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

        # Create tables
        self.create_tables()

        logger.info("Database connection initialized")

    @staticmethod
    def _ensure_parent_dir(url: str) -> None:
        prefix = "sqlite:///"
        if url.startswith(prefix) and url != prefix + ":memory:":
            Path(url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self):
        """Create all tables."""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created")

        except Exception as e:
            logger.error("Failed to create tables", error=str(e))
            raise

    def ping(self) -> bool:
        with self.get_session() as session:
            session.execute(text("SELECT 1"))
        return True

    @contextmanager
    def get_session(self):
        """Get database session with automatic cleanup."""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connection closed")
        self.engine = None
        self.SessionLocal = None


# Global database instance
db = Database()
