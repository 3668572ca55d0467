"""
Database configuration with SQLAlchemy.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

SQLALCHEMY_DATABASE_URL = settings.database_url


def build_engine(url: str, **kwargs):
    """Create an engine, applying SQLite-specific options when needed."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, echo=settings.debug, **kwargs)

        # SQLite only honours ON DELETE CASCADE with foreign keys enabled
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
        **kwargs
    )


engine = build_engine(SQLALCHEMY_DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base for models
Base = declarative_base()


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    Run a unit of work in one transaction.

    Commits when the block exits cleanly; rolls back and re-raises otherwise.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db():
    """Initialize database by creating all tables."""
    from . import models  # Import to register models
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
