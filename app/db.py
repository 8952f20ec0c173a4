"""
Database connection and setup
SQLAlchemy engine and sessions for the design content tables
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.models import Base
from config.settings import settings

logger = logging.getLogger("db")

DATABASE_URL = settings.database_url


def _connect_args(url: str) -> dict:
    """Driver arguments, including a bounded wait on the database."""
    if url.startswith("sqlite"):
        return {
            "check_same_thread": False,  # Needed for SQLite
            "timeout": settings.db_timeout_seconds,
        }
    return {"connect_timeout": settings.db_timeout_seconds}


# Create engine with echo=False (set to True for SQL debugging)
engine = create_engine(
    DATABASE_URL,
    connect_args=_connect_args(DATABASE_URL),
    pool_pre_ping=True,
    echo=False,
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """
    Initialize database - create all tables
    Safe to call multiple times (won't recreate existing tables)
    """
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at: {DATABASE_URL}")


def get_db():
    """
    Get database session - use in FastAPI dependencies
    Yields a session and closes it when done
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session():
    """
    Get a database session for scripts
    Remember to close() when done
    """
    return SessionLocal()
