"""
Database utility functions for connection management outside of request handling.

Scripts, startup hooks and the health check use these instead of the
request-scoped ``get_db`` dependency.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import text
from sqlalchemy.orm import Session

from healthmap.db.session import SessionLocal, engine

logger = logging.getLogger(__name__)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get a database session with proper cleanup using context manager.

    Usage:
        with get_db_session() as db:
            result = db.query(Model).all()

    Commits on success, rolls back and re-raises on any exception.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        db.close()


def create_all_tables() -> None:
    """Create every table registered on the declarative Base (local/dev only)."""
    from healthmap.db.base import Base

    Base.metadata.create_all(bind=engine)
    logger.info(f"Ensured {len(Base.metadata.tables)} tables exist")


def check_database_connection() -> bool:
    try:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
