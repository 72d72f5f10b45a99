import uuid

from sqlalchemy.orm import declarative_base

# Base class for ORM models
Base = declarative_base()


def generate_id() -> str:
    """Opaque primary key for every table."""
    return uuid.uuid4().hex
