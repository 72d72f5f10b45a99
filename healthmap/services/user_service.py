"""
User account operations used by the HTTP layer.

Every function catches store-level errors, logs them and returns a failure
result (or ``None`` for lookups) so callers never handle SQLAlchemy exceptions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from healthmap import crud
from healthmap.models.user import User
from healthmap.schemas.user import UserCreate

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_ERROR = "User with this email already exists"
CREATE_USER_ERROR = "Failed to create user"
CREATE_PROFILE_ERROR = "Failed to create user profile"


@dataclass
class ServiceResult:
    success: bool
    user: Optional[User] = None
    error: Optional[str] = None


def create_user(db: Session, email: str, password: str, name: Optional[str] = None) -> ServiceResult:
    """Insert a user with a bcrypt-hashed password.

    The email is compared exactly as given; the registration route lowercases it.
    The pre-check only produces the friendly message early, the unique
    constraint on ``user.email`` decides concurrent registrations.
    """
    try:
        existing_user = crud.user.get_by_email(db, email=email)
        if existing_user:
            return ServiceResult(success=False, error=DUPLICATE_EMAIL_ERROR)

        user = crud.user.create(db, obj_in=UserCreate(email=email, password=password, name=name))
        logger.info(f"Created user {user.id}")
        return ServiceResult(success=True, user=user)
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Duplicate email on insert for user registration: {e.orig}")
        return ServiceResult(success=False, error=DUPLICATE_EMAIL_ERROR)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating user: {e}")
        return ServiceResult(success=False, error=CREATE_USER_ERROR)
    except ValueError as e:
        # passlib rejects passwords bcrypt cannot hash, e.g. ones containing NUL
        db.rollback()
        logger.error(f"Error hashing password for new user: {e}")
        return ServiceResult(success=False, error=CREATE_USER_ERROR)


def create_user_profile(db: Session, user_id: str, **profile_data: Any) -> ServiceResult:
    """Insert a profile for ``user_id``; a missing user fails on the foreign key."""
    try:
        profile = crud.profile.create_for_user(db, user_id=user_id, obj_in=profile_data)
        logger.info(f"Created profile {profile.id} for user {user_id}")
        return ServiceResult(success=True)
    except ValidationError as e:
        logger.error(f"Invalid profile fields for user {user_id}: {e}")
        return ServiceResult(success=False, error=CREATE_PROFILE_ERROR)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating user profile: {e}")
        return ServiceResult(success=False, error=CREATE_PROFILE_ERROR)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    try:
        return crud.user.get_by_email(db, email=email)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error fetching user by email: {e}")
        return None


def get_user_by_id(db: Session, id: str) -> Optional[User]:
    try:
        return crud.user.get(db, id=id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error fetching user by id: {e}")
        return None


def get_user_with_profile(db: Session, user_id: str) -> Optional[User]:
    try:
        return crud.user.get_with_profile(db, id=user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error fetching user with profile: {e}")
        return None
