from typing import Any, Dict, Optional, Union
from sqlalchemy.orm import Session, joinedload
from healthmap.core.security import get_password_hash
from healthmap.crud.base import CRUDBase
from healthmap.db.base_class import generate_id
from healthmap.models.user import User, Profile
from healthmap.schemas.user import UserCreate, ProfileCreate
from healthmap.utils.timezone import utcnow


class CRUDUser(CRUDBase[User, UserCreate, UserCreate]):
    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        now = utcnow()
        db_obj = User(
            id=generate_id(),
            email=obj_in.email,
            password=get_password_hash(obj_in.password),
            name=obj_in.name or None,
            created_at=now,
            updated_at=now,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_with_profile(self, db: Session, *, id: str) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.profile))
            .filter(User.id == id)
            .first()
        )


class CRUDProfile(CRUDBase[Profile, ProfileCreate, ProfileCreate]):
    def create_for_user(
        self, db: Session, *, user_id: str, obj_in: Union[ProfileCreate, Dict[str, Any]]
    ) -> Profile:
        if isinstance(obj_in, dict):
            obj_in = ProfileCreate(**obj_in)
        now = utcnow()
        db_obj = Profile(
            **obj_in.model_dump(exclude_unset=True),
            id=generate_id(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_user(self, db: Session, *, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.user_id == user_id).first()


# Create instances that can be imported directly
user = CRUDUser(User)
profile = CRUDProfile(Profile)
