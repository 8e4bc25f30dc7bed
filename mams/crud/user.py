# File: mams/crud/user.py
from typing import Any, Dict, List, Optional, Union
from sqlalchemy.orm import Session
from mams.crud.base import CRUDBase
from mams.models.user import User, UserRole
from mams.schemas.user import UserCreate, UserUpdate
from mams.core.security import get_password_hash, verify_password


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):

    def get_by_username(self, db: Session, *, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def get_by_base(self, db: Session, *, base_id: int, role: Optional[UserRole] = None) -> List[User]:
        query = db.query(User).filter(User.base_id == base_id)
        if role is not None:
            query = query.filter(User.role == role)
        return query.order_by(User.id).all()

    def create(self, db: Session, *, obj_in: Union[UserCreate, Dict[str, Any]]) -> User:
        if isinstance(obj_in, dict):
            create_data = dict(obj_in)
        else:
            create_data = obj_in.model_dump()
        create_data["hashed_password"] = get_password_hash(create_data.pop("password"))
        return super().create(db, obj_in=create_data)

    def update(self, db: Session, *, db_obj: User, obj_in: Union[UserUpdate, Dict[str, Any]]) -> User:
        if isinstance(obj_in, dict):
            update_data = dict(obj_in)
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("password"):
            update_data["hashed_password"] = get_password_hash(update_data.pop("password"))
        else:
            update_data.pop("password", None)
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def authenticate(self, db: Session, *, username: str, password: str) -> Optional[User]:
        user = self.get_by_username(db, username=username)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user


user = CRUDUser(User)
