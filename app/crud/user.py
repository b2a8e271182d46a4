"""CRUD operations for `User` model."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import desc, or_, select
from sqlalchemy.orm import Session

from app.core.roles import DEFAULT_ROLE, Role
from app.core.security import get_password_hash, verify_password
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserCreate


class CRUDUser(CRUDBase[User, UserCreate, dict]):
    def get_by_email(self, db: Session, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        stmt = select(User).where(User.email == email.lower()).limit(1)
        return db.scalars(stmt).first()

    def get_by_username_or_email(self, db: Session, *, username: str, email: str) -> Optional[User]:
        stmt = (
            select(User)
            .where(or_(User.username == username, User.email == email.lower()))
            .limit(1)
        )
        return db.scalars(stmt).first()

    def get_by_username(self, db: Session, username: str, *, exclude_id: Optional[int] = None) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return db.scalars(stmt.limit(1)).first()

    def create_user(self, db: Session, *, user_in: UserCreate) -> User:
        """Create a user; new accounts always start with the default (trial) role."""
        user_data = user_in.model_dump(exclude_unset=True)
        raw_password = user_data.pop("password")
        user_data["password_hash"] = get_password_hash(raw_password)
        user_data["role"] = DEFAULT_ROLE.value
        user_data["bio"] = ""

        db_obj = User(**user_data)
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """Authenticate user by email and password."""
        user = self.get_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def list_newest_first(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[User]:
        stmt = select(User).order_by(desc(User.created_at), desc(User.id)).offset(skip).limit(limit)
        return list(db.scalars(stmt).all())

    def update_role(self, db: Session, *, user_id: int, role: Role) -> Optional[User]:
        user = self.get(db, user_id)
        if not user:
            return None
        user.role = role.value
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise
        return user

    def update_profile(
        self,
        db: Session,
        *,
        user: User,
        username: str,
        bio: Optional[str],
        avatar_url: Optional[str],
    ) -> User:
        """Overwrite the editable profile fields; blank optional fields are stored empty."""
        return self.update(
            db,
            db_obj=user,
            obj_in={"username": username, "bio": bio or "", "avatar_url": avatar_url or None},
        )

    def search_by_username(self, db: Session, *, term: str, limit: int = 20) -> List[User]:
        """Active users whose username contains ``term``, alphabetically."""
        stmt = (
            select(User)
            .where(User.is_active.is_(True), User.username.icontains(term, autoescape=True))
            .order_by(User.username.asc())
            .limit(limit)
        )
        return list(db.scalars(stmt).all())


# Singleton instance
crud_user = CRUDUser(User)
