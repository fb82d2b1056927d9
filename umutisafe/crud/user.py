"""CRUD operations for `User` model."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from umutisafe.core.exceptions import BadRequestException
from umutisafe.core.security import get_password_hash, verify_password
from umutisafe.crud.base import CRUDBase
from umutisafe.models.user import User
from umutisafe.schemas.user import AdminUserUpdate, UserCreate
from umutisafe.utils.normalization import initials


GOV_EMAIL_DOMAIN = "umutisafe.gov.rw"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def is_gov_email(email: str) -> bool:
    return _normalize_email(email).endswith("@" + GOV_EMAIL_DOMAIN)


def check_email_domain(email: str, role: str) -> None:
    """Admins must use the government domain; nobody else may."""
    gov = is_gov_email(email)
    if role == "admin" and not gov:
        raise BadRequestException(f"Administrator accounts must use @{GOV_EMAIL_DOMAIN} email address")
    if role != "admin" and gov:
        raise BadRequestException(
            f"The @{GOV_EMAIL_DOMAIN} domain is reserved for administrators only. "
            "Please use a different email address."
        )


class CRUDUser(CRUDBase[User, UserCreate, AdminUserUpdate]):
    def get_by_email(self, db: Session, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        stmt = select(User).where(User.email == _normalize_email(email)).limit(1)
        return db.scalars(stmt).first()

    def create_user(self, db: Session, *, user_in: UserCreate) -> User:
        """Hash the password and create the account.

        Admin accounts are approved on creation; every other role waits
        for an admin.
        """
        user_data = user_in.model_dump(exclude_unset=True)
        raw_password = user_data.pop("password")
        user_data["email"] = _normalize_email(user_in.email)
        user_data["role"] = user_in.role
        user_data["password_hash"] = get_password_hash(raw_password)
        user_data["avatar"] = initials(user_in.name)[:20] or None

        if user_in.role == "admin":
            user_data["is_approved"] = True
            user_data["approved_at"] = datetime.utcnow()
        else:
            user_data["is_approved"] = False

        return self.save(db, User(**user_data))

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def record_login(self, db: Session, *, user: User) -> Optional[datetime]:
        """Stamp `last_login` and return the value it replaced."""
        previous = user.last_login
        user.last_login = datetime.utcnow()
        self.save(db, user)
        return previous

    def update_password(self, db: Session, *, user: User, new_password: str) -> User:
        user.password_hash = get_password_hash(new_password)
        return self.save(db, user)

    def approve(self, db: Session, *, user: User, approved_by: UUID) -> User:
        return self.update(
            db,
            db_obj=user,
            obj_in={"is_approved": True, "approved_by": approved_by, "approved_at": datetime.utcnow()},
        )

    def set_active(self, db: Session, *, user: User, is_active: bool) -> User:
        return self.update(db, db_obj=user, obj_in={"is_active": is_active})

    def hard_delete(self, db: Session, *, user: User) -> None:
        """Remove the account together with its disposals and pickup requests."""
        try:
            db.delete(user)
            db.commit()
        except Exception:
            db.rollback()
            raise

    def list_users(
        self,
        db: Session,
        *,
        role: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[User], int]:
        stmt = select(User)
        if role:
            stmt = stmt.where(User.role == role)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(User.name.ilike(pattern), User.email.ilike(pattern), User.phone.ilike(pattern))
            )
        stmt = stmt.order_by(User.created_at.desc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def list_pending(self, db: Session) -> List[User]:
        stmt = (
            select(User)
            .where(User.is_approved.is_(False), User.is_active.is_(True))
            .order_by(User.created_at.asc())
        )
        return list(db.scalars(stmt).all())

    # ----- CHW directory -----
    def get_chw(self, db: Session, chw_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == chw_id, User.role == "chw").limit(1)
        return db.scalars(stmt).first()

    def get_active_chw(self, db: Session, chw_id: UUID) -> Optional[User]:
        stmt = (
            select(User)
            .where(User.id == chw_id, User.role == "chw", User.is_active.is_(True))
            .limit(1)
        )
        return db.scalars(stmt).first()

    def list_chws(
        self,
        db: Session,
        *,
        sector: Optional[str] = None,
        availability: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[User], int]:
        stmt = select(User).where(User.role == "chw", User.is_active.is_(True))
        if sector:
            stmt = stmt.where(User.sector == sector)
        if availability:
            stmt = stmt.where(User.availability == availability)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    User.name.ilike(pattern),
                    User.sector.ilike(pattern),
                    User.coverage_area.ilike(pattern),
                )
            )
        stmt = stmt.order_by(User.rating.desc(), User.name.asc())
        return self.paginate(db, stmt, page=page, limit=limit)

    def nearby_chws(self, db: Session, *, sector: Optional[str] = None, limit: int = 5) -> List[User]:
        stmt = select(User).where(
            User.role == "chw",
            User.is_active.is_(True),
            User.availability == "available",
        )
        if sector:
            stmt = stmt.where(User.sector.ilike(f"%{sector}%"))
        stmt = stmt.order_by(User.rating.desc()).limit(limit)
        return list(db.scalars(stmt).all())


crud_user = CRUDUser(User)
