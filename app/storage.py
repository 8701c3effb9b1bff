"""Data storage layer."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .database import get_db
from .db_models import BirthdayRecord, CategoryRecord, UserRecord
from .errors import Conflict
from .models import Birthday, Category, User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Family", "👨‍👩‍👧‍👦"),
    ("Friends", "👥"),
    ("Work", "💼"),
    ("Other", "🎉"),
]


class SQLStorage:
    """Base storage bound to one session."""

    def __init__(self, session: Session):
        self.session = session

    def _flush(self, conflict_message: str):
        """Flush pending changes, turning unique violations into Conflict."""
        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(f"Integrity error on flush: {e.orig}")
            raise Conflict(conflict_message) from e


class UserStorage(SQLStorage):
    """User storage."""

    def get_all(self) -> List[User]:
        """Get all users."""
        records = self.session.scalars(select(UserRecord).order_by(UserRecord.created_at))
        return [User.model_validate(r) for r in records]

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        record = self.session.get(UserRecord, user_id)
        return User.model_validate(record) if record else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        record = self.session.scalars(
            select(UserRecord).where(UserRecord.email == email)
        ).first()
        return User.model_validate(record) if record else None

    def exists(self, email: str) -> bool:
        """Check if a user with this email exists."""
        return self.get_by_email(email) is not None

    def create(self, name: str, email: str, hashed_password: str) -> User:
        """Create a new user."""
        if self.exists(email):
            raise Conflict("Email already exists")

        record = UserRecord(name=name, email=email, hashed_password=hashed_password)
        self.session.add(record)
        self._flush("Email already exists")
        self.session.refresh(record)
        return User.model_validate(record)

    def update(self, user_id: UUID, **changes) -> Optional[User]:
        """Update the given columns of a user."""
        record = self.session.get(UserRecord, user_id)
        if record is None:
            return None

        for field, value in changes.items():
            setattr(record, field, value)
        self._flush("Email already exists")
        self.session.refresh(record)
        return User.model_validate(record)

    def delete(self, user_id: UUID) -> bool:
        """Delete a user and their birthdays."""
        record = self.session.get(UserRecord, user_id)
        if record is None:
            return False

        self.session.delete(record)
        self.session.flush()
        return True


class CategoryStorage(SQLStorage):
    """Category storage."""

    def get_all(self) -> List[Category]:
        """Get all categories."""
        records = self.session.scalars(select(CategoryRecord).order_by(CategoryRecord.name))
        return [Category.model_validate(r) for r in records]

    def get_by_id(self, category_id: UUID) -> Optional[Category]:
        """Get a category by ID."""
        record = self.session.get(CategoryRecord, category_id)
        return Category.model_validate(record) if record else None

    def get_by_name(self, name: str) -> Optional[Category]:
        """Get a category by its unique name."""
        record = self.session.scalars(
            select(CategoryRecord).where(CategoryRecord.name == name)
        ).first()
        return Category.model_validate(record) if record else None

    def create(self, name: str, icon: str) -> Category:
        """Create a new category."""
        record = CategoryRecord(name=name, icon=icon)
        self.session.add(record)
        self._flush(f"Category {name} already exists")
        self.session.refresh(record)
        return Category.model_validate(record)


class BirthdayStorage(SQLStorage):
    """Birthday storage."""

    def get_by_id(self, birthday_id: UUID) -> Optional[Birthday]:
        """Get a birthday by ID."""
        record = self.session.get(BirthdayRecord, birthday_id)
        return Birthday.model_validate(record) if record else None

    def get_by_user_id(self, user_id: UUID) -> List[Birthday]:
        """Get all birthdays owned by a user."""
        records = self.session.scalars(
            select(BirthdayRecord)
            .where(BirthdayRecord.user_id == user_id)
            .order_by(BirthdayRecord.birth_month, BirthdayRecord.birth_day)
        )
        return [Birthday.model_validate(r) for r in records]

    def get_by_category(
        self, category_id: UUID, user_id: Optional[UUID] = None
    ) -> List[Birthday]:
        """Get birthdays in a category, optionally only those owned by ``user_id``."""
        query = select(BirthdayRecord).where(BirthdayRecord.category_id == category_id)
        if user_id is not None:
            query = query.where(BirthdayRecord.user_id == user_id)
        records = self.session.scalars(
            query.order_by(BirthdayRecord.birth_month, BirthdayRecord.birth_day)
        )
        return [Birthday.model_validate(r) for r in records]

    def create(
        self,
        user_id: UUID,
        name: str,
        birth_month: int,
        birth_day: int,
        category_id: Optional[UUID] = None,
        notes: Optional[str] = None,
    ) -> Birthday:
        """Create a new birthday."""
        record = BirthdayRecord(
            user_id=user_id,
            name=name,
            birth_month=birth_month,
            birth_day=birth_day,
            category_id=category_id,
            notes=notes,
        )
        self.session.add(record)
        self.session.flush()
        self.session.refresh(record)
        return Birthday.model_validate(record)

    def update(self, birthday_id: UUID, **changes) -> Optional[Birthday]:
        """Update the given columns of a birthday."""
        record = self.session.get(BirthdayRecord, birthday_id)
        if record is None:
            return None

        for field, value in changes.items():
            setattr(record, field, value)
        self.session.flush()
        self.session.refresh(record)
        return Birthday.model_validate(record)

    def delete(self, birthday_id: UUID) -> bool:
        """Delete a birthday."""
        record = self.session.get(BirthdayRecord, birthday_id)
        if record is None:
            return False

        self.session.delete(record)
        self.session.flush()
        return True


def seed_categories(session: Session) -> int:
    """Insert the default categories that are missing. Returns how many were added."""
    storage = CategoryStorage(session)
    added = 0
    for name, icon in DEFAULT_CATEGORIES:
        if storage.get_by_name(name) is None:
            storage.create(name, icon)
            added += 1

    if added:
        logger.info(f"Seeded {added} default categories")
    return added


def get_user_storage(db: Session = Depends(get_db)) -> UserStorage:
    return UserStorage(db)


def get_category_storage(db: Session = Depends(get_db)) -> CategoryStorage:
    return CategoryStorage(db)


def get_birthday_storage(db: Session = Depends(get_db)) -> BirthdayStorage:
    return BirthdayStorage(db)
