"""Data models."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .dates import format_birth_date


class AuthenticatedPrincipal(BaseModel):
    """Identity carried by a validated bearer token."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str


class User(BaseModel):
    """User model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    hashed_password: str
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Registration payload."""

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=6)


class UserUpdate(BaseModel):
    """User update payload; only provided fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = Field(None, max_length=255)
    password: Optional[str] = Field(None, min_length=6)


class UserResponse(BaseModel):
    """User response (without password)."""

    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    """Bearer token plus the authenticated user."""

    token: str
    user: UserResponse


class Category(BaseModel):
    """Category model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    icon: str
    created_at: datetime


class Birthday(BaseModel):
    """Birthday model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    birth_month: int = Field(ge=1, le=12)
    birth_day: int = Field(ge=1, le=31)
    category_id: Optional[UUID] = None
    category: Optional[Category] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def birth_date(self) -> str:
        return format_birth_date(self.birth_month, self.birth_day)


class BirthdayCreate(BaseModel):
    """Birthday creation model."""

    name: str = Field(min_length=1, max_length=100)
    birth_date: str = Field(max_length=5, description="Birth month and day as MM-DD")
    category_id: Optional[UUID] = None
    notes: Optional[str] = None


class BirthdayUpdate(BaseModel):
    """Birthday update model."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    birth_date: Optional[str] = Field(None, max_length=5)
    category_id: Optional[UUID] = None
    notes: Optional[str] = None


class BirthdayResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    birth_date: str
    birth_month: int
    birth_day: int
    category: Optional[Category] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_birthday(cls, birthday: Birthday) -> "BirthdayResponse":
        return cls(
            id=birthday.id,
            user_id=birthday.user_id,
            name=birthday.name,
            birth_date=birthday.birth_date,
            birth_month=birthday.birth_month,
            birth_day=birthday.birth_day,
            category=birthday.category,
            notes=birthday.notes,
            created_at=birthday.created_at,
            updated_at=birthday.updated_at,
        )


class UpcomingBirthdayResponse(BirthdayResponse):
    """Birthday with its next occurrence."""

    next_birthday: datetime
    days_until: int


class MessageResponse(BaseModel):
    message: str
