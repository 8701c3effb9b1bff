"""Tests for Pydantic data models."""

import uuid
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.models import (
    AuthenticatedPrincipal,
    Birthday,
    BirthdayCreate,
    BirthdayResponse,
    BirthdayUpdate,
    Category,
    User,
    UserCreate,
    UserResponse,
    UserUpdate,
)

NOW = datetime(2024, 6, 15, tzinfo=timezone.utc)


def make_birthday(**overrides):
    data = dict(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        name="Alice",
        birth_month=3,
        birth_day=5,
        created_at=NOW,
        updated_at=NOW,
    )
    data.update(overrides)
    return Birthday(**data)


class TestBirthdayModel:
    def test_minimal(self):
        b = make_birthday()
        assert b.category is None
        assert b.notes is None
        assert b.birth_date == "03-05"

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            make_birthday(birth_month=13)

    def test_invalid_day(self):
        with pytest.raises(ValidationError):
            make_birthday(birth_day=0)

    def test_response_shape(self):
        category = Category(id=uuid.uuid4(), name="Family", icon="x", created_at=NOW)
        b = make_birthday(category_id=category.id, category=category, notes="Sister")
        response = BirthdayResponse.from_birthday(b)
        assert response.birth_date == "03-05"
        assert response.category.name == "Family"
        assert response.notes == "Sister"


class TestBirthdayCreateModel:
    def test_birth_date_required(self):
        with pytest.raises(ValidationError):
            BirthdayCreate(name="X")

    def test_name_required(self):
        with pytest.raises(ValidationError):
            BirthdayCreate(name="", birth_date="03-15")

    def test_valid_create(self):
        bc = BirthdayCreate(name="Alice", birth_date="03-15")
        assert bc.category_id is None
        assert bc.notes is None


class TestBirthdayUpdateModel:
    def test_all_fields_optional(self):
        bu = BirthdayUpdate()
        assert bu.model_dump(exclude_unset=True) == {}

    def test_partial_update(self):
        bu = BirthdayUpdate(name="Updated Name")
        assert bu.model_dump(exclude_unset=True) == {"name": "Updated Name"}

    def test_explicit_null_category_is_kept(self):
        bu = BirthdayUpdate(category_id=None)
        assert bu.model_dump(exclude_unset=True) == {"category_id": None}


class TestUserModels:
    def test_user_create_requires_valid_email(self):
        with pytest.raises(ValidationError):
            UserCreate(name="A", email="not-an-email", password="secret1")

    def test_user_create_password_min_length(self):
        with pytest.raises(ValidationError):
            UserCreate(name="A", email="a@example.com", password="short")

    def test_user_update_all_optional(self):
        assert UserUpdate().model_dump(exclude_unset=True) == {}

    def test_user_response_has_no_password(self):
        user = User(
            id=uuid.uuid4(),
            name="A",
            email="a@example.com",
            hashed_password="hash",
            created_at=NOW,
            updated_at=NOW,
        )
        response = UserResponse.from_user(user)
        assert "hashed_password" not in response.model_dump()
        assert response.email == "a@example.com"


class TestAuthenticatedPrincipal:
    def test_frozen(self):
        principal = AuthenticatedPrincipal(user_id=uuid.uuid4(), email="a@example.com")
        with pytest.raises(ValidationError):
            principal.email = "b@example.com"
