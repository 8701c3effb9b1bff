"""Birthday routes."""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ..auth import ensure_owner, get_current_principal
from ..dates import UPCOMING_WINDOW_DAYS, parse_birth_date, upcoming
from ..errors import NotFound, ValidationError
from ..models import (
    AuthenticatedPrincipal,
    Birthday,
    BirthdayCreate,
    BirthdayResponse,
    BirthdayUpdate,
    MessageResponse,
    UpcomingBirthdayResponse,
)
from ..storage import (
    BirthdayStorage,
    CategoryStorage,
    get_birthday_storage,
    get_category_storage,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/birthdays", tags=["birthdays"])


def check_category(category_storage: CategoryStorage, category_id: Optional[UUID]):
    if category_id is not None and category_storage.get_by_id(category_id) is None:
        raise ValidationError("Invalid category ID")


def get_owned_birthday(
    birthday_storage: BirthdayStorage,
    birthday_id: UUID,
    principal: AuthenticatedPrincipal,
) -> Birthday:
    """Load a birthday, raising NotFound or Forbidden."""
    birthday = birthday_storage.get_by_id(birthday_id)
    if not birthday:
        raise NotFound("Birthday")
    ensure_owner(birthday, principal)
    return birthday


@router.get("", response_model=List[BirthdayResponse])
def get_birthdays(
    category_id: Optional[UUID] = Query(None),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    birthday_storage: BirthdayStorage = Depends(get_birthday_storage),
    category_storage: CategoryStorage = Depends(get_category_storage),
):
    """Get the caller's birthdays, optionally only those in one category."""
    if category_id is not None:
        check_category(category_storage, category_id)
        birthdays = birthday_storage.get_by_category(category_id, user_id=principal.user_id)
    else:
        birthdays = birthday_storage.get_by_user_id(principal.user_id)
    return [BirthdayResponse.from_birthday(b) for b in birthdays]


@router.get("/upcoming", response_model=List[UpcomingBirthdayResponse])
def get_upcoming_birthdays(
    days: int = Query(UPCOMING_WINDOW_DAYS, ge=1, le=366),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    birthday_storage: BirthdayStorage = Depends(get_birthday_storage),
):
    """Get the caller's birthdays coming up within ``days`` days, soonest first."""
    now = datetime.now(timezone.utc)
    birthdays = birthday_storage.get_by_user_id(principal.user_id)
    return [
        UpcomingBirthdayResponse(
            **BirthdayResponse.from_birthday(item.birthday).model_dump(),
            next_birthday=item.occurrence,
            days_until=item.days_until,
        )
        for item in upcoming(birthdays, now, days)
    ]


@router.get("/{birthday_id}", response_model=BirthdayResponse)
def get_birthday(
    birthday_id: UUID,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    birthday_storage: BirthdayStorage = Depends(get_birthday_storage),
):
    """Get a specific birthday."""
    birthday = get_owned_birthday(birthday_storage, birthday_id, principal)
    return BirthdayResponse.from_birthday(birthday)


@router.post("", response_model=BirthdayResponse, status_code=status.HTTP_201_CREATED)
def create_birthday(
    birthday_data: BirthdayCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    birthday_storage: BirthdayStorage = Depends(get_birthday_storage),
    category_storage: CategoryStorage = Depends(get_category_storage),
):
    """Create a new birthday."""
    month, day = parse_birth_date(birthday_data.birth_date)
    check_category(category_storage, birthday_data.category_id)

    birthday = birthday_storage.create(
        user_id=principal.user_id,
        name=birthday_data.name,
        birth_month=month,
        birth_day=day,
        category_id=birthday_data.category_id,
        notes=birthday_data.notes,
    )
    return BirthdayResponse.from_birthday(birthday)


@router.put("/{birthday_id}", response_model=BirthdayResponse)
def update_birthday(
    birthday_id: UUID,
    birthday_data: BirthdayUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    birthday_storage: BirthdayStorage = Depends(get_birthday_storage),
    category_storage: CategoryStorage = Depends(get_category_storage),
):
    """Update a birthday."""
    get_owned_birthday(birthday_storage, birthday_id, principal)

    # Update only provided fields
    changes = birthday_data.model_dump(exclude_unset=True)
    if "birth_date" in changes:
        birth_date = changes.pop("birth_date")
        if birth_date is None:
            raise ValidationError("Invalid birth date format, expected MM-DD")
        changes["birth_month"], changes["birth_day"] = parse_birth_date(birth_date)
    if changes.get("name", "") is None:
        raise ValidationError("Name cannot be empty")
    if "category_id" in changes:
        check_category(category_storage, changes["category_id"])

    updated = birthday_storage.update(birthday_id, **changes)
    return BirthdayResponse.from_birthday(updated)


@router.delete("/{birthday_id}", response_model=MessageResponse)
def delete_birthday(
    birthday_id: UUID,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    birthday_storage: BirthdayStorage = Depends(get_birthday_storage),
):
    """Delete a birthday."""
    get_owned_birthday(birthday_storage, birthday_id, principal)
    birthday_storage.delete(birthday_id)
    logger.info(f"User {principal.user_id} deleted birthday {birthday_id}")
    return MessageResponse(message="Birthday deleted successfully")
