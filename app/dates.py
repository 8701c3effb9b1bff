"""Birthday date rules.

Birthdays are stored as a recurring (month, day) pair with no year. February
always allows 29 days, whatever the year.
"""

import calendar
from datetime import datetime, timedelta
from typing import Iterable, List, NamedTuple, Tuple

from .errors import InvalidDay, InvalidMonth, ValidationError

UPCOMING_WINDOW_DAYS = 30


def days_in_month(month: int) -> int:
    """Return the maximum valid day for a birthday in ``month``."""
    if month in (4, 6, 9, 11):
        return 30
    if month == 2:
        return 29
    return 31


def validate_date(month: int, day: int) -> None:
    """Raise InvalidMonth or InvalidDay unless (month, day) is a valid birthday."""
    if not 1 <= month <= 12:
        raise InvalidMonth(month)
    if not 1 <= day <= days_in_month(month):
        raise InvalidDay(month)


def _parse_component(value: str, error) -> int:
    if not (1 <= len(value) <= 2 and value.isascii() and value.isdigit()):
        raise error
    return int(value, 10)


def parse_birth_date(value: str) -> Tuple[int, int]:
    """Parse an ``MM-DD`` string into (month, day)."""
    parts = value.split("-")
    if len(parts) != 2:
        raise ValidationError("Invalid birth date format, expected MM-DD")

    month = _parse_component(parts[0], InvalidMonth())
    day = _parse_component(parts[1], InvalidDay())
    validate_date(month, day)
    return month, day


def format_birth_date(month: int, day: int) -> str:
    return f"{month:02d}-{day:02d}"


def _occurrence_in_year(year: int, month: int, day: int, tzinfo) -> datetime:
    # Feb 29 falls on Mar 1 in common years
    if month == 2 and day == 29 and not calendar.isleap(year):
        month, day = 3, 1
    return datetime(year, month, day, tzinfo=tzinfo)


def next_occurrence(month: int, day: int, reference: datetime) -> datetime:
    """Return the first midnight on (month, day) that is not before ``reference``.

    The result uses the timezone of ``reference``. A birthday whose midnight
    already passed today counts as next year's.
    """
    candidate = _occurrence_in_year(reference.year, month, day, reference.tzinfo)
    if candidate < reference:
        candidate = _occurrence_in_year(reference.year + 1, month, day, reference.tzinfo)
    return candidate


def is_upcoming(
    occurrence: datetime,
    reference: datetime,
    window_days: int = UPCOMING_WINDOW_DAYS,
) -> bool:
    """True iff ``occurrence`` lies strictly inside (reference, reference + window)."""
    return reference < occurrence < reference + timedelta(days=window_days)


class Upcoming(NamedTuple):
    birthday: object
    occurrence: datetime
    days_until: int


def upcoming(
    birthdays: Iterable,
    reference: datetime,
    window_days: int = UPCOMING_WINDOW_DAYS,
) -> List[Upcoming]:
    """Select birthdays whose next occurrence is upcoming, soonest first.

    Each birthday needs ``birth_month`` and ``birth_day`` attributes.
    """
    result = []
    for birthday in birthdays:
        occurrence = next_occurrence(birthday.birth_month, birthday.birth_day, reference)
        if is_upcoming(occurrence, reference, window_days):
            days_until = (occurrence.date() - reference.date()).days
            result.append(Upcoming(birthday, occurrence, days_until))
    result.sort(key=lambda item: item.occurrence)
    return result
