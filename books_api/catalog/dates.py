"""
Buddhist Era date handling.

Clients send publication dates in the Buddhist Era (BE), formatted as
``yyyy-MM-dd``. The catalogue stores and returns Gregorian dates, so
every incoming value goes through ``normalize_be_date`` which shifts
the year by 543 and checks that the result is a plausible publication
date: strictly after the year 1000 and not later than the current year.
"""

import re
from datetime import date
from typing import Optional

from .errors import InvalidDate

BUDDHIST_ERA_OFFSET = 543
MIN_YEAR_EXCLUSIVE = 1000

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def is_date_shaped(value: str) -> bool:
    return DATE_PATTERN.fullmatch(value) is not None


def normalize_be_date(value: str, today: Optional[date] = None) -> date:
    """Convert a Buddhist Era ``yyyy-MM-dd`` string into a Gregorian date.

    Parameters
    ----------
    value : str
        The BE date, e.g. ``"2568-09-14"``.
    today : Optional[date]
        Reference date for the upper bound on the year. Defaults to
        ``date.today()``; pass it explicitly to make the check
        deterministic.

    Returns
    -------
    date
        The Gregorian date, e.g. ``date(2025, 9, 14)``.

    Raises
    ------
    InvalidDate
        If the value is not ``yyyy-MM-dd``, the Gregorian year is not
        in ``(1000, today.year]`` or the month/day do not exist.
    """
    if not isinstance(value, str) or not is_date_shaped(value):
        raise InvalidDate("publishedDate must match yyyy-MM-dd")
    if today is None:
        today = date.today()

    year_be, month, day = (int(part) for part in value.split("-"))
    year_ad = year_be - BUDDHIST_ERA_OFFSET

    if year_ad <= MIN_YEAR_EXCLUSIVE:
        raise InvalidDate(f"year must be > {MIN_YEAR_EXCLUSIVE}")
    if year_ad > today.year:
        raise InvalidDate("year must not be in the future")
    # Leap days are checked against the Gregorian year.
    try:
        return date(year_ad, month, day)
    except ValueError as exc:
        raise InvalidDate("publishedDate is not a valid date") from exc


def to_buddhist_era(value: date) -> str:
    """Format a Gregorian date as a Buddhist Era ``yyyy-MM-dd`` string."""
    return f"{value.year + BUDDHIST_ERA_OFFSET:04d}-{value.month:02d}-{value.day:02d}"
