"""Challenge calendar: week numbers, Monday dates and challenge status.

A challenge starts on a Monday and runs for ``CHALLENGE_WEEKS`` weeks.
Week 1 is the seven days beginning on the start date. All dates are plain
calendar dates with no time zone; "today" is always passed in.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Union

from cutplan.errors import DateError

CHALLENGE_WEEKS = 17

DateLike = Union[date, str]

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ChallengeStatus(Enum):
    PRE_CHALLENGE = "PRE_CHALLENGE"
    ACTIVE = "ACTIVE"
    COMPLETE = "COMPLETE"


def parse_date(value: DateLike) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string (dates pass through).

    Raises:
        DateError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE_RE.match(value.strip()):
        raise DateError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise DateError(f"Invalid date {value!r}: {e}") from e


def week_number(start_date: DateLike, target_date: DateLike) -> int:
    """1-based challenge week containing ``target_date``.

    The result is not clamped to the challenge length; dates after the
    last week give week numbers above ``CHALLENGE_WEEKS``.

    Raises:
        DateError: If ``target_date`` is before ``start_date``

    Example:
        >>> week_number("2024-01-01", "2024-01-08")
        2
    """
    start = parse_date(start_date)
    target = parse_date(target_date)
    days = (target - start).days
    if days < 0:
        raise DateError(f"{target.isoformat()} is before the challenge start {start.isoformat()}")
    return days // 7 + 1


def monday_date_for_week(start_date: DateLike, week: int) -> date:
    """First day of challenge week ``week``.

    Example:
        >>> monday_date_for_week("2024-01-01", 3)
        datetime.date(2024, 1, 15)
    """
    if week < 1:
        raise DateError(f"Week number must be at least 1, got {week}")
    return parse_date(start_date) + timedelta(days=(week - 1) * 7)


def week_dates(start_date: DateLike, week: int) -> list[date]:
    """The seven calendar dates of a challenge week."""
    monday = monday_date_for_week(start_date, week)
    return [monday + timedelta(days=i) for i in range(7)]


def current_week_number(start_date: DateLike, today: DateLike) -> int:
    """Week number for ``today``, or 0 before the challenge has started."""
    start = parse_date(start_date)
    current = parse_date(today)
    if current < start:
        return 0
    return week_number(start, current)


def day_of_challenge(start_date: DateLike, today: DateLike) -> int:
    """1-based day of the challenge, 0 before it starts."""
    days = (parse_date(today) - parse_date(start_date)).days
    return max(days + 1, 0)


def challenge_end_date(start_date: DateLike) -> date:
    """First day after the last challenge week."""
    return parse_date(start_date) + timedelta(days=CHALLENGE_WEEKS * 7)


def challenge_status(start_date: DateLike, today: DateLike) -> ChallengeStatus:
    start = parse_date(start_date)
    current = parse_date(today)
    if current < start:
        return ChallengeStatus.PRE_CHALLENGE
    if current >= challenge_end_date(start):
        return ChallengeStatus.COMPLETE
    return ChallengeStatus.ACTIVE


def monday_of_week(day: DateLike) -> date:
    """Monday of the ISO week containing ``day``."""
    d = parse_date(day)
    return d - timedelta(days=d.weekday())


def next_monday(today: DateLike) -> date:
    """The next Monday strictly after ``today``."""
    d = parse_date(today)
    return d + timedelta(days=7 - d.weekday())


def start_date_for_new_challenge(today: DateLike) -> date:
    """Today if it is a Monday, otherwise the coming Monday."""
    d = parse_date(today)
    if d.weekday() == 0:
        return d
    return next_monday(d)
