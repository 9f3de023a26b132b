"""Inclusive-day interval primitives shared by lane layout and conflict checks.

Both ends of an :class:`Interval` are calendar days that belong to the
interval. Overlap is evaluated on the half-open range ``[start, end + 1 day)``
so that back-to-back intervals never overlap while two intervals sharing a
single day always do. Lane assignment and the write-path conflict check must
both go through :func:`overlaps`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

from ..errors import InvalidDateFormat, InvalidRange

ONE_DAY = timedelta(days=1)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateLike = Union[date, str]


@dataclass(frozen=True)
class Interval:
    start: date
    end: date

    @property
    def end_exclusive(self) -> date:
        return self.end + ONE_DAY

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


def overlaps(a: Interval, b: Interval) -> bool:
    return a.start < b.end_exclusive and b.start < a.end_exclusive


def duration_days(interval: Interval) -> int:
    return (interval.end - interval.start).days + 1


def parse_iso_date(value: DateLike) -> date:
    # datetime is a date subclass; a time component is never a calendar date
    if isinstance(value, datetime):
        raise InvalidDateFormat(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value.strip()):
        raise InvalidDateFormat(value)
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidDateFormat(value) from exc


def make_interval(start: DateLike, end: DateLike) -> Interval:
    """Build an interval from boundary values, enforcing ``start <= end``."""
    start_date = parse_iso_date(start)
    end_date = parse_iso_date(end)
    if end_date < start_date:
        raise InvalidRange(start_date, end_date)
    return Interval(start=start_date, end=end_date)


__all__ = [
    "Interval",
    "ONE_DAY",
    "duration_days",
    "make_interval",
    "overlaps",
    "parse_iso_date",
]
