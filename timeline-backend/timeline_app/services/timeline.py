"""Time coordinate system for the work center timeline.

Maps calendar dates to horizontal pixel offsets (and back) for the four zoom
levels, and generates the header/grid column sequence. Everything that varies
by zoom level lives in one :data:`ZOOM_SPECS` table entry.

Month zoom converts elapsed days with a fixed mean month of 30.44 days in both
directions, while the month columns themselves step by calendar month.
Positions far from the range start therefore drift by up to a day or two
against the column grid; this is a known precision limit of the month view.
"""

from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Optional, Tuple, Union

from ..errors import InvalidRange
from ..models.timeline import BarGeometry, DateRange, TimelineColumn
from .interval_math import ONE_DAY, Interval, parse_iso_date

logger = logging.getLogger(__name__)

MEAN_MONTH_DAYS = 30.44
SECONDS_PER_DAY = 86400.0

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

Moment = Union[date, datetime, str]


def _month_abbr(value: datetime) -> str:
    return _MONTHS[value.month - 1]


def _add_months(value: datetime, months: int) -> datetime:
    index = value.month - 1 + months
    year = value.year + index // 12
    month = index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _elapsed_days(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def _hour_label(value: datetime) -> str:
    hour = value.hour % 12 or 12
    return f"{hour} {'AM' if value.hour < 12 else 'PM'}"


@dataclass(frozen=True)
class ZoomSpec:
    level: str
    column_width: int
    buffer_days: int
    # origin stepped by n whole units
    step: Callable[[datetime, int], datetime]
    # instant n whole units after origin on the pixel scale
    locate: Callable[[datetime, int], datetime]
    units_between: Callable[[datetime, datetime], float]
    label: Callable[[datetime], str]
    sub_label: Callable[[datetime], str]


ZOOM_SPECS: Dict[str, ZoomSpec] = {
    "hour": ZoomSpec(
        level="hour",
        column_width=40,
        buffer_days=3,
        step=lambda origin, n: origin + timedelta(hours=n),
        locate=lambda origin, n: origin + timedelta(hours=n),
        units_between=lambda start, end: (end - start).total_seconds() / 3600,
        label=_hour_label,
        sub_label=lambda value: f"{_month_abbr(value)} {value.day}",
    ),
    "day": ZoomSpec(
        level="day",
        column_width=60,
        buffer_days=30,
        step=lambda origin, n: origin + timedelta(days=n),
        locate=lambda origin, n: origin + timedelta(days=n),
        units_between=_elapsed_days,
        label=lambda value: str(value.day),
        sub_label=lambda value: _WEEKDAYS[value.weekday()],
    ),
    "week": ZoomSpec(
        level="week",
        column_width=120,
        buffer_days=90,
        step=lambda origin, n: origin + timedelta(days=7 * n),
        locate=lambda origin, n: origin + timedelta(days=7 * n),
        units_between=lambda start, end: _elapsed_days(start, end) / 7,
        label=lambda value: f"W{value.isocalendar()[1]}",
        sub_label=_month_abbr,
    ),
    "month": ZoomSpec(
        level="month",
        column_width=180,
        buffer_days=180,
        step=_add_months,
        locate=lambda origin, n: origin + timedelta(days=math.floor(n * MEAN_MONTH_DAYS)),
        units_between=lambda start, end: _elapsed_days(start, end) / MEAN_MONTH_DAYS,
        label=_month_abbr,
        sub_label=lambda value: str(value.year),
    ),
}


def zoom_spec(level: str) -> ZoomSpec:
    try:
        return ZOOM_SPECS[level]
    except KeyError:
        raise ValueError(f"Unsupported zoom level: {level}") from None


def _as_datetime(value: Moment) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(parse_iso_date(value), time.min)


class TimeCoordinateSystem:
    """Zoom level plus visible range, with date/pixel conversions.

    ``set_zoom`` and ``set_visible_range`` are the only mutators; every other
    method is a pure query over the current state. The column sequence is
    cached until the next mutation.
    """

    def __init__(
        self,
        zoom_level: str = "day",
        visible_range: Optional[DateRange] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._columns: Optional[Tuple[TimelineColumn, ...]] = None
        self.set_zoom(zoom_level)
        if visible_range is not None:
            self.set_visible_range(visible_range.start, visible_range.end)

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def zoom_level(self) -> str:
        return self._spec.level

    @property
    def visible_range(self) -> DateRange:
        return self._range

    @property
    def column_width(self) -> int:
        return self._spec.column_width

    def today(self) -> date:
        return self._clock().date()

    def set_zoom(self, level: str) -> None:
        spec = zoom_spec(level)
        today = self.today()
        half = spec.buffer_days // 2
        self._spec = spec
        self._range = DateRange(start=today - timedelta(days=half), end=today + timedelta(days=half))
        self._columns = None
        logger.debug("timeline_zoom level=%s start=%s end=%s", level, self._range.start, self._range.end)

    def set_visible_range(self, start: Moment, end: Moment) -> None:
        start_date = parse_iso_date(start)
        end_date = parse_iso_date(end)
        if end_date < start_date:
            raise InvalidRange(start_date, end_date)
        self._range = DateRange(start=start_date, end=end_date)
        self._columns = None

    @property
    def _origin(self) -> datetime:
        return datetime.combine(self._range.start, time.min)

    # ------------------------------------------------------------------ #
    # Columns
    # ------------------------------------------------------------------ #

    def columns(self) -> Tuple[TimelineColumn, ...]:
        if self._columns is None:
            self._columns = tuple(self._generate_columns())
        return self._columns

    def _generate_columns(self):
        spec = self._spec
        origin = self._origin
        stop = datetime.combine(self._range.end + ONE_DAY, time.min)
        today = self.today()
        index = 0
        current = origin
        while current < stop:
            yield TimelineColumn(
                date=current,
                label=spec.label(current),
                sub_label=spec.sub_label(current),
                is_today=current.date() == today,
                is_weekend=current.weekday() >= 5,
                width=spec.column_width,
            )
            index += 1
            current = spec.step(origin, index)

    @property
    def total_width(self) -> int:
        return len(self.columns()) * self._spec.column_width

    # ------------------------------------------------------------------ #
    # Conversions
    # ------------------------------------------------------------------ #

    def date_to_pixel(self, value: Moment) -> float:
        units = self._spec.units_between(self._origin, _as_datetime(value))
        return units * self._spec.column_width

    def pixel_to_date(self, pixel: float) -> datetime:
        """Instant under ``pixel``, floored to a whole time unit and clamped at the range start."""
        units = max(0, math.floor(pixel / self._spec.column_width))
        return self._spec.locate(self._origin, units)

    def bar_geometry(self, interval: Interval) -> BarGeometry:
        left = self.date_to_pixel(interval.start)
        width = self.date_to_pixel(interval.end + ONE_DAY) - left
        return BarGeometry(left=left, width=width)

    def today_pixel(self) -> float:
        return self.date_to_pixel(self._clock())

    def centering_scroll_offset(self, viewport_width: float) -> float:
        return max(0.0, self.today_pixel() - viewport_width / 2)

    @staticmethod
    def format_date(value: Moment) -> str:
        moment = _as_datetime(value)
        return f"{_month_abbr(moment)} {moment.day}, {moment.year}"


__all__ = [
    "MEAN_MONTH_DAYS",
    "TimeCoordinateSystem",
    "ZOOM_SPECS",
    "ZoomSpec",
    "zoom_spec",
]
