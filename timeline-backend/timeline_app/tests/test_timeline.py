from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from timeline_app.errors import InvalidRange
from timeline_app.models.timeline import DateRange
from timeline_app.services.interval_math import Interval
from timeline_app.services.timeline import MEAN_MONTH_DAYS, ZOOM_SPECS, TimeCoordinateSystem

JAN_1_TO_10 = DateRange(start=date(2024, 1, 1), end=date(2024, 1, 10))


def _coords(fixed_clock, zoom: str = "day", visible_range: DateRange = JAN_1_TO_10) -> TimeCoordinateSystem:
    return TimeCoordinateSystem(zoom_level=zoom, visible_range=visible_range, clock=fixed_clock)


def _days_in(visible_range: DateRange):
    current = visible_range.start
    while current <= visible_range.end:
        yield current
        current += timedelta(days=1)


def test_zoom_table_constants():
    assert {level: spec.column_width for level, spec in ZOOM_SPECS.items()} == {
        "hour": 40,
        "day": 60,
        "week": 120,
        "month": 180,
    }
    assert {level: spec.buffer_days for level, spec in ZOOM_SPECS.items()} == {
        "hour": 3,
        "day": 30,
        "week": 90,
        "month": 180,
    }


def test_set_zoom_centers_range_on_today(fixed_clock):
    coords = TimeCoordinateSystem(zoom_level="day", clock=fixed_clock)
    assert coords.visible_range == DateRange(start=date(2023, 12, 21), end=date(2024, 1, 20))
    assert len(coords.columns()) == 31

    coords.set_zoom("hour")
    assert coords.visible_range == DateRange(start=date(2024, 1, 4), end=date(2024, 1, 6))
    assert len(coords.columns()) == 72


def test_unknown_zoom_level_is_rejected(fixed_clock):
    with pytest.raises(ValueError):
        TimeCoordinateSystem(zoom_level="decade", clock=fixed_clock)


def test_reversed_visible_range_is_rejected(fixed_clock):
    coords = _coords(fixed_clock)
    with pytest.raises(InvalidRange):
        coords.set_visible_range("2024-01-10", "2024-01-01")
    assert coords.visible_range == JAN_1_TO_10


def test_day_columns_labels_and_flags(fixed_clock):
    columns = _coords(fixed_clock).columns()
    assert len(columns) == 10
    assert (columns[0].label, columns[0].sub_label) == ("1", "Mon")
    assert [column.date.day for column in columns if column.is_weekend] == [6, 7]
    assert [column.date.day for column in columns if column.is_today] == [5]
    assert all(column.width == 60 for column in columns)


def test_hour_columns_use_twelve_hour_labels(fixed_clock):
    coords = _coords(fixed_clock, "hour", DateRange(start=date(2024, 1, 5), end=date(2024, 1, 5)))
    columns = coords.columns()
    assert len(columns) == 24
    assert [columns[i].label for i in (0, 1, 11, 12, 13, 23)] == ["12 AM", "1 AM", "11 AM", "12 PM", "1 PM", "11 PM"]
    assert columns[0].sub_label == "Jan 5"
    assert all(column.is_today for column in columns)


def test_week_columns_use_iso_week_numbers(fixed_clock):
    coords = TimeCoordinateSystem(zoom_level="week", clock=fixed_clock)
    assert coords.visible_range == DateRange(start=date(2023, 11, 21), end=date(2024, 2, 19))
    columns = coords.columns()
    assert len(columns) == 13
    assert (columns[0].label, columns[0].sub_label) == ("W47", "Nov")
    assert [column.date.date() for column in columns[:2]] == [date(2023, 11, 21), date(2023, 11, 28)]


def test_month_columns_step_by_calendar_month(fixed_clock):
    coords = TimeCoordinateSystem(zoom_level="month", clock=fixed_clock)
    columns = coords.columns()
    assert [column.label for column in columns] == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]
    assert [column.sub_label for column in columns] == ["2023", "2023", "2023", "2024", "2024", "2024"]


def test_month_columns_clamp_without_drifting(fixed_clock):
    coords = _coords(fixed_clock, "month", DateRange(start=date(2024, 1, 31), end=date(2024, 5, 31)))
    assert [column.date.date() for column in coords.columns()] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
        date(2024, 5, 31),
    ]


def test_columns_are_cached_until_state_changes(fixed_clock):
    coords = _coords(fixed_clock)
    first = coords.columns()
    assert coords.columns() is first
    coords.set_zoom("week")
    assert coords.columns() is not first
    assert coords.columns()[0].width == 120


def test_date_to_pixel_day_zoom(fixed_clock):
    coords = _coords(fixed_clock)
    assert coords.date_to_pixel(date(2024, 1, 5)) == 4 * 60
    assert coords.date_to_pixel("2024-01-01") == 0
    assert coords.date_to_pixel(datetime(2024, 1, 1, 12, 0)) == pytest.approx(30)


def test_date_to_pixel_other_zooms(fixed_clock):
    assert _coords(fixed_clock, "hour").date_to_pixel(datetime(2024, 1, 1, 3, 0)) == pytest.approx(3 * 40)
    assert _coords(fixed_clock, "week").date_to_pixel(date(2024, 1, 15)) == pytest.approx(2 * 120)
    assert _coords(fixed_clock, "month").date_to_pixel(date(2024, 1, 31)) == pytest.approx(30 / MEAN_MONTH_DAYS * 180)


@pytest.mark.parametrize("zoom", ["hour", "day", "week", "month"])
def test_date_to_pixel_is_monotonic(fixed_clock, zoom):
    coords = _coords(fixed_clock, zoom)
    pixels = [coords.date_to_pixel(day) for day in _days_in(JAN_1_TO_10)]
    assert pixels == sorted(pixels)


def test_pixel_to_date_floors_to_whole_units(fixed_clock):
    coords = _coords(fixed_clock)
    assert coords.pixel_to_date(0) == datetime(2024, 1, 1)
    assert coords.pixel_to_date(59.9) == datetime(2024, 1, 1)
    assert coords.pixel_to_date(60) == datetime(2024, 1, 2)
    assert coords.pixel_to_date(-25) == datetime(2024, 1, 1)
    assert _coords(fixed_clock, "hour").pixel_to_date(85) == datetime(2024, 1, 1, 2, 0)


@pytest.mark.parametrize("zoom, unit", [("hour", timedelta(hours=1)), ("day", timedelta(days=1)), ("week", timedelta(days=7))])
def test_round_trip_stays_within_one_unit(fixed_clock, zoom, unit):
    visible_range = DateRange(start=date(2024, 1, 1), end=date(2024, 3, 31))
    coords = _coords(fixed_clock, zoom, visible_range)
    for day in _days_in(visible_range):
        moment = datetime.combine(day, datetime.min.time())
        restored = coords.pixel_to_date(coords.date_to_pixel(moment))
        assert restored <= moment
        assert moment - restored < unit


def test_round_trip_day_zoom_is_exact(fixed_clock):
    coords = _coords(fixed_clock)
    for day in _days_in(JAN_1_TO_10):
        assert coords.pixel_to_date(coords.date_to_pixel(day)).date() == day


def test_round_trip_hour_zoom_inside_the_day(fixed_clock):
    coords = _coords(fixed_clock, "hour")
    for day in _days_in(DateRange(start=date(2024, 1, 1), end=date(2024, 1, 3))):
        for minutes in range(0, 24 * 60, 15):
            moment = datetime.combine(day, datetime.min.time()) + timedelta(minutes=minutes)
            restored = coords.pixel_to_date(coords.date_to_pixel(moment))
            assert restored <= moment
            assert moment - restored < timedelta(hours=1)

    assert coords.pixel_to_date(coords.date_to_pixel(datetime(2024, 1, 2, 5, 30))) == datetime(2024, 1, 2, 5, 0)
    assert coords.pixel_to_date(coords.date_to_pixel(datetime(2024, 1, 1, 23, 45))) == datetime(2024, 1, 1, 23, 0)


def test_round_trip_month_zoom_within_one_mean_month(fixed_clock):
    visible_range = DateRange(start=date(2024, 1, 1), end=date(2024, 6, 30))
    coords = _coords(fixed_clock, "month", visible_range)
    for day in _days_in(visible_range):
        restored = coords.pixel_to_date(coords.date_to_pixel(day)).date()
        assert restored <= day
        assert (day - restored).days < MEAN_MONTH_DAYS + 1


def test_month_zoom_pixel_to_date_uses_mean_month(fixed_clock):
    coords = _coords(fixed_clock, "month", DateRange(start=date(2024, 1, 1), end=date(2024, 6, 30)))
    assert coords.pixel_to_date(0) == datetime(2024, 1, 1)
    # 2 * 30.44 days floors to 60 days, which is Mar 1 in a leap year
    assert coords.pixel_to_date(2 * 180) == datetime(2024, 3, 1)
    assert coords.pixel_to_date(3 * 180 + 10) == datetime(2024, 4, 1)
    assert coords.pixel_to_date(coords.date_to_pixel(date(2024, 4, 1))) == datetime(2024, 3, 1)


def test_bar_geometry_spans_inclusive_end_day(fixed_clock):
    geometry = _coords(fixed_clock).bar_geometry(Interval(start=date(2024, 1, 3), end=date(2024, 1, 5)))
    assert (geometry.left, geometry.width) == (120, 180)

    single_day = _coords(fixed_clock).bar_geometry(Interval(start=date(2024, 1, 3), end=date(2024, 1, 3)))
    assert single_day.width == 60

    week = _coords(fixed_clock, "week").bar_geometry(Interval(start=date(2024, 1, 1), end=date(2024, 1, 7)))
    assert week.left == 0
    assert week.width == pytest.approx(120)


def test_today_pixel_and_centering_offset(fixed_clock):
    coords = _coords(fixed_clock)
    assert coords.today_pixel() == pytest.approx(4 * 60 + 9.5 / 24 * 60)
    assert coords.centering_scroll_offset(200) == pytest.approx(coords.today_pixel() - 100)
    assert coords.centering_scroll_offset(1000) == 0


def test_total_width_and_format_date(fixed_clock):
    coords = _coords(fixed_clock)
    assert coords.total_width == 600
    assert TimeCoordinateSystem.format_date("2024-01-05") == "Jan 5, 2024"
