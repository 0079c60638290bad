from datetime import date, datetime

from src.wakeup_streak.wakeup_streak.common.calendar import (
    MONDAY,
    days_between,
    deadline_for,
    is_same_day,
    next_occurrence,
    start_of_day,
    start_of_week,
)


def test_start_of_day_drops_time():
    assert start_of_day(datetime(2026, 2, 3, 23, 59, 59, 999)) == datetime(2026, 2, 3)


def test_start_of_week_is_previous_sunday_midnight():
    # 2026-02-04 is a Wednesday
    assert start_of_week(datetime(2026, 2, 4, 15, 30)) == datetime(2026, 2, 1)


def test_start_of_week_on_anchor_day_is_same_day():
    assert start_of_week(datetime(2026, 2, 1, 0, 0)) == datetime(2026, 2, 1)
    assert start_of_week(datetime(2026, 2, 1, 23, 59)) == datetime(2026, 2, 1)


def test_start_of_week_crosses_year_boundary():
    # 2026-01-01 is a Thursday; its Sunday is in 2025
    assert start_of_week(datetime(2026, 1, 1, 9, 0)) == datetime(2025, 12, 28)


def test_start_of_week_with_monday_anchor():
    assert start_of_week(datetime(2026, 2, 1, 9, 0), anchor_weekday=MONDAY) == datetime(2026, 1, 26)


def test_days_between_counts_calendar_days():
    assert days_between(datetime(2026, 1, 31, 23, 59), datetime(2026, 2, 1, 0, 1)) == 1
    assert days_between(datetime(2025, 12, 28), datetime(2026, 1, 4, 0, 0)) == 7
    assert days_between(date(2026, 2, 8), date(2026, 2, 1)) == -7


def test_is_same_day_handles_missing_values():
    assert is_same_day(datetime(2026, 2, 1, 6), datetime(2026, 2, 1, 23)) is True
    assert is_same_day(datetime(2026, 2, 1, 23, 59), datetime(2026, 2, 2, 0, 0)) is False
    assert is_same_day(None, datetime(2026, 2, 1)) is False
    assert is_same_day(datetime(2026, 2, 1), None) is False


def test_deadline_for_uses_now_date():
    assert deadline_for(datetime(2026, 2, 2, 12, 0), hour=7, minute=5) == datetime(2026, 2, 2, 7, 5)


def test_next_occurrence_later_today_or_tomorrow():
    assert next_occurrence(datetime(2026, 2, 2, 11, 59), hour=12, minute=0) == datetime(2026, 2, 2, 12, 0)
    assert next_occurrence(datetime(2026, 2, 2, 12, 0), hour=12, minute=0) == datetime(2026, 2, 3, 12, 0)
    assert next_occurrence(datetime(2026, 12, 31, 13, 0), hour=12, minute=0) == datetime(2027, 1, 1, 12, 0)
