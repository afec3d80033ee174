"""Tests for filters.py – grid queries."""
from datetime import date

from tkb_parser.filters import (
    available_lessons,
    is_active_in_week,
    is_active_on_date,
    meetings_at,
    overlaps_date_range,
    weekday_of,
    weekdays_shown,
)
from tkb_parser.models import CourseMeeting, Meeting, WeekRange
from tkb_parser.time_grid import DUT_LESSON_SLOTS

JAPANESE = CourseMeeting(
    id="5070040.2420.24.99",
    name="Tiếng Nhật 2 (CNTT)",
    instructor="Trần Thị Kim Ngân",
    meetings=[Meeting(2, "C128", 4, 5), Meeting(4, "C128", 4, 5)],
    active_weeks=[WeekRange(29, 44)],
)
CULTURE = CourseMeeting(
    id="Cơ sở văn hóa Việt Nam- 09",
    name="Cơ sở văn hóa Việt Nam",
    instructor="Phạm Thị Tú Trinh",
    meetings=[Meeting(3, "DB303", 6, 7)],
    active_weeks=[WeekRange(3, 18)],
    active_date_ranges=["16/09/2024- 29/12/2024"],
)


class TestWeekday:
    def test_weekday_of(self):
        assert weekday_of(date(2024, 9, 16)) == 2
        assert weekday_of(date(2024, 9, 21)) == 7
        assert weekday_of(date(2024, 9, 22)) == 8

    def test_weekdays_shown(self):
        assert weekdays_shown(False) == [2, 3, 4, 5, 6, 7, 8]
        assert weekdays_shown(True, today=date(2024, 9, 22)) == [8]


class TestActive:
    def test_week(self):
        assert is_active_in_week(JAPANESE, 29)
        assert is_active_in_week(JAPANESE, 44)
        assert not is_active_in_week(JAPANESE, 45)
        assert is_active_in_week(JAPANESE, None)

    def test_date(self):
        assert is_active_on_date(CULTURE, date(2024, 10, 1))
        assert not is_active_on_date(CULTURE, date(2025, 1, 1))
        assert is_active_on_date(JAPANESE, date(2025, 1, 1))

    def test_overlap(self):
        assert overlaps_date_range(CULTURE, date(2024, 12, 1), date(2025, 1, 31))
        assert not overlaps_date_range(CULTURE, date(2025, 1, 1), date(2025, 1, 31))


class TestGrid:
    def test_meetings_at(self):
        cell = meetings_at([JAPANESE, CULTURE], 2, 5)
        assert [(r.name, [m.room for m in ms]) for r, ms in cell] == [("Tiếng Nhật 2 (CNTT)", ["C128"])]
        assert meetings_at([JAPANESE], 2, 6) == []
        assert meetings_at([JAPANESE], 2, 5, week=10) == []

    def test_available_lessons(self):
        slots = available_lessons([JAPANESE, CULTURE], DUT_LESSON_SLOTS)
        assert [s.lesson_number for s in slots] == [4, 5, 6, 7]
        slots = available_lessons([JAPANESE, CULTURE], DUT_LESSON_SLOTS, week=30)
        assert [s.lesson_number for s in slots] == [4, 5]

    def test_inverted_meeting_renders_empty(self):
        odd = CourseMeeting(id="x", name="x", instructor="x", meetings=[Meeting(3, "C101", 10, 9)])
        assert available_lessons([odd], DUT_LESSON_SLOTS) == []
