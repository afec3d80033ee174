"""Tests for institutions.py and time_grid.py – profiles, registry, calendar."""
import dataclasses
from datetime import date, time

import pytest

from tkb_parser.institutions import (
    DUT,
    INSTITUTIONS,
    MERGE_TIME_RANGES,
    UFL,
    Layout,
    SemesterCalendar,
    get_default_institution,
    get_institution_by_id,
)
from tkb_parser.models import WeekRange
from tkb_parser.state import MemoryStore
from tkb_parser.time_grid import DUT_LESSON_SLOTS, UFL_LESSON_SLOTS, find_slot, lesson_time_range


class TestRegistry:
    def test_order(self):
        assert [p.id for p in INSTITUTIONS] == ["dut", "ufl"]

    def test_lookup(self):
        assert get_institution_by_id("ufl") is UFL
        assert get_institution_by_id("nope") is DUT
        assert get_institution_by_id(None) is DUT

    def test_default_prefers_saved(self):
        assert get_default_institution(MemoryStore({"selectedUniversity": "ufl"})) is UFL

    def test_default_unknown_saved(self):
        assert get_default_institution(MemoryStore({"selectedUniversity": "hcmut"})) is DUT

    def test_default_without_store(self):
        assert get_default_institution() is DUT
        assert get_default_institution(MemoryStore()) is DUT


class TestProfiles:
    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DUT.id = "x"

    def test_features(self):
        assert DUT.features.supports_week_filter
        assert not DUT.features.supports_date_range_filter
        assert UFL.features.supports_date_range_filter
        assert UFL.features.custom_defaults() == {MERGE_TIME_RANGES: False}

    def test_parser_family(self):
        assert not DUT.is_positional
        assert UFL.is_positional

    def test_max_lesson(self):
        assert DUT.max_lesson == 14
        assert UFL.max_lesson == 14


class TestSemesterCalendar:
    def test_ufl_anchors(self):
        cal = UFL.calendar
        assert cal.anchor_for(2024, Layout.TWO_LINE) == date(2024, 9, 1)
        assert cal.anchor_for(2024, Layout.MULTI_RANGE) == date(2024, 9, 1)
        assert cal.anchor_for(2024, Layout.THREE_TIMELINE) == date(2024, 12, 1)
        assert cal.anchor_for(2025, Layout.MULTI_RANGE) == date(2025, 2, 3)

    def test_rule_without_layout(self):
        cal = SemesterCalendar(anchors=((2026, None, date(2026, 8, 17)),))
        assert cal.anchor_for(2026, Layout.THREE_TIMELINE) == date(2026, 8, 17)

    def test_week_range(self):
        cal = SemesterCalendar()
        assert cal.week_range(date(2025, 2, 3), date(2025, 2, 16)) == WeekRange(1, 2)

    def test_week_clamped_to_one(self):
        cal = SemesterCalendar()
        assert cal.week_of(date(2025, 1, 1), date(2025, 2, 3)) == 1


class TestTimeGrid:
    def test_find_slot(self):
        assert find_slot(DUT_LESSON_SLOTS, 4).start == "10:00"
        assert find_slot(DUT_LESSON_SLOTS, 15) is None

    def test_lesson_time_range(self):
        assert lesson_time_range(DUT_LESSON_SLOTS, 4, 5) == (time(10, 0), time(11, 50))
        assert lesson_time_range(UFL_LESSON_SLOTS, 6, 7) == (time(11, 30), time(13, 50))

    def test_inverted_or_out_of_catalog(self):
        assert lesson_time_range(DUT_LESSON_SLOTS, 10, 9) is None
        assert lesson_time_range(DUT_LESSON_SLOTS, 1, 20) is None

    def test_ufl_numbers_unique(self):
        numbers = [s.lesson_number for s in UFL_LESSON_SLOTS]
        assert numbers == list(range(1, 15))
