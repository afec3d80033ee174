"""
Institution profiles: per-school features, lesson catalog, text grammar and
semester calendar.

Profiles are immutable module-level data. The caller (UI, CLI) selects one
and passes it into every parse call; nothing here is mutated at runtime.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Pattern, Tuple

from .models import WeekRange
from .state import SELECTED_UNIVERSITY, KeyValueStore
from .time_grid import DUT_LESSON_SLOTS, UFL_LESSON_SLOTS, LessonSlot


class RecordPolicy(enum.Enum):
    """What a parser family does with a course it could only partly decode."""
    # emit the record with blank / empty fields (regex grammar family)
    DEGRADE = "degrade"
    # drop the whole candidate (positional family)
    DROP = "drop"


class Layout(str, enum.Enum):
    """Line-span layouts of the UFL export."""
    TWO_LINE = "two-line"
    MULTI_RANGE = "multi-range"
    THREE_TIMELINE = "three-timeline"


# ──────────────────────────────────────────────────────────────────
#  Grammar
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Grammar:
    """
    Whole-line pattern plus the sub-patterns used to split its compound
    columns.

    ``line`` must use named groups for every entry of ``columns``. Leading
    columns (sequence number, identifier) are optional in the pattern, so
    the course identifier is located by walking ``columns`` in order and
    testing each one against ``identifier``; the columns after the anchor
    are read as name, instructor, times and weeks.
    """
    line: Pattern[str]
    identifier: Pattern[str]
    date_token_splitter: Pattern[str]
    single_date_token: Pattern[str]
    week_range_token: Pattern[str]
    weeks_charset: Pattern[str] = re.compile(r"[\d+,\-./:;]+")
    columns: Tuple[str, ...] = ("seq", "id", "name", "instructor", "times", "weeks")

    def anchor_columns(self) -> Tuple[str, ...]:
        # an anchor needs name, instructor, times and weeks after it
        return self.columns[: max(len(self.columns) - 4, 0)]


_SUNDAY = r"[Cc][Hh][Ủủ] ?[Nn][Hh][Ậậ][Tt]"

DUT_GRAMMAR = Grammar(
    line=re.compile(
        r"^(?:(?P<seq>\d+)\t)?"
        r"(?:(?P<id>[A-Za-z0-9.]+)\t)?"
        r"(?P<name>[^\t]+)\t"
        r"(?:[^\t]*\t){3}"
        r"(?P<instructor>[^\t]+)\t"
        r"(?P<times>(?:Thứ \d+|" + _SUNDAY + r"),\d+-\d+,[^\t]+)\t"
        r"(?P<weeks>[\d+,\-./:;]+)"
    ),
    identifier=re.compile(r"^(?=.*\d)(?=.*\.)[A-Za-z0-9.]+$"),
    date_token_splitter=re.compile(r"(?:Thứ \d+|" + _SUNDAY + r"),\d+-\d+,[^\t;]+"),
    single_date_token=re.compile(
        r"(?:Thứ (?P<weekday>\d+)|" + _SUNDAY + r"),"
        r"(?P<start>\d+)-(?P<end>\d+),(?P<room>.+)$"
    ),
    week_range_token=re.compile(r"(\d+)-(\d+)"),
)


# ──────────────────────────────────────────────────────────────────
#  Features
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CustomFeature:
    id: str
    label: str
    default: bool = False


MERGE_TIME_RANGES = "mergeTimeRanges"


@dataclass(frozen=True)
class Features:
    supports_week_filter: bool = False
    supports_date_range_filter: bool = False
    supports_today_filter: bool = True
    supports_only_available_filter: bool = True
    custom_features: Tuple[CustomFeature, ...] = ()

    def custom_defaults(self) -> Dict[str, bool]:
        return {f.id: f.default for f in self.custom_features}


# ──────────────────────────────────────────────────────────────────
#  Semester calendar
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SemesterCalendar:
    """
    Chooses the semester start used to turn absolute dates into week numbers.

    ``anchors`` holds explicit ``(year, layout, start)`` rules; a layout of
    None matches every layout of that year. Years without a rule anchor to
    ``default_month``/``default_day`` of the same year.
    """
    anchors: Tuple[Tuple[int, Optional[Layout], date], ...] = ()
    default_month: int = 2
    default_day: int = 3
    fallback: WeekRange = WeekRange(1, 16)

    def anchor_for(self, year: int, layout: Optional[Layout] = None) -> date:
        for rule_year, rule_layout, start in self.anchors:
            if rule_year == year and rule_layout in (None, layout):
                return start
        return date(year, self.default_month, self.default_day)

    def week_of(self, day: date, anchor: date) -> int:
        return max(1, (day - anchor).days // 7 + 1)

    def week_range(self, start: date, end: date, layout: Optional[Layout] = None) -> WeekRange:
        anchor = self.anchor_for(start.year, layout)
        return WeekRange(self.week_of(start, anchor), self.week_of(end, anchor))


# ──────────────────────────────────────────────────────────────────
#  Profiles
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InstitutionProfile:
    id: str
    name: str
    short_name: str
    url: str
    instructions: str
    placeholder: str
    features: Features
    lesson_slots: Tuple[LessonSlot, ...]
    record_policy: RecordPolicy
    grammar: Optional[Grammar] = None
    calendar: SemesterCalendar = field(default_factory=SemesterCalendar)
    noise_tokens: Tuple[str, ...] = ()

    @property
    def is_positional(self) -> bool:
        return self.grammar is None

    @property
    def max_lesson(self) -> int:
        return max(s.lesson_number for s in self.lesson_slots)


DUT = InstitutionProfile(
    id="dut",
    name="Đại học Bách khoa - Đại học Đà Nẵng",
    short_name="DUT",
    url="https://dut.udn.vn",
    instructions=(
        "Truy cập vào trang Sinh viên > Cá nhân > Lịch học, thi & khảo sát ý kiến, "
        "sau đó copy bảng lịch học vào đây."
    ),
    placeholder="Dán bảng đã copy từ trang sinh viên DUT vào đây...",
    features=Features(supports_week_filter=True),
    lesson_slots=DUT_LESSON_SLOTS,
    record_policy=RecordPolicy.DEGRADE,
    grammar=DUT_GRAMMAR,
)

UFL = InstitutionProfile(
    id="ufl",
    name="Đại học Ngoại Ngữ - Đại học Đà Nẵng",
    short_name="UFL",
    url="https://ufl.udn.vn/",
    instructions=(
        "Truy cập vào hệ thống quản lý học tập, tìm phần lịch học và "
        "copy bảng thời khóa biểu."
    ),
    placeholder="Dán bảng đã copy từ trang sinh viên UFL vào đây...",
    features=Features(
        supports_date_range_filter=True,
        custom_features=(CustomFeature(MERGE_TIME_RANGES, "Gộp mốc thời gian", False),),
    ),
    lesson_slots=UFL_LESSON_SLOTS,
    record_policy=RecordPolicy.DROP,
    calendar=SemesterCalendar(
        anchors=(
            (2024, Layout.TWO_LINE, date(2024, 9, 1)),
            (2024, Layout.MULTI_RANGE, date(2024, 9, 1)),
            (2024, Layout.THREE_TIMELINE, date(2024, 12, 1)),
        ),
    ),
    noise_tokens=("Xem", "Chi tiết", "Xem chi tiết", "Đóng"),
)

INSTITUTIONS: Tuple[InstitutionProfile, ...] = (DUT, UFL)


def get_institution_by_id(institution_id: str | None) -> InstitutionProfile:
    """Profile with the given id, or the first registered one."""
    for profile in INSTITUTIONS:
        if profile.id == institution_id:
            return profile
    return INSTITUTIONS[0]


def get_default_institution(store: KeyValueStore | None = None) -> InstitutionProfile:
    """Last persisted ``selectedUniversity`` if it is known, else the first profile."""
    saved = store.get(SELECTED_UNIVERSITY) if store is not None else None
    if saved:
        for profile in INSTITUTIONS:
            if profile.id == saved:
                return profile
    return INSTITUTIONS[0]
