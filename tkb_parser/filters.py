"""
Queries the timetable grid runs over parsed records: which courses are on
in a given week or date, what sits in a weekday × lesson cell, and which
lessons are used at all ("chỉ hiển thị mốc thời gian có lịch học").
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from .merge import parse_date_range
from .models import SUNDAY, CourseMeeting, Meeting
from .time_grid import LessonSlot


def weekday_of(day: date) -> int:
    """Portal weekday number of a date: Monday -> 2 ... Sunday -> 8."""
    return day.weekday() + 2


def is_active_in_week(record: CourseMeeting, week: Optional[int]) -> bool:
    if week is None:
        return True
    return any(w.contains(week) for w in record.active_weeks)


def is_active_on_date(record: CourseMeeting, day: date) -> bool:
    """Date-range institutions only; records without ranges count as active."""
    ranges = [r for r in (parse_date_range(t) for t in record.active_date_ranges) if r]
    if not ranges:
        return True
    return any(start <= day <= end for start, end in ranges)


def overlaps_date_range(record: CourseMeeting, start: date, end: date) -> bool:
    ranges = [r for r in (parse_date_range(t) for t in record.active_date_ranges) if r]
    if not ranges:
        return True
    return any(r_start <= end and start <= r_end for r_start, r_end in ranges)


def meetings_at(
    records: Iterable[CourseMeeting],
    weekday: int,
    lesson_number: int,
    week: Optional[int] = None,
) -> List[Tuple[CourseMeeting, List[Meeting]]]:
    """Courses (and their matching meetings) occupying one grid cell."""
    cell: List[Tuple[CourseMeeting, List[Meeting]]] = []
    for record in records:
        if not is_active_in_week(record, week):
            continue
        hits = [
            m for m in record.meetings
            if m.weekday == weekday and m.covers(lesson_number)
        ]
        if hits:
            cell.append((record, hits))
    return cell


def available_lessons(
    records: Sequence[CourseMeeting],
    catalog: Sequence[LessonSlot],
    week: Optional[int] = None,
) -> List[LessonSlot]:
    """Catalog slots covered by at least one meeting."""
    active = [r for r in records if is_active_in_week(r, week)]
    return [
        slot for slot in catalog
        if any(m.covers(slot.lesson_number) for r in active for m in r.meetings)
    ]


def weekdays_shown(only_today: bool, today: Optional[date] = None) -> List[int]:
    if only_today:
        return [weekday_of(today or date.today())]
    return list(range(2, SUNDAY + 1))
