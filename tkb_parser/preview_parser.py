"""
Parser for the DUT registration "preview" table, which writes day names with
a colon instead of the comma-separated grammar of the timetable page:

    1<TAB>2090160.2520.24.16<TAB>Chủ nghĩa Xã hội khoa học<TAB>2<TAB>
    Trương Thị Thu Hiền<TAB>Thứ 6: 1-2,F207<TAB>22-27;31-40

A time cell may chain several days, later ones abbreviated to the number:
"Thứ 3: 2-3,C128;4: 7-8,C128".
"""
from __future__ import annotations

import re
from typing import List, Optional

from .models import SUNDAY, CourseMeeting, Meeting, WeekRange

_DAY_NAMES = {
    "Thứ 2": 2,
    "Thứ 3": 3,
    "Thứ 4": 4,
    "Thứ 5": 5,
    "Thứ 6": 6,
    "Thứ 7": 7,
    "Chủ nhật": SUNDAY,
}

_FULL_DAY = re.compile(r"(Thứ \d|Chủ nhật):\s*(\d+)-(\d+),([^;]+)")
_SHORT_DAY = re.compile(r"(\d):\s*(\d+)-(\d+),([^;]+)")
_WEEK_RANGE = re.compile(r"(\d+)-(\d+)")

_MIN_COLUMNS = 7


def _parse_time_cell(cell: str) -> List[Meeting]:
    meetings: List[Meeting] = []
    for piece in cell.split(";"):
        full = _FULL_DAY.search(piece)
        if full:
            weekday = _DAY_NAMES.get(full.group(1), SUNDAY)
            m = full
        else:
            m = _SHORT_DAY.search(piece)
            if not m:
                continue
            weekday = int(m.group(1))
        meetings.append(Meeting(
            weekday=weekday,
            room=m.group(4).strip(),
            lesson_start=int(m.group(2)),
            lesson_end=int(m.group(3)),
        ))
    return meetings


def parse_preview_line(line: str) -> Optional[CourseMeeting]:
    """One preview row, or None if it lacks columns or decodable schedule data."""
    columns = [c.strip() for c in line.split("\t")]
    if len(columns) < _MIN_COLUMNS:
        return None

    course_id, name, instructor = columns[1], columns[2], columns[4]
    time_cell, weeks_cell = columns[5], columns[6]
    if not name or not instructor or not time_cell or not weeks_cell:
        return None

    meetings = _parse_time_cell(time_cell)
    weeks = [
        WeekRange(int(m.group(1)), int(m.group(2)))
        for m in (_WEEK_RANGE.search(p) for p in weeks_cell.split(";"))
        if m
    ]
    if not meetings or not weeks:
        return None

    return CourseMeeting(
        id=course_id,
        name=name,
        instructor=instructor,
        meetings=meetings,
        active_weeks=weeks,
    )


def parse_preview_text(text: str) -> List[CourseMeeting]:
    lines = [l.strip() for l in text.replace("\r\n", "\n").strip().split("\n")]
    records: List[CourseMeeting] = []
    for line in lines:
        if not line:
            continue
        record = parse_preview_line(line)
        if record:
            records.append(record)
    return records
