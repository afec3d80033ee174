"""
Parse the UFL "Thời khóa biểu" table, which has no single-line grammar.

Copying the portal table turns every multi-value cell into several physical
lines, so one course spans a varying number of lines:

- two-line: course row, then one schedule row
    1<TAB>Cơ sở văn hóa Việt Nam<TAB>2<TAB>Cơ sở văn hóa Việt Nam- 09
    16/09/2024- 29/12/2024<TAB>3<TAB>6-7<TAB>DB303<TAB>Phạm Thị Tú Trinh
- multi-range: two date ranges, 7 lines (6 when the last instructor is blank)
    1<TAB>Giáo dục quốc phòng<TAB>3<TAB>GDQP-01
    02/09/2024- 30/10/2024
    01/11/2024- 29/12/2024<TAB>2
    4<TAB>1-5
    1-5<TAB>A101
    A102<TAB>Nguyễn Văn A
    Nguyễn Văn B
- three-timeline: three date ranges, 12 lines, same interleaving.

Each valid (date range, weekday, lessons, room, instructor) tuple becomes its
own record; merge.merge_records recombines them on request.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence, Tuple

from .institutions import InstitutionProfile, Layout
from .merge import format_range_label, parse_date_range
from .models import UNKNOWN_INSTRUCTOR, CourseMeeting, Meeting

log = logging.getLogger(__name__)

_COURSE_START = re.compile(r"^\d+\t")
_COURSE_ROW_SHORT = re.compile(r"^\d+\t[^\t\d][^\t]*\t\d+\s*$")
_URL = re.compile(r"^(?:https?://|www\.)\S*$", re.I)
_LESSON_SLOTS = re.compile(r"^(\d+)-(\d+)$")

_COURSE_COLUMNS = 4
_LOOKAHEAD = 4
_SHORT_LINE = 25

# (row, column) of date range, weekday, lessons, room, instructor for each
# schedule in a span; row 0 is the course row.
Cell = Tuple[int, int]
_OFFSETS: Dict[Layout, Tuple[Tuple[Cell, Cell, Cell, Cell, Cell], ...]] = {
    Layout.TWO_LINE: (
        ((1, 0), (1, 1), (1, 2), (1, 3), (1, 4)),
    ),
    Layout.MULTI_RANGE: (
        ((1, 0), (2, 1), (3, 1), (4, 1), (5, 1)),
        ((2, 0), (3, 0), (4, 0), (5, 0), (6, 0)),
    ),
    Layout.THREE_TIMELINE: (
        ((1, 0), (3, 1), (5, 1), (7, 1), (9, 1)),
        ((2, 0), (4, 0), (6, 0), (8, 0), (10, 0)),
        ((3, 0), (5, 0), (7, 0), (9, 0), (11, 0)),
    ),
}

_SPAN = {
    Layout.TWO_LINE: 2,
    Layout.MULTI_RANGE: 7,
    Layout.THREE_TIMELINE: 12,
}


def _clean_lines(text: str, profile: InstitutionProfile) -> List[str]:
    noise = set(profile.noise_tokens)
    # trailing tabs are kept: they hold empty cells such as a blank class code
    lines = [l.lstrip().rstrip(" \r") for l in text.replace("\r\n", "\n").split("\n")]
    return [
        l for l in lines
        if l.strip() and l.strip() not in noise and not _URL.match(l.strip())
    ]


def _is_course_start(line: str) -> bool:
    # schedule rows such as "3<TAB>6-7" also start with digits; a course row
    # carries at least STT, name, credits and class code, or STT, a name and
    # credits when the copy lost the empty trailing cells
    if not _COURSE_START.match(line):
        return False
    return len(line.split("\t")) >= _COURSE_COLUMNS or bool(_COURSE_ROW_SHORT.match(line))


def _looks_like_date_range(line: str) -> bool:
    return "/" in line and "-" in line


def classify_span(lines: Sequence[str], start: int) -> Layout:
    """Decide the layout of the course whose course row is ``lines[start]``."""
    window: List[str] = []
    for line in lines[start + 1: start + 1 + _LOOKAHEAD]:
        if _is_course_start(line):
            break
        window.append(line)

    dated = sum(1 for line in window if _looks_like_date_range(line))
    if dated >= 3:
        return Layout.THREE_TIMELINE
    if dated >= 2:
        return Layout.MULTI_RANGE

    nxt = window[0].rstrip() if window else ""
    # only tab-free lines count: a short two-line schedule row has tabs
    if nxt and "\t" not in nxt and (len(nxt) <= _SHORT_LINE or "/" in nxt):
        return Layout.MULTI_RANGE
    return Layout.TWO_LINE


def _take_span(lines: Sequence[str], start: int, layout: Layout) -> List[str]:
    span = [lines[start]]
    for line in lines[start + 1: start + _SPAN[layout]]:
        if _is_course_start(line):
            break
        span.append(line)
    return span


def _cell(rows: List[List[str]], pos: Cell) -> str:
    row, col = pos
    if row >= len(rows) or col >= len(rows[row]):
        return ""
    return rows[row][col].strip()


def _decode_schedule(
    rows: List[List[str]],
    offsets: Tuple[Cell, Cell, Cell, Cell, Cell],
) -> Tuple[str, Meeting, str] | None:
    date_range, day, lessons, room, instructor = (_cell(rows, pos) for pos in offsets)
    if not day.isdigit() or not 2 <= int(day) <= 7:
        return None
    m = _LESSON_SLOTS.match(lessons)
    if not m:
        return None
    meeting = Meeting(
        weekday=int(day),
        room=room,
        lesson_start=int(m.group(1)),
        lesson_end=int(m.group(2)),
    )
    return date_range, meeting, instructor


def _build_record(
    name: str,
    course_id: str,
    date_range: str,
    meeting: Meeting,
    instructor: str,
    layout: Layout,
    profile: InstitutionProfile,
) -> CourseMeeting:
    parsed = parse_date_range(date_range)
    if parsed:
        weeks = profile.calendar.week_range(parsed[0], parsed[1], layout)
    else:
        log.debug("Malformed date range %r, using full semester", date_range)
        weeks = profile.calendar.fallback
    return CourseMeeting(
        id=course_id or name,
        name=name,
        instructor=instructor or UNKNOWN_INSTRUCTOR,
        meetings=[meeting],
        active_weeks=[weeks],
        active_date_ranges=[date_range] if "/" in date_range else [],
    )


def _parse_lines(lines: List[str], profile: InstitutionProfile) -> Tuple[List[CourseMeeting], int]:
    records: List[CourseMeeting] = []
    skipped = 0
    i = 0
    while i < len(lines):
        line = lines[i]
        if not _is_course_start(line):
            log.debug("Skipping stray line %r", line)
            skipped += 1
            i += 1
            continue

        layout = classify_span(lines, i)
        span = _take_span(lines, i, layout)
        rows = [l.split("\t") for l in span]
        name, course_id = _cell(rows, (0, 1)), _cell(rows, (0, 3))

        emitted = 0
        for offsets in _OFFSETS[layout] if name else ():
            decoded = _decode_schedule(rows, offsets)
            if decoded is None:
                continue
            date_range, meeting, instructor = decoded
            records.append(_build_record(
                name, course_id, date_range, meeting, instructor, layout, profile
            ))
            emitted += 1

        if not emitted:
            log.debug("Dropping %s course at line %d: no valid schedule", layout.value, i)
            skipped += 1
        i += len(span)

    for record in records:
        if record.active_date_ranges:
            record.display_range_label = ", ".join(
                format_range_label(r) for r in record.active_date_ranges
            )
    return records, skipped


def parse_positional_report(text: str, profile: InstitutionProfile) -> Tuple[List[CourseMeeting], int]:
    """
    Parse a whole pasted UFL table.

    :returns: (records, number of skipped course spans and stray lines).
        Never raises: an unexpected fault yields ([], 0).
    """
    try:
        lines = _clean_lines(text or "", profile)
        return _parse_lines(lines, profile)
    except Exception as e:
        log.warning("Positional parse failed, returning no courses: %s", e)
        return [], 0


def parse_positional(text: str, profile: InstitutionProfile) -> List[CourseMeeting]:
    return parse_positional_report(text, profile)[0]
