"""
Coalesce records that describe the same course meeting over several date
ranges, and build the short "dd/mm/yy - dd/mm/yy" labels shown under a course.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .models import CourseMeeting

_DATE_RANGE = re.compile(r"(\d{2}/\d{2}/\d{4})\s*-\s*(\d{2}/\d{2}/\d{4})")

MergeKey = Tuple[str, str, Tuple[Tuple[int, int, int], ...]]


def _parse_vn_date(text: str) -> date | None:
    """Parse 'dd/mm/yyyy' (e.g. '16/09/2024')."""
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError:
        return None


def parse_date_range(text: str) -> Optional[Tuple[date, date]]:
    """'16/09/2024- 29/12/2024' -> (date(2024, 9, 16), date(2024, 12, 29))."""
    m = _DATE_RANGE.search(text or "")
    if not m:
        return None
    start = _parse_vn_date(m.group(1))
    end = _parse_vn_date(m.group(2))
    if start is None or end is None:
        return None
    return start, end


def _short(d: date) -> str:
    return d.strftime("%d/%m/%y")


def format_range_label(date_range: str) -> str:
    """Reformat one stored range to 'dd/mm/yy - dd/mm/yy'; unknown shapes pass through."""
    parsed = parse_date_range(date_range)
    if not parsed:
        return date_range.strip()
    return f"{_short(parsed[0])} - {_short(parsed[1])}"


def spanning_range_label(date_ranges: Iterable[str]) -> Optional[str]:
    """Label from the earliest start to the latest end of all parseable ranges."""
    parsed = [p for p in (parse_date_range(r) for r in date_ranges) if p]
    if not parsed:
        return None
    start = min(p[0] for p in parsed)
    end = max(p[1] for p in parsed)
    return f"{_short(start)} - {_short(end)}"


def merge_key(record: CourseMeeting) -> MergeKey:
    return (
        record.name,
        record.instructor,
        tuple(m.time_key() for m in record.meetings),
    )


def merge_records(records: List[CourseMeeting]) -> List[CourseMeeting]:
    """
    Merge records sharing name, instructor and (weekday, start, end) tuples.

    Rooms and date ranges are not part of the key. A merged record keeps the
    first member's id and meetings, concatenates every member's date ranges
    and week ranges, and gets a label spanning all of them. Groups of one
    are returned as they are, so merging twice changes nothing.
    """
    groups: Dict[MergeKey, List[CourseMeeting]] = {}
    for record in records:
        groups.setdefault(merge_key(record), []).append(record)

    merged: List[CourseMeeting] = []
    for members in groups.values():
        if len(members) == 1:
            merged.append(members[0])
            continue
        first = members[0]
        date_ranges = [r for m in members for r in m.active_date_ranges]
        merged.append(CourseMeeting(
            id=first.id,
            name=first.name,
            instructor=first.instructor,
            meetings=list(first.meetings),
            active_weeks=[w for m in members for w in m.active_weeks],
            active_date_ranges=date_ranges,
            display_range_label=spanning_range_label(date_ranges) or first.display_range_label,
        ))
    return merged
