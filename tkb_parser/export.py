"""
Export parsed timetable records to ICS, CSV, and JSON.
"""
from __future__ import annotations

import csv
import hashlib
import json
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import icalendar
import pytz

from .institutions import InstitutionProfile
from .merge import parse_date_range
from .models import CourseMeeting, Meeting
from .time_grid import lesson_time_range

# Vietnam timezone for calendar
TZ_VN = "Asia/Ho_Chi_Minh"


def _first_on_weekday(start: date, weekday: int) -> date:
    """First date on or after ``start`` falling on portal weekday 2..8."""
    offset = (weekday - 2 - start.weekday()) % 7
    return start + timedelta(days=offset)


def _active_spans(
    record: CourseMeeting, semester_start: Optional[date]
) -> Iterator[Tuple[date, date]]:
    """Absolute (first day, last day) spans, from date ranges or from week numbers."""
    ranges = [r for r in (parse_date_range(t) for t in record.active_date_ranges) if r]
    if ranges:
        yield from ranges
        return
    if semester_start is None:
        return
    for w in record.active_weeks:
        first = semester_start + timedelta(weeks=w.start - 1)
        last = semester_start + timedelta(weeks=w.end) - timedelta(days=1)
        yield first, last


def _uid(record: CourseMeeting, meeting: Meeting, first: date) -> str:
    uid_string = f"{record.id}-{record.name}-{meeting.weekday}-{meeting.lesson_start}-{first.isoformat()}"
    uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
    return f"{uid_hash}@tkb-parser"


def export_ics(
    courses: List[CourseMeeting],
    out_path: str | Path,
    profile: InstitutionProfile,
    semester_start: Optional[date] = None,
) -> int:
    """
    Export to iCalendar (.ics): one weekly event per meeting and active span.

    Week-numbered records need ``semester_start`` (the Monday of week 1);
    without it they are left out. Returns the number of events written.
    """
    cal = icalendar.Calendar()
    cal.add("prodid", "-//TKB Parser//VI")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", f"Thời khóa biểu {profile.short_name}")
    cal.add("x-wr-timezone", TZ_VN)
    vn_tz = pytz.timezone(TZ_VN)

    count = 0
    for record in courses:
        for first_day, last_day in _active_spans(record, semester_start):
            for meeting in record.meetings:
                times = lesson_time_range(profile.lesson_slots, meeting.lesson_start, meeting.lesson_end)
                if times is None:
                    continue
                first = _first_on_weekday(first_day, meeting.weekday)
                if first > last_day:
                    continue

                event = icalendar.Event()
                event.add("uid", _uid(record, meeting, first))
                event.add("summary", record.name)
                event.add(
                    "description",
                    f"Giảng viên: {record.instructor}\nMã lớp: {record.id}\n"
                    f"Tiết {meeting.lesson_start}-{meeting.lesson_end}",
                )
                event.add("location", meeting.room)
                event.add("dtstart", vn_tz.localize(datetime.combine(first, times[0])))
                event.add("dtend", vn_tz.localize(datetime.combine(first, times[1])))
                event.add("dtstamp", datetime.now(timezone.utc))
                until_dt = datetime(
                    last_day.year, last_day.month, last_day.day, 23, 59, 59, tzinfo=timezone.utc
                )
                event.add("rrule", {"freq": "weekly", "until": until_dt})
                cal.add_component(event)
                count += 1

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")
    return count


_CSV_FIELDS = [
    "id", "name", "instructor", "weekday", "lessonStart", "lessonEnd", "room",
    "activeWeeks", "activeDateRanges", "displayRangeLabel",
]


def export_csv(courses: List[CourseMeeting], out_path: str | Path) -> None:
    """Export to CSV, one row per meeting."""
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=_CSV_FIELDS)
        w.writeheader()
        for c in courses:
            weeks = ";".join(f"{r.start}-{r.end}" for r in c.active_weeks)
            for m in c.meetings:
                w.writerow({
                    "id": c.id,
                    "name": c.name,
                    "instructor": c.instructor,
                    "weekday": m.weekday,
                    "lessonStart": m.lesson_start,
                    "lessonEnd": m.lesson_end,
                    "room": m.room,
                    "activeWeeks": weeks,
                    "activeDateRanges": ";".join(c.active_date_ranges),
                    "displayRangeLabel": c.display_range_label or "",
                })


def export_json(courses: List[CourseMeeting], out_path: str | Path) -> None:
    """Export to JSON."""
    Path(out_path).write_text(
        json.dumps([c.to_dict() for c in courses], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def export(
    courses: List[CourseMeeting],
    out_path: str | Path,
    fmt: str,
    profile: InstitutionProfile,
    semester_start: Optional[date] = None,
) -> None:
    """Export to the given format: ics, csv, or json."""
    fmt = fmt.lower()
    if fmt == "ics":
        export_ics(courses, out_path, profile, semester_start)
    elif fmt == "csv":
        export_csv(courses, out_path)
    elif fmt == "json":
        export_json(courses, out_path)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use ics, csv, or json.")
