"""
Single-line parser for institutions whose export has a whole-line grammar
(DUT "Lịch học" table).

One pasted row looks like:

    6<TAB>5070040.2420.24.99<TAB>Tiếng Nhật 2 (CNTT)<TAB>1<TAB><TAB><TAB>
    Trần Thị Kim Ngân<TAB>Thứ 2,4-5,C128; Thứ 4,4-5,C128<TAB>29-44

Rows the grammar does not recognise give None. Rows it does recognise always
give a record, even when some compound column fails to decode; those parts
are left empty.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .institutions import Grammar, InstitutionProfile
from .models import SUNDAY, CourseMeeting, Meeting, WeekRange

log = logging.getLogger(__name__)


def _parse_times(column: str, grammar: Grammar) -> List[Meeting]:
    meetings: List[Meeting] = []
    for token in grammar.date_token_splitter.findall(column):
        m = grammar.single_date_token.search(token)
        if not m:
            continue
        weekday = m.group("weekday")
        meetings.append(Meeting(
            weekday=int(weekday) if weekday else SUNDAY,
            room=m.group("room").strip(),
            lesson_start=int(m.group("start")),
            lesson_end=int(m.group("end")),
        ))
    return meetings


def _parse_weeks(column: str, grammar: Grammar) -> List[WeekRange]:
    weeks: List[WeekRange] = []
    run = grammar.weeks_charset.search(column)
    if not run:
        return weeks
    for m in grammar.week_range_token.finditer(run.group(0)):
        weeks.append(WeekRange(int(m.group(1)), int(m.group(2))))
    return weeks


def parse_line(line: str, profile: InstitutionProfile) -> Optional[CourseMeeting]:
    """
    Parse one pasted row with the profile's grammar.

    :returns: None when the whole-line pattern does not match, otherwise a
        record (possibly with empty id / meetings / weeks).
    """
    grammar = profile.grammar
    if grammar is None:
        return None

    match = grammar.line.match(line)
    if not match:
        return None

    groups = match.groupdict()
    record = CourseMeeting(id="", name="", instructor="")
    columns = grammar.columns

    for idx, column in enumerate(grammar.anchor_columns()):
        value = groups.get(column)
        if not value or not grammar.identifier.search(value):
            continue

        following = [groups.get(c) or "" for c in columns[idx + 1: idx + 5]]
        name, instructor, times, weeks = following

        record.id = value
        record.name = name
        record.instructor = instructor

        meetings = _parse_times(times, grammar)
        if not meetings:
            log.debug("No decodable time tokens in %r", times)
            continue
        record.meetings = meetings
        record.active_weeks = _parse_weeks(weeks, grammar)
        break
    else:
        if not record.id:
            log.debug("Row matched but no identifier column: %r", line)

    return record


def make_line_parser(profile: InstitutionProfile) -> Callable[[str], Optional[CourseMeeting]]:
    """Bind a profile; the returned function parses one row at a time."""
    def parse(line: str) -> Optional[CourseMeeting]:
        return parse_line(line, profile)
    return parse
