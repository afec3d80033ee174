"""
Route pasted text to the parser family of the selected institution.

UFL text is parsed as a whole blob by the positional parser. Every other
institution is parsed line by line with its grammar, falling back to the
preview-mode day-name parser for lines the grammar does not recognise.
"""
from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import List, Optional

from .grammar_parser import make_line_parser
from .institutions import MERGE_TIME_RANGES, InstitutionProfile
from .merge import merge_records
from .models import CourseMeeting
from .positional_parser import parse_positional_report
from .preview_parser import parse_preview_line

log = logging.getLogger(__name__)


@dataclass
class ParseReport:
    courses: List[CourseMeeting] = field(default_factory=list)
    skipped_lines: int = 0
    warnings: List[str] = field(default_factory=list)


def normalize_input(text: str) -> str:
    """NFC-normalize and turn CRLF / CR line endings into LF."""
    text = unicodedata.normalize("NFC", text or "")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _parse_lines(text: str, profile: InstitutionProfile, report: ParseReport) -> None:
    parse_line = make_line_parser(profile)
    for line in text.split("\n"):
        if not line.strip():
            continue
        record = parse_line(line)
        if record is None:
            record = parse_preview_line(line)
        if record is None:
            log.debug("No grammar matched line %r", line)
            report.skipped_lines += 1
            continue
        if not record.id or not record.meetings:
            report.warnings.append(f"Partially decoded line: {line.strip()[:60]}")
        report.courses.append(record)


def parse_schedule_report(
    text: str,
    profile: InstitutionProfile,
    merge: Optional[bool] = None,
) -> ParseReport:
    """
    Parse pasted timetable text for one institution.

    :param merge: coalesce records that differ only in date range. Defaults
        to the profile's ``mergeTimeRanges`` feature default.
    """
    report = ParseReport()
    text = normalize_input(text)
    if not text.strip():
        return report

    if profile.is_positional:
        report.courses, report.skipped_lines = parse_positional_report(text, profile)
    else:
        _parse_lines(text, profile, report)

    if merge is None:
        merge = profile.features.custom_defaults().get(MERGE_TIME_RANGES, False)
    if merge:
        report.courses = merge_records(report.courses)

    if report.skipped_lines:
        log.info("Skipped %d unrecognised line(s) for %s", report.skipped_lines, profile.short_name)
    return report


def parse_schedule(
    text: str,
    profile: InstitutionProfile,
    merge: Optional[bool] = None,
) -> List[CourseMeeting]:
    return parse_schedule_report(text, profile, merge).courses
