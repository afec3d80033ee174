"""
Parse timetables copied from Vietnamese student portals (DUT, UFL) into
course meeting records.
"""
from __future__ import annotations

__version__ = "0.3.0"

from .institutions import (  # noqa: E402
    INSTITUTIONS,
    InstitutionProfile,
    get_default_institution,
    get_institution_by_id,
)
from .merge import merge_records  # noqa: E402
from .models import CourseMeeting, Meeting, WeekRange  # noqa: E402
from .selector import ParseReport, parse_schedule, parse_schedule_report  # noqa: E402

__all__ = [
    "__version__",
    "CourseMeeting",
    "INSTITUTIONS",
    "InstitutionProfile",
    "Meeting",
    "ParseReport",
    "WeekRange",
    "get_default_institution",
    "get_institution_by_id",
    "merge_records",
    "parse_schedule",
    "parse_schedule_report",
]
