"""
Course records produced by every parser.

One CourseMeeting per pasted course (or per date range for the UFL
multi-range layout). Weekdays follow the portal numbering:
2 = Thứ 2 (Monday) ... 7 = Thứ 7 (Saturday), 8 = Chủ nhật (Sunday).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

UNKNOWN_INSTRUCTOR = "Chưa xác định"

SUNDAY = 8


@dataclass(frozen=True)
class Meeting:
    weekday: int
    room: str
    lesson_start: int
    lesson_end: int

    def time_key(self) -> tuple[int, int, int]:
        return (self.weekday, self.lesson_start, self.lesson_end)

    def covers(self, lesson_number: int) -> bool:
        return self.lesson_start <= lesson_number <= self.lesson_end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekday": self.weekday,
            "room": self.room,
            "lessonStart": self.lesson_start,
            "lessonEnd": self.lesson_end,
        }


@dataclass(frozen=True)
class WeekRange:
    """Inclusive academic week span ("from"/"to" when serialized)."""
    start: int
    end: int

    def contains(self, week: int) -> bool:
        return self.start <= week <= self.end

    def to_dict(self) -> Dict[str, int]:
        return {"from": self.start, "to": self.end}


@dataclass
class CourseMeeting:
    id: str
    name: str
    instructor: str
    meetings: List[Meeting] = field(default_factory=list)
    active_weeks: List[WeekRange] = field(default_factory=list)
    active_date_ranges: List[str] = field(default_factory=list)
    display_range_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "instructor": self.instructor,
            "meetings": [m.to_dict() for m in self.meetings],
            "activeWeeks": [w.to_dict() for w in self.active_weeks],
        }
        if self.active_date_ranges:
            data["activeDateRanges"] = list(self.active_date_ranges)
        if self.display_range_label:
            data["displayRangeLabel"] = self.display_range_label
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourseMeeting":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            instructor=str(data.get("instructor", "")),
            meetings=[
                Meeting(
                    weekday=int(m["weekday"]),
                    room=str(m.get("room", "")),
                    lesson_start=int(m["lessonStart"]),
                    lesson_end=int(m["lessonEnd"]),
                )
                for m in data.get("meetings", [])
            ],
            active_weeks=[
                WeekRange(int(w["from"]), int(w["to"]))
                for w in data.get("activeWeeks", [])
            ],
            active_date_ranges=list(data.get("activeDateRanges", [])),
            display_range_label=data.get("displayRangeLabel"),
        )
