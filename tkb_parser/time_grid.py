"""
Lesson-slot catalogs: which wall-clock times each numbered tiết covers.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class LessonSlot:
    lesson_number: int
    start: str
    end: str

    @property
    def start_time(self) -> time:
        return _to_time(self.start)

    @property
    def end_time(self) -> time:
        return _to_time(self.end)


def _to_time(text: str) -> time:
    """'7:00' -> time(7, 0)."""
    hour, minute = text.split(":")
    return time(int(hour), int(minute))


def _catalog(*pairs: Tuple[str, str]) -> Tuple[LessonSlot, ...]:
    return tuple(LessonSlot(i, s, e) for i, (s, e) in enumerate(pairs, start=1))


DUT_LESSON_SLOTS = _catalog(
    ("7:00", "7:50"),
    ("8:00", "8:50"),
    ("9:00", "9:50"),
    ("10:00", "10:50"),
    ("11:00", "11:50"),
    ("12:30", "13:20"),
    ("13:30", "14:20"),
    ("14:30", "15:20"),
    ("15:30", "16:20"),
    ("16:30", "17:20"),
    ("17:30", "18:15"),
    ("18:15", "19:00"),
    ("19:10", "19:55"),
    ("19:55", "20:40"),
)

UFL_LESSON_SLOTS = _catalog(
    ("7:00", "7:50"),
    ("7:50", "8:40"),
    ("8:50", "9:40"),
    ("9:45", "10:35"),
    ("10:35", "11:25"),
    ("11:30", "12:20"),
    ("13:00", "13:50"),
    ("14:50", "15:40"),
    ("15:45", "16:35"),
    ("16:35", "17:25"),
    ("17:30", "18:20"),
    ("18:20", "19:10"),
    ("19:20", "20:10"),
    ("20:10", "21:00"),
)


def find_slot(catalog: Sequence[LessonSlot], lesson_number: int) -> Optional[LessonSlot]:
    for slot in catalog:
        if slot.lesson_number == lesson_number:
            return slot
    return None


def lesson_time_range(
    catalog: Sequence[LessonSlot], lesson_start: int, lesson_end: int
) -> Optional[Tuple[time, time]]:
    """
    Wall-clock span of lessons ``lesson_start..lesson_end``.

    Returns None when either end is outside the catalog, or when the
    range is inverted (e.g. "10-9" pasted verbatim).
    """
    if lesson_start > lesson_end:
        return None
    first = find_slot(catalog, lesson_start)
    last = find_slot(catalog, lesson_end)
    if first is None or last is None:
        return None
    return first.start_time, last.end_time
