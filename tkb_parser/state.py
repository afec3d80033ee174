"""
Persisted UI state: the pasted text, filter toggles, the selected
institution and per-institution custom courses / feature toggles.

Values live in a flat key-value store under fixed string keys, the way the
browser app keeps them in localStorage. Everything is stored as strings.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .models import CourseMeeting

log = logging.getLogger(__name__)

DATA = "data"
BY_WEEK = "byWeek"
WEEK = "week"
SHOW_ONLY_AVAILABLE = "showOnlyAvailable"
ONLY_TODAY = "onlyToday"
SELECTED_UNIVERSITY = "selectedUniversity"


def custom_courses_key(institution_id: str) -> str:
    return f"customCourses_{institution_id}"


def custom_features_key(institution_id: str) -> str:
    return f"customFeatures_{institution_id}"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Dict[str, str] | None = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStore:
    """Key-value store backed by one JSON object on disk, written on every set."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._items: Dict[str, str] = {}
        if self.path.exists():
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                log.warning("Ignoring unreadable state file %s: %s", self.path, e)
                loaded = {}
            if isinstance(loaded, dict):
                self._items = {str(k): str(v) for k, v in loaded.items()}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value
        self.path.write_text(
            json.dumps(self._items, indent=2, ensure_ascii=False), encoding="utf-8"
        )


def _get_bool(store: KeyValueStore, key: str) -> bool:
    return store.get(key) == "true"


def _get_int(store: KeyValueStore, key: str) -> int:
    raw = store.get(key)
    try:
        return int(raw) if raw else 0
    except ValueError:
        return 0


@dataclass
class ScheduleState:
    data: str = ""
    by_week: bool = False
    week: int = 0
    show_only_available: bool = False
    only_today: bool = False
    selected_university: Optional[str] = None
    custom_courses: Dict[str, List[CourseMeeting]] = field(default_factory=dict)
    custom_features: Dict[str, Dict[str, bool]] = field(default_factory=dict)

    @classmethod
    def load(cls, store: KeyValueStore, institution_ids: List[str] | None = None) -> "ScheduleState":
        state = cls(
            data=store.get(DATA) or "",
            by_week=_get_bool(store, BY_WEEK),
            week=_get_int(store, WEEK),
            show_only_available=_get_bool(store, SHOW_ONLY_AVAILABLE),
            only_today=_get_bool(store, ONLY_TODAY),
            selected_university=store.get(SELECTED_UNIVERSITY),
        )
        for inst_id in institution_ids or []:
            courses = _load_json(store, custom_courses_key(inst_id), [])
            state.custom_courses[inst_id] = _load_courses(courses, custom_courses_key(inst_id))
            features = _load_json(store, custom_features_key(inst_id), {})
            state.custom_features[inst_id] = {str(k): bool(v) for k, v in features.items()}
        return state

    def save(self, store: KeyValueStore) -> None:
        store.set(DATA, self.data)
        store.set(BY_WEEK, "true" if self.by_week else "false")
        store.set(WEEK, str(self.week))
        store.set(SHOW_ONLY_AVAILABLE, "true" if self.show_only_available else "false")
        store.set(ONLY_TODAY, "true" if self.only_today else "false")
        if self.selected_university:
            store.set(SELECTED_UNIVERSITY, self.selected_university)
        for inst_id, courses in self.custom_courses.items():
            store.set(
                custom_courses_key(inst_id),
                json.dumps([c.to_dict() for c in courses], ensure_ascii=False),
            )
        for inst_id, features in self.custom_features.items():
            store.set(custom_features_key(inst_id), json.dumps(features))

    def feature_enabled(self, institution_id: str, feature_id: str, default: bool = False) -> bool:
        return self.custom_features.get(institution_id, {}).get(feature_id, default)


def _load_courses(items: List, key: str) -> List[CourseMeeting]:
    courses: List[CourseMeeting] = []
    for item in items:
        try:
            courses.append(CourseMeeting.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            log.warning("Skipping malformed course stored under %r: %r", key, e)
    return courses


def _load_json(store: KeyValueStore, key: str, default):
    raw = store.get(key)
    if not raw:
        return default
    try:
        value = json.loads(raw)
    except ValueError:
        log.warning("Discarding malformed value stored under %r", key)
        return default
    return value if isinstance(value, type(default)) else default
