"""Recurrence evaluation and the per-day agenda."""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from .records import (
    RECURRING_NONE,
    RECURRING_WEEKLY,
    UNKNOWN_STUDENT,
    days_of_week,
    index_by_id,
)
from .scope import Scope

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _as_date(day) -> Optional[date]:
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    if isinstance(day, str):
        try:
            return date.fromisoformat(day.strip())
        except ValueError:
            return None
    return None


def weekday_index(day: date) -> int:
    """Day of week with 0=Sunday..6=Saturday."""
    return (day.weekday() + 1) % 7


def day_name(day_num) -> str:
    try:
        return DAY_NAMES[int(day_num)] if 0 <= int(day_num) <= 6 else "Unknown"
    except (TypeError, ValueError):
        return "Unknown"


def format_days_of_week(days: Iterable[int]) -> str:
    days = sorted(days or [])
    if not days:
        return "No days selected"
    return ", ".join(day_name(d) for d in days)


def occurs_on(class_def: Dict[str, Any], day) -> bool:
    """True when the class takes place on the given calendar date.

    ``day`` is a ``date`` or a ``YYYY-MM-DD`` string and is taken as a local
    calendar date. Malformed recurrence data never raises; it just doesn't match.
    """
    target = _as_date(day)
    if target is None or not isinstance(class_def, dict):
        return False

    recurring = class_def.get("recurring")
    if recurring == RECURRING_WEEKLY:
        return weekday_index(target) in days_of_week(class_def)
    if recurring == RECURRING_NONE:
        return class_def.get("date") == target.isoformat()
    return False


def has_classes_on(day, class_defs: Iterable[Dict[str, Any]]) -> bool:
    return any(occurs_on(c, day) for c in class_defs)


@dataclass
class AgendaEntry:
    class_def: Dict[str, Any]
    student_names: List[str] = field(default_factory=list)

    @property
    def start_time(self) -> str:
        return self.class_def.get("start_time") or ""


def agenda_for(day, class_defs, assignments, students, scope: Optional[Scope] = None) -> List[AgendaEntry]:
    """Classes occurring on ``day`` with their rosters, ordered by start time."""
    names = {sid: s.get("name") for sid, s in index_by_id(students).items()}

    entries = []
    for class_def in class_defs:
        if scope is not None and not scope.owns(class_def):
            continue
        if not occurs_on(class_def, day):
            continue
        roster = [
            names.get(a.get("student_id")) or UNKNOWN_STUDENT
            for a in assignments
            if a.get("class_id") == class_def.get("id")
        ]
        entries.append(AgendaEntry(class_def, roster))

    # HH:MM strings sort chronologically
    entries.sort(key=lambda e: e.start_time)
    return entries


def students_for_class(class_id, assignments, students) -> List[Dict[str, Any]]:
    """Student records on a class roster; dangling assignments are skipped."""
    by_id = index_by_id(students)
    roster = []
    for a in assignments:
        if a.get("class_id") != class_id:
            continue
        student = by_id.get(a.get("student_id"))
        if student is not None:
            roster.append(student)
    return roster
