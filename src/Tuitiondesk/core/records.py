"""Normalizing accessors over raw store records.

Stored records may carry older field shapes (a single ``day_of_week`` instead
of ``days_of_week``, a single ``teacher_id`` instead of ``teacher_ids``).
Everything in the core reads through these helpers and therefore always sees
the canonical multi-value form.
"""
from typing import Any, Dict, List, Optional, Tuple

RECURRING_WEEKLY = "weekly"
RECURRING_NONE = "none"

STATUS_PRESENT = "present"
STATUS_ABSENT = "absent"
ATTENDANCE_STATUSES = (STATUS_PRESENT, STATUS_ABSENT)

UNKNOWN_STUDENT = "Unknown Student"
UNKNOWN_SUBJECT = "Unknown Subject"


def _as_weekday(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        day = int(value)
    except (TypeError, ValueError):
        return None
    if 0 <= day <= 6:
        return day
    return None


def days_of_week(class_def: Dict[str, Any]) -> frozenset:
    """Canonical weekday set of a class (0=Sunday..6=Saturday).

    A list in ``days_of_week`` wins; otherwise the legacy ``day_of_week`` is
    treated as a one-element set. Members that are not weekdays are ignored.
    """
    raw = class_def.get("days_of_week")
    if isinstance(raw, (list, tuple, set, frozenset)):
        days = (_as_weekday(d) for d in raw)
        return frozenset(d for d in days if d is not None)
    legacy = _as_weekday(class_def.get("day_of_week"))
    if legacy is not None:
        return frozenset((legacy,))
    return frozenset()


def teacher_ids(student: Dict[str, Any]) -> List[str]:
    """Teacher ids a student belongs to, merging the legacy single field."""
    ids = list(student.get("teacher_ids") or [])
    legacy = student.get("teacher_id")
    if legacy and legacy not in ids:
        ids.append(legacy)
    return ids


def parse_hhmm(value) -> Optional[int]:
    """Minutes since midnight for an ``HH:MM`` string, None when malformed."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def attendance_key(mark: Dict[str, Any]) -> str:
    # legacy marks carry no class and are keyed by the student alone
    if mark.get("class_id"):
        return f"{mark['student_id']}_{mark['class_id']}"
    return str(mark["student_id"])


def index_by_id(records) -> Dict[str, Dict[str, Any]]:
    return {r["id"]: r for r in records if r.get("id") is not None}


def migrated_student(student: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """Rewrite a student record into the ``teacher_ids`` form.

    Returns the new record and whether anything changed. A record that only
    has ``teacher_id`` gets ``teacher_ids=[teacher_id]``; a record with both
    keeps its list (appending the legacy id if missing). ``teacher_id`` is
    always dropped.
    """
    legacy = student.get("teacher_id")
    if not legacy:
        return dict(student), False
    record = dict(student)
    current = record.get("teacher_ids")
    if current is None:
        record["teacher_ids"] = [legacy]
    elif legacy not in current:
        record["teacher_ids"] = list(current) + [legacy]
    record.pop("teacher_id", None)
    return record, True


def migrated_class(class_def: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """Rewrite a legacy single-day weekly class into the ``days_of_week`` form."""
    legacy = class_def.get("day_of_week")
    if legacy is None:
        return dict(class_def), False
    record = dict(class_def)
    if not record.get("days_of_week"):
        day = _as_weekday(legacy)
        record["days_of_week"] = [day] if day is not None else []
    record.pop("day_of_week", None)
    return record, True
