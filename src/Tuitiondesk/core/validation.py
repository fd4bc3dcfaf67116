"""Input checks run before any write. Each raises ValidationError with a
message fit to show the user, and returns the cleaned value."""
from datetime import date
from typing import Any, Dict

from .errors import ValidationError
from .records import (
    ATTENDANCE_STATUSES,
    RECURRING_NONE,
    RECURRING_WEEKLY,
    parse_hhmm,
)
from .scope import ROLES


def parse_date(value) -> date:
    """Calendar date from a ``date`` or a ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid date: {value!r}. Use YYYY-MM-DD.")


def validate_status(status: str) -> str:
    s = (status or "").strip().lower()
    if s not in ATTENDANCE_STATUSES:
        raise ValidationError(f"Invalid attendance status: {status!r}.")
    return s


def validate_period(month, year):
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise ValidationError("Month and year must be numbers.")
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}.")
    if not 1900 <= year <= 9999:
        raise ValidationError(f"Invalid year: {year}.")
    return month, year


def validate_hourly_rate(value) -> float:
    try:
        rate = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Hourly rate must be greater than 0.")
    if rate <= 0:
        raise ValidationError("Hourly rate must be greater than 0.")
    return rate


def validate_role(role: str) -> str:
    if role not in ROLES:
        raise ValidationError(f"Unknown role: {role!r}.")
    return role


def validate_class_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Clean a class definition coming from a form.

    Returns the canonical record: weekly classes carry ``days_of_week`` and no
    date, one-time classes carry ``date`` and no days.
    """
    name = (payload.get("name") or "").strip()
    start_time = (payload.get("start_time") or "").strip()
    end_time = (payload.get("end_time") or "").strip()
    if not name or not start_time or not end_time:
        raise ValidationError("Please fill in all required fields.")

    start, end = parse_hhmm(start_time), parse_hhmm(end_time)
    if start is None or end is None:
        raise ValidationError("Times must be in HH:MM format.")
    if end <= start:
        raise ValidationError("End time must be after start time.")

    recurring = payload.get("recurring") or RECURRING_NONE
    record = {
        "name": name,
        "start_time": start_time,
        "end_time": end_time,
        "recurring": recurring,
        "teacher_id": payload.get("teacher_id"),
        "date": None,
        "days_of_week": None,
    }

    if recurring == RECURRING_WEEKLY:
        days = payload.get("days_of_week") or []
        cleaned = set()
        for d in days:
            try:
                day = int(d)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid day of week: {d!r}.")
            if not 0 <= day <= 6:
                raise ValidationError(f"Invalid day of week: {d!r}.")
            cleaned.add(day)
        if not cleaned:
            raise ValidationError("Please select at least one day of week for weekly recurring subjects.")
        record["days_of_week"] = sorted(cleaned)
    elif recurring == RECURRING_NONE:
        if not payload.get("date"):
            raise ValidationError("Please select a date.")
        record["date"] = parse_date(payload["date"]).isoformat()
    else:
        raise ValidationError(f"Unknown recurrence: {recurring!r}.")

    return record


def validate_student_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    name = (payload.get("name") or "").strip()
    if not name:
        raise ValidationError("Student name cannot be empty.")
    return {
        "name": name,
        "email": (payload.get("email") or "").strip(),
        "hourly_rate": validate_hourly_rate(payload.get("hourly_rate")),
    }
