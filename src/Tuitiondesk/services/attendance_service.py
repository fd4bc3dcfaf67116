import logging

from Tuitiondesk.core.errors import ScopeError
from Tuitiondesk.core.records import attendance_key
from Tuitiondesk.core.results import NOT_FOUND, Outcome
from Tuitiondesk.core.validation import parse_date, validate_status
from Tuitiondesk.data.db import now_str
from Tuitiondesk.data.repos.attendance_repo import (
    fetch_attendance_by_date,
    find_attendance_mark,
    get_attendance_mark_by_id,
    insert_attendance_mark,
    update_attendance_mark,
)
from Tuitiondesk.data.repos.classes_repo import get_class_by_id
from Tuitiondesk.data.repos.students_repo import get_student_by_id
from Tuitiondesk.services.common import reported

logger = logging.getLogger(__name__)


@reported("Failed to mark attendance")
def mark_attendance(scope, student_id, class_id, day, status):
    """Record a student's status for one class on one date.

    There is at most one mark per (student, class, date): marking again
    overwrites the status and timestamp of the existing mark.
    """
    status = validate_status(status)
    date_str = parse_date(day).isoformat()

    class_def = get_class_by_id(class_id)
    if class_def is None:
        return Outcome.failure(NOT_FOUND, "Subject not found.")
    if not scope.owns(class_def):
        raise ScopeError("You can only mark attendance for your own classes.")
    student = get_student_by_id(student_id)
    if student is None:
        return Outcome.failure(NOT_FOUND, "Student not found.")

    marked_at = now_str()
    existing = find_attendance_mark(student_id, class_id, date_str)
    if existing is None:
        mark_id = insert_attendance_mark(
            student_id, class_id, class_def["teacher_id"], date_str,
            status, scope.user_id, marked_at,
        )
        logger.info("attendance %s: %s/%s on %s -> %s", mark_id, student_id, class_id, date_str, status)
    else:
        mark_id = existing["id"]
        update_attendance_mark(mark_id, status, scope.user_id, marked_at)
        logger.info("attendance %s updated: %s -> %s", mark_id, existing["status"], status)

    return Outcome.success(
        f"Attendance for {student['name']} marked as {status}",
        get_attendance_mark_by_id(mark_id),
    )


def read_attendance(day, scope):
    """Current marks for a date, keyed ``"{student_id}_{class_id}"`` (bare
    ``student_id`` for legacy marks without a class)."""
    date_str = parse_date(day).isoformat()
    records = {}
    for mark in fetch_attendance_by_date(date_str, teacher_id=scope.teacher_filter):
        records[attendance_key(mark)] = {"status": mark["status"], "mark_id": mark["id"]}
    return records
