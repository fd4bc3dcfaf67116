from datetime import date

from Tuitiondesk.core.results import NOT_FOUND, SCOPE, VALIDATION
from Tuitiondesk.data.db import get_connection
from Tuitiondesk.services.attendance_service import mark_attendance, read_attendance
from Tuitiondesk.services.roster_service import add_class, add_student

DAY = date(2024, 3, 15)


def _setup(scope):
    class_id = add_class(scope, {"name": "Maths", "start_time": "14:00", "end_time": "15:30",
                                 "recurring": "weekly", "days_of_week": [5]}).data["class_id"]
    student_id = add_student(scope, {"name": "Ana", "hourly_rate": 40}).data["student_id"]
    return class_id, student_id


def _count_marks():
    with get_connection() as conn:
        return conn.execute("SELECT COUNT(*) FROM attendance").fetchone()[0]


def test_marking_twice_keeps_one_mark(teacher):
    class_id, student_id = _setup(teacher)

    first = mark_attendance(teacher, student_id, class_id, DAY, "present")
    second = mark_attendance(teacher, student_id, class_id, DAY, "absent")

    assert first.ok and second.ok
    assert first.data["id"] == second.data["id"]
    assert second.data["status"] == "absent"
    assert second.message == "Attendance for Ana marked as absent"
    assert _count_marks() == 1
    assert read_attendance(DAY, teacher) == {
        f"{student_id}_{class_id}": {"status": "absent", "mark_id": first.data["id"]},
    }


def test_marks_record_owner_and_marker(teacher, admin):
    class_id, student_id = _setup(teacher)
    outcome = mark_attendance(admin, student_id, class_id, "2024-03-15", "present")
    assert outcome.data["teacher_id"] == teacher.user_id
    assert outcome.data["marked_by"] == admin.user_id
    assert outcome.data["date"] == "2024-03-15"


def test_other_dates_and_classes_are_separate(teacher):
    class_id, student_id = _setup(teacher)
    other_class = add_class(teacher, {"name": "Physics", "start_time": "16:00", "end_time": "17:00",
                                      "recurring": "none", "date": "2024-03-15"}).data["class_id"]

    mark_attendance(teacher, student_id, class_id, DAY, "present")
    mark_attendance(teacher, student_id, other_class, DAY, "present")
    mark_attendance(teacher, student_id, class_id, date(2024, 3, 22), "present")

    assert _count_marks() == 3
    assert len(read_attendance(DAY, teacher)) == 2


def test_teacher_cannot_mark_foreign_class(teacher, other_teacher):
    class_id, student_id = _setup(teacher)
    outcome = mark_attendance(other_teacher, student_id, class_id, DAY, "present")
    assert not outcome.ok and outcome.reason == SCOPE
    assert _count_marks() == 0


def test_teacher_only_reads_own_marks(teacher, other_teacher, admin):
    class_id, student_id = _setup(teacher)
    mark_attendance(teacher, student_id, class_id, DAY, "present")
    assert read_attendance(DAY, other_teacher) == {}
    assert len(read_attendance(DAY, admin)) == 1


def test_bad_input(teacher):
    class_id, student_id = _setup(teacher)
    assert mark_attendance(teacher, student_id, class_id, DAY, "late").reason == VALIDATION
    assert mark_attendance(teacher, student_id, "nope", DAY, "present").reason == NOT_FOUND
    assert mark_attendance(teacher, "nope", class_id, DAY, "present").reason == NOT_FOUND
    assert _count_marks() == 0
