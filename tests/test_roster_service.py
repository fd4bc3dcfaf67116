from datetime import date

from Tuitiondesk.core.results import DUPLICATE, NOT_FOUND, SCOPE, VALIDATION
from Tuitiondesk.data.repos.assignments_repo import fetch_assignments
from Tuitiondesk.data.repos.classes_repo import get_class_by_id
from Tuitiondesk.data.repos.students_repo import get_student_by_id
from Tuitiondesk.data.repos.users_repo import get_user_by_id, insert_user
from Tuitiondesk.services.agenda_service import attendance_sheet, has_any_classes, todays_classes
from Tuitiondesk.services.roster_service import (
    add_class,
    add_student,
    assign_students,
    delete_class,
    delete_student,
    list_teachers,
    remove_assignment,
    set_user_role,
    update_class,
    update_student,
)

MONDAY = date(2024, 3, 18)
WEEKLY = {"name": "Maths", "start_time": "14:00", "end_time": "15:30",
          "recurring": "weekly", "days_of_week": [1]}


def _students(scope, *names):
    return [add_student(scope, {"name": n, "hourly_rate": "RM 40"}).data["student_id"] for n in names]


def test_add_student_parses_rate_and_owner(teacher):
    student = get_student_by_id(_students(teacher, "Ana")[0])
    assert student["hourly_rate"] == 40.0
    assert student["teacher_ids"] == [teacher.user_id]


def test_superadmin_needs_explicit_teacher(admin, teacher):
    assert add_class(admin, WEEKLY).reason == VALIDATION
    assert add_student(admin, {"name": "Ana", "hourly_rate": 40}).reason == VALIDATION
    outcome = add_class(admin, dict(WEEKLY, teacher_id=teacher.user_id))
    assert get_class_by_id(outcome.data["class_id"])["teacher_id"] == teacher.user_id


def test_teacher_cannot_create_for_someone_else(teacher, other_teacher):
    outcome = add_class(teacher, dict(WEEKLY, teacher_id=other_teacher.user_id))
    assert get_class_by_id(outcome.data["class_id"])["teacher_id"] == teacher.user_id


def test_update_class(teacher, other_teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    payload = dict(WEEKLY, name="Further Maths", days_of_week=[2, 4])
    assert update_class(teacher, class_id, payload).ok
    updated = get_class_by_id(class_id)
    assert updated["name"] == "Further Maths"
    assert updated["days_of_week"] == [2, 4]
    assert updated["teacher_id"] == teacher.user_id

    assert update_class(other_teacher, class_id, payload).reason == SCOPE
    assert update_class(teacher, "nope", payload).reason == NOT_FOUND
    assert update_class(teacher, class_id, dict(payload, end_time="13:00")).reason == VALIDATION


def test_assign_skips_existing_pairs(teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    ana, ben = _students(teacher, "Ana", "Ben")

    first = assign_students(teacher, class_id, [ana])
    second = assign_students(teacher, class_id, [ana, ben])
    third = assign_students(teacher, class_id, [ana, ben])

    assert first.data["created"] == 1
    assert second.ok and (second.data["created"], second.data["skipped"]) == (1, 1)
    assert not third.ok and third.reason == DUPLICATE
    assert len(fetch_assignments(class_id=class_id)) == 2


def test_teacher_cannot_assign_foreign_students(teacher, other_teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    (stranger,) = _students(other_teacher, "Zed")
    assert assign_students(teacher, class_id, [stranger]).reason == SCOPE
    assert assign_students(other_teacher, class_id, [stranger]).reason == SCOPE


def test_delete_class_cascades_assignments(teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    ids = _students(teacher, "Ana", "Ben", "Cy")
    assign_students(teacher, class_id, ids)
    assert len(todays_classes(teacher, MONDAY)) == 1

    outcome = delete_class(teacher, class_id)

    assert outcome.data == {"assignments_removed": 3}
    assert fetch_assignments(class_id=class_id) == []
    assert todays_classes(teacher, MONDAY) == []
    assert delete_class(teacher, class_id).reason == NOT_FOUND


def test_delete_student_cascades_assignments(teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    ana, ben = _students(teacher, "Ana", "Ben")
    assign_students(teacher, class_id, [ana, ben])

    assert delete_student(teacher, ana).data == {"assignments_removed": 1}
    assert [a["student_id"] for a in fetch_assignments(class_id=class_id)] == [ben]
    assert todays_classes(teacher, MONDAY)[0].student_names == ["Ben"]
    assert delete_student(teacher, ana).reason == NOT_FOUND


def test_update_student(teacher):
    (ana,) = _students(teacher, "Ana")
    assert update_student(teacher, ana, {"name": "Ana Maria", "email": "ana@example.com", "hourly_rate": 45}).ok
    assert get_student_by_id(ana)["hourly_rate"] == 45.0
    assert update_student(teacher, ana, {"name": "Ana", "hourly_rate": -1}).reason == VALIDATION
    assert update_student(teacher, "nope", {"name": "Ana", "hourly_rate": 40}).reason == NOT_FOUND


def test_remove_assignment(teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    (ana,) = _students(teacher, "Ana")
    (assignment_id,) = assign_students(teacher, class_id, [ana]).data["assignment_ids"]
    assert remove_assignment(teacher, assignment_id).ok
    assert remove_assignment(teacher, assignment_id).reason == NOT_FOUND


def test_agenda_and_attendance_sheet(teacher, other_teacher):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    once = add_class(teacher, {"name": "Exam prep", "start_time": "09:00", "end_time": "10:00",
                               "recurring": "none", "date": "2024-03-18"}).data["class_id"]
    ana, ben = _students(teacher, "Ana", "Ben")
    assign_students(teacher, class_id, [ana, ben])

    agenda = todays_classes(teacher, MONDAY)
    assert [e.class_def["id"] for e in agenda] == [once, class_id]
    assert has_any_classes(teacher, MONDAY)
    assert not has_any_classes(teacher, date(2024, 3, 19))
    assert todays_classes(other_teacher, MONDAY) == []
    assert sorted(s["name"] for s in attendance_sheet(teacher, class_id)) == ["Ana", "Ben"]


def test_roles(teacher, admin):
    user_id = insert_user("carol@example.com")
    assert set_user_role(admin, user_id, "teacher").ok
    assert get_user_by_id(user_id)["role"] == "teacher"
    assert {t["email"] for t in list_teachers()} == {"alice@example.com", "carol@example.com"}
    assert set_user_role(admin, user_id, "owner").reason == VALIDATION
    assert set_user_role(admin, "nope", "teacher").reason == NOT_FOUND


def test_reassigned_class_keeps_its_roster(teacher, other_teacher, admin):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    (ana,) = _students(teacher, "Ana")
    assign_students(teacher, class_id, [ana])

    assert update_class(admin, class_id, dict(WEEKLY, teacher_id=other_teacher.user_id)).ok

    assert [a["teacher_id"] for a in fetch_assignments(class_id=class_id)] == [other_teacher.user_id]
    assert get_student_by_id(ana)["teacher_ids"] == [teacher.user_id, other_teacher.user_id]
    (entry,) = todays_classes(other_teacher, MONDAY)
    assert entry.student_names == ["Ana"]
    assert [s["name"] for s in attendance_sheet(other_teacher, class_id)] == ["Ana"]
    assert todays_classes(teacher, MONDAY) == []


def test_assignments_always_carry_the_subject_owner(teacher, other_teacher, admin):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    (ana,) = _students(teacher, "Ana")
    outcome = assign_students(admin, class_id, [ana], teacher_id=other_teacher.user_id)
    assert outcome.reason == VALIDATION
    assert assign_students(admin, class_id, [ana]).ok
    assert fetch_assignments(class_id=class_id)[0]["teacher_id"] == teacher.user_id


def test_teachers_cannot_touch_each_others_records(teacher, other_teacher, admin):
    class_id = add_class(teacher, WEEKLY).data["class_id"]
    (ana,) = _students(teacher, "Ana")
    (assignment_id,) = assign_students(teacher, class_id, [ana]).data["assignment_ids"]

    assert delete_class(other_teacher, class_id).reason == SCOPE
    assert update_student(other_teacher, ana, {"name": "X", "hourly_rate": 1}).reason == SCOPE
    assert delete_student(other_teacher, ana).reason == SCOPE
    assert remove_assignment(other_teacher, assignment_id).reason == SCOPE
    assert set_user_role(teacher, other_teacher.user_id, "superadmin").reason == SCOPE

    assert get_class_by_id(class_id) is not None
    assert get_student_by_id(ana)["name"] == "Ana"
    assert len(fetch_assignments(class_id=class_id)) == 1
    assert get_user_by_id(other_teacher.user_id)["role"] == "teacher"

    assert remove_assignment(admin, assignment_id).ok
    assert delete_student(admin, ana).ok
    assert delete_class(admin, class_id).ok
