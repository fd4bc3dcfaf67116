import logging

from Tuitiondesk.core.errors import ScopeError, ValidationError
from Tuitiondesk.core.records import teacher_ids
from Tuitiondesk.core.results import DUPLICATE, NOT_FOUND, Outcome
from Tuitiondesk.core.utils import parse_user_amount
from Tuitiondesk.core.validation import (
    validate_class_payload,
    validate_role,
    validate_student_payload,
)
from Tuitiondesk.data.repos.assignments_repo import (
    assignment_exists,
    delete_assignment,
    fetch_assignments,
    get_assignment_by_id,
    insert_assignment,
)
from Tuitiondesk.data.repos.classes_repo import (
    delete_class_by_id,
    get_class_by_id,
    insert_class,
    update_class_by_id,
)
from Tuitiondesk.data.repos.students_repo import (
    add_teacher_to_students,
    delete_student_by_id,
    get_student_by_id,
    insert_student,
    update_student_by_id,
)
from Tuitiondesk.data.repos.users_repo import fetch_teachers, get_user_by_id, update_user_role
from Tuitiondesk.services.common import reported

logger = logging.getLogger(__name__)


def _owning_teacher(scope, teacher_id):
    # teachers always act for themselves; a superadmin has to pick someone
    if scope.is_restricted:
        return scope.user_id
    if not teacher_id:
        raise ValidationError("Please select a teacher.")
    return teacher_id


def _clean_rate(payload):
    rate = payload.get("hourly_rate")
    if isinstance(rate, str):
        payload = dict(payload, hourly_rate=parse_user_amount(rate))
    return payload


# -------------------- Classes --------------------

@reported("Failed to add subject")
def add_class(scope, payload):
    record = validate_class_payload(payload)
    record["teacher_id"] = _owning_teacher(scope, payload.get("teacher_id"))
    class_id = insert_class(record)
    logger.info("class %s (%s) added for teacher %s", class_id, record["name"], record["teacher_id"])
    return Outcome.success("Subject added successfully!", {"class_id": class_id})


@reported("Failed to update subject")
def update_class(scope, class_id, payload):
    existing = get_class_by_id(class_id)
    if existing is None:
        return Outcome.failure(NOT_FOUND, "Subject not found.")
    if not scope.owns(existing):
        raise ScopeError("You can only edit your own subjects.")

    record = validate_class_payload(payload)
    requested = None if scope.is_restricted else payload.get("teacher_id")
    record["teacher_id"] = requested or existing["teacher_id"]
    update_class_by_id(class_id, record)

    if record["teacher_id"] != existing["teacher_id"]:
        # the new owner has to see the roster it inherits
        rostered = [a["student_id"] for a in fetch_assignments(class_id=class_id)]
        add_teacher_to_students(rostered, record["teacher_id"])
        logger.info("class %s moved from %s to %s", class_id, existing["teacher_id"], record["teacher_id"])
    return Outcome.success("Subject updated successfully!", {"class_id": class_id})


@reported("Failed to delete subject")
def delete_class(scope, class_id):
    class_def = get_class_by_id(class_id)
    if class_def is None:
        return Outcome.failure(NOT_FOUND, "Subject not found.")
    if not scope.owns(class_def):
        raise ScopeError("You can only delete your own subjects.")
    removed = delete_class_by_id(class_id)
    logger.info("class %s deleted with %d assignment(s)", class_id, removed)
    return Outcome.success("Subject deleted successfully!", {"assignments_removed": removed})


# -------------------- Students --------------------

def _visible_student(scope, student_id):
    student = get_student_by_id(student_id)
    if student is not None and not scope.can_see_student(student):
        raise ScopeError("You can only manage your own students.")
    return student


@reported("Failed to add student")
def add_student(scope, payload):
    record = validate_student_payload(_clean_rate(payload))
    record["teacher_ids"] = [_owning_teacher(scope, payload.get("teacher_id"))]
    student_id = insert_student(record)
    logger.info("student %s (%s) added", student_id, record["name"])
    return Outcome.success("Student added successfully!", {"student_id": student_id})


@reported("Failed to update student")
def update_student(scope, student_id, payload):
    record = validate_student_payload(_clean_rate(payload))
    if _visible_student(scope, student_id) is None:
        return Outcome.failure(NOT_FOUND, "Student not found.")
    update_student_by_id(student_id, record["name"], record["email"], record["hourly_rate"])
    return Outcome.success("Student updated successfully!", {"student_id": student_id})


@reported("Failed to delete student")
def delete_student(scope, student_id):
    if _visible_student(scope, student_id) is None:
        return Outcome.failure(NOT_FOUND, "Student not found.")
    removed = delete_student_by_id(student_id)
    logger.info("student %s deleted with %d assignment(s)", student_id, removed)
    return Outcome.success("Student deleted successfully!", {"assignments_removed": removed})


# -------------------- Assignments --------------------

@reported("Failed to assign students")
def assign_students(scope, class_id, student_ids, teacher_id=None):
    """Put students on a class roster. Pairs already on the roster are skipped."""
    class_def = get_class_by_id(class_id)
    if class_def is None:
        return Outcome.failure(NOT_FOUND, "Subject not found.")
    if not scope.owns(class_def):
        raise ScopeError("You can only assign students to your own subjects.")
    if not student_ids:
        raise ValidationError("Please select at least one student.")
    # roster rows always carry the subject owner so scoped reads find them
    if teacher_id and teacher_id != class_def["teacher_id"]:
        raise ValidationError("Students can only be assigned under the subject's teacher.")
    teacher_id = class_def["teacher_id"]

    created, skipped = [], []
    for student_id in dict.fromkeys(student_ids):
        student = get_student_by_id(student_id)
        if student is None:
            skipped.append(student_id)
            continue
        if scope.is_restricted and scope.user_id not in teacher_ids(student):
            raise ScopeError("You can only assign your own students.")
        if assignment_exists(class_id, student_id):
            skipped.append(student_id)
            continue
        created.append(insert_assignment(class_id, student_id, teacher_id))

    data = {"created": len(created), "skipped": len(skipped), "assignment_ids": created}
    if not created:
        return Outcome.failure(DUPLICATE, "Selected students are already assigned to this subject.", data)
    message = f"{len(created)} student(s) assigned successfully!"
    if skipped:
        message += f" {len(skipped)} already assigned."
    return Outcome.success(message, data)


@reported("Failed to remove assignment")
def remove_assignment(scope, assignment_id):
    assignment = get_assignment_by_id(assignment_id)
    if assignment is None:
        return Outcome.failure(NOT_FOUND, "Assignment not found.")
    if not scope.owns(assignment):
        raise ScopeError("You can only change rosters of your own subjects.")
    delete_assignment(assignment_id)
    return Outcome.success("Student removed from subject successfully!")


# -------------------- Users --------------------

@reported("Failed to update user role")
def set_user_role(scope, user_id, role):
    if scope.is_restricted:
        raise ScopeError("Only a superadmin can change user roles.")
    role = validate_role(role)
    user = get_user_by_id(user_id)
    if user is None:
        return Outcome.failure(NOT_FOUND, "User not found.")
    update_user_role(user_id, role)
    logger.info("user %s role: %s -> %s", user["email"], user["role"], role)
    return Outcome.success(f"User role updated to {role}.")


def list_teachers():
    return fetch_teachers()
