from datetime import date

from Tuitiondesk.core.schedule import agenda_for, has_classes_on, students_for_class
from Tuitiondesk.data.repos.assignments_repo import fetch_assignments
from Tuitiondesk.data.repos.classes_repo import fetch_classes
from Tuitiondesk.data.repos.students_repo import fetch_students


def todays_classes(scope, day=None):
    """Agenda for ``day`` (today by default) as seen by ``scope``."""
    day = day or date.today()
    teacher_id = scope.teacher_filter
    return agenda_for(
        day,
        fetch_classes(teacher_id=teacher_id),
        fetch_assignments(teacher_id=teacher_id),
        fetch_students(teacher_id=teacher_id),
        scope,
    )


def has_any_classes(scope, day=None):
    return has_classes_on(day or date.today(), fetch_classes(teacher_id=scope.teacher_filter))


def attendance_sheet(scope, class_id):
    # roster records for one class, used to build the marking list
    teacher_id = scope.teacher_filter
    return students_for_class(
        class_id,
        fetch_assignments(teacher_id=teacher_id, class_id=class_id),
        fetch_students(teacher_id=teacher_id),
    )
