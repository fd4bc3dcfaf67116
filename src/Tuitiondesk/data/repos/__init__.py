from .settings_repo import (
	set_setting, get_setting, seed_default_settings, get_setting_bool, set_setting_bool,
	get_currency_label, get_default_hourly_rate
)
from .users_repo import (
	insert_user, get_user_by_id, fetch_users, fetch_teachers, update_user_role, count_users
)
from .classes_repo import (
	insert_class, get_class_by_id, fetch_classes, update_class_by_id, delete_class_by_id
)
from .students_repo import (
	insert_student, get_student_by_id, fetch_students, update_student_by_id, delete_student_by_id,
	add_teacher_to_students
)
from .assignments_repo import (
	insert_assignment, assignment_exists, fetch_assignments, delete_assignment, get_assignment_by_id
)
from .attendance_repo import (
	find_attendance_mark, insert_attendance_mark, update_attendance_mark,
	fetch_attendance_by_date, fetch_present_attendance, get_attendance_mark_by_id
)
from .invoices_repo import (
	save_invoice, get_invoice_by_id, fetch_invoices, delete_invoice
)
