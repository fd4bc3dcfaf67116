import logging
from Tuitiondesk.data.db import get_connection, new_id

logger = logging.getLogger(__name__)

_MARK_COLUMNS = "id, student_id, class_id, teacher_id, date, status, marked_by, marked_at"


def _row_to_mark(row):
	if row is None:
		return None
	return {
		"id": row["id"],
		"student_id": row["student_id"],
		"class_id": row["class_id"],
		"teacher_id": row["teacher_id"],
		"date": row["date"],
		"status": row["status"],
		"marked_by": row["marked_by"],
		"marked_at": row["marked_at"],
	}


def find_attendance_mark(student_id, class_id, date_str, teacher_id=None):
	"""The mark stored under (student, class, date), or None.
	``class_id=None`` looks up a legacy unscoped mark."""
	query = f"SELECT {_MARK_COLUMNS} FROM attendance WHERE student_id = ? AND date = ?"
	params = [student_id, date_str]
	if class_id is None:
		query += " AND class_id IS NULL"
	else:
		query += " AND class_id = ?"
		params.append(class_id)
	if teacher_id:
		query += " AND teacher_id = ?"
		params.append(teacher_id)
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return _row_to_mark(c.fetchone())


def get_attendance_mark_by_id(mark_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(f"SELECT {_MARK_COLUMNS} FROM attendance WHERE id = ?", (mark_id,))
		return _row_to_mark(c.fetchone())


def insert_attendance_mark(student_id, class_id, teacher_id, date_str, status, marked_by, marked_at):
	mark_id = new_id()
	with get_connection() as conn:
		conn.execute(
			f"INSERT INTO attendance ({_MARK_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
			(mark_id, student_id, class_id, teacher_id, date_str, status, marked_by, marked_at),
		)
		conn.commit()
	return mark_id


def update_attendance_mark(mark_id, status, marked_by, marked_at):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			"""
			UPDATE attendance
			SET status = ?, marked_by = ?, marked_at = ?, updated_at = datetime('now','localtime')
			WHERE id = ?
			""",
			(status, marked_by, marked_at, mark_id),
		)
		conn.commit()
		return c.rowcount


def fetch_attendance_by_date(date_str, teacher_id=None):
	query = f"SELECT {_MARK_COLUMNS} FROM attendance WHERE date = ?"
	params = [date_str]
	if teacher_id:
		query += " AND teacher_id = ?"
		params.append(teacher_id)
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return [_row_to_mark(r) for r in c.fetchall()]


def fetch_present_attendance(student_ids, date_from, date_to, teacher_id=None):
	"""Present marks for the given students with ``date_from <= date <= date_to``
	(plain string comparison on ``YYYY-MM-DD``)."""
	student_ids = list(student_ids)
	if not student_ids:
		return []
	placeholders = ", ".join("?" for _ in student_ids)
	query = f"""
		SELECT {_MARK_COLUMNS} FROM attendance
		WHERE student_id IN ({placeholders})
		  AND status = 'present'
		  AND date >= ? AND date <= ?
	"""
	params = student_ids + [date_from, date_to]
	if teacher_id:
		query += " AND teacher_id = ?"
		params.append(teacher_id)
	query += " ORDER BY date, marked_at"
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return [_row_to_mark(r) for r in c.fetchall()]
