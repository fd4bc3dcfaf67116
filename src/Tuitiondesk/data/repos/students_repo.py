import json
import logging
from Tuitiondesk.data.db import get_connection, new_id
from Tuitiondesk.core.records import teacher_ids

logger = logging.getLogger(__name__)

_STUDENT_COLUMNS = "id, name, email, hourly_rate, teacher_ids, teacher_id"


def _encode_ids(ids):
	# NULL means the record predates the list field
	if ids is None:
		return None
	return json.dumps(list(ids))


def _row_to_student(row):
	if row is None:
		return None
	record = {
		"id": row["id"],
		"name": row["name"],
		"email": row["email"] or "",
		"hourly_rate": row["hourly_rate"],
		"teacher_ids": json.loads(row["teacher_ids"]) if row["teacher_ids"] else None,
	}
	if row["teacher_id"]:
		record["teacher_id"] = row["teacher_id"]
	return record


def insert_student(record):
	"""Insert a student in the ``teacher_ids`` form. Returns its id."""
	student_id = record.get("id") or new_id()
	with get_connection() as conn:
		conn.execute(
			f"INSERT INTO students ({_STUDENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
			(
				student_id,
				record["name"],
				record.get("email") or "",
				float(record["hourly_rate"]),
				_encode_ids(record.get("teacher_ids")),
				record.get("teacher_id"),
			),
		)
		conn.commit()
	return student_id


def get_student_by_id(student_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE id = ?", (student_id,))
		return _row_to_student(c.fetchone())


def fetch_students(teacher_id=None):
	"""All students, or those visible to ``teacher_id`` through either id field."""
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(f"SELECT {_STUDENT_COLUMNS} FROM students ORDER BY name COLLATE NOCASE")
		students = [_row_to_student(r) for r in c.fetchall()]
	if teacher_id:
		students = [s for s in students if teacher_id in teacher_ids(s)]
	return students


def update_student_by_id(student_id, name, email, hourly_rate):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			"""
			UPDATE students
			SET name=?, email=?, hourly_rate=?, updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(name, email or "", float(hourly_rate), student_id),
		)
		conn.commit()
		return c.rowcount


def delete_student_by_id(student_id):
	"""Delete the student and its roster assignments. Returns assignments removed."""
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("DELETE FROM students WHERE id=?", (student_id,))
		c.execute("DELETE FROM assignments WHERE student_id=?", (student_id,))
		removed = c.rowcount
		conn.commit()
		return removed


def add_teacher_to_students(student_ids, teacher_id):
	"""Append ``teacher_id`` to each student's ``teacher_ids`` where missing.
	Returns the number of students changed."""
	changed = 0
	with get_connection() as conn:
		c = conn.cursor()
		for student_id in student_ids:
			c.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE id = ?", (student_id,))
			student = _row_to_student(c.fetchone())
			if student is None:
				continue
			ids = teacher_ids(student)
			if teacher_id in ids:
				continue
			c.execute(
				"UPDATE students SET teacher_ids=?, updated_at=datetime('now','localtime') WHERE id=?",
				(json.dumps(ids + [teacher_id]), student_id),
			)
			changed += 1
		conn.commit()
	return changed
