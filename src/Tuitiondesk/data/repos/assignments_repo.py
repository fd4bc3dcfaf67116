import logging
from Tuitiondesk.data.db import get_connection, new_id

logger = logging.getLogger(__name__)


def _row_to_assignment(row):
	return {
		"id": row["id"],
		"class_id": row["class_id"],
		"student_id": row["student_id"],
		"teacher_id": row["teacher_id"],
		"created_at": row["created_at"],
	}


def get_assignment_by_id(assignment_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			"SELECT id, class_id, student_id, teacher_id, created_at FROM assignments WHERE id = ?",
			(assignment_id,),
		)
		row = c.fetchone()
		return _row_to_assignment(row) if row else None


def assignment_exists(class_id, student_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			"SELECT COUNT(*) FROM assignments WHERE class_id = ? AND student_id = ?",
			(class_id, student_id),
		)
		return c.fetchone()[0] > 0


def insert_assignment(class_id, student_id, teacher_id):
	assignment_id = new_id()
	with get_connection() as conn:
		conn.execute(
			"INSERT INTO assignments (id, class_id, student_id, teacher_id) VALUES (?, ?, ?, ?)",
			(assignment_id, class_id, student_id, teacher_id),
		)
		conn.commit()
	return assignment_id


def fetch_assignments(teacher_id=None, class_id=None, student_id=None):
	query = "SELECT id, class_id, student_id, teacher_id, created_at FROM assignments"
	conditions = []
	params = []

	if teacher_id:
		conditions.append("teacher_id = ?")
		params.append(teacher_id)
	if class_id:
		conditions.append("class_id = ?")
		params.append(class_id)
	if student_id:
		conditions.append("student_id = ?")
		params.append(student_id)

	if conditions:
		query += " WHERE " + " AND ".join(conditions)

	query += " ORDER BY created_at"

	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return [_row_to_assignment(r) for r in c.fetchall()]


def delete_assignment(assignment_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("DELETE FROM assignments WHERE id = ?", (assignment_id,))
		conn.commit()
		return c.rowcount
