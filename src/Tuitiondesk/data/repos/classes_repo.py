import json
import logging
from Tuitiondesk.data.db import get_connection, new_id

logger = logging.getLogger(__name__)

_CLASS_COLUMNS = "id, name, teacher_id, start_time, end_time, recurring, days_of_week, day_of_week, date"


def _row_to_class(row):
	if row is None:
		return None
	record = {
		"id": row["id"],
		"name": row["name"],
		"teacher_id": row["teacher_id"],
		"start_time": row["start_time"],
		"end_time": row["end_time"],
		"recurring": row["recurring"],
		"date": row["date"],
	}
	if row["days_of_week"]:
		record["days_of_week"] = json.loads(row["days_of_week"])
	if row["day_of_week"] is not None:
		record["day_of_week"] = row["day_of_week"]
	return record


def _encode_days(record):
	days = record.get("days_of_week")
	if days is None:
		return None
	return json.dumps(sorted(int(d) for d in days))


def insert_class(record):
	"""Insert a class definition (canonical ``days_of_week`` form). Returns its id."""
	class_id = record.get("id") or new_id()
	with get_connection() as conn:
		conn.execute(
			f"INSERT INTO classes ({_CLASS_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
			(
				class_id,
				record["name"],
				record["teacher_id"],
				record["start_time"],
				record["end_time"],
				record.get("recurring", "none"),
				_encode_days(record),
				record.get("day_of_week"),
				record.get("date"),
			),
		)
		conn.commit()
	return class_id


def get_class_by_id(class_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(f"SELECT {_CLASS_COLUMNS} FROM classes WHERE id = ?", (class_id,))
		return _row_to_class(c.fetchone())


def fetch_classes(teacher_id=None):
	"""All classes, or only those owned by ``teacher_id``."""
	query = f"SELECT {_CLASS_COLUMNS} FROM classes"
	params = []
	if teacher_id:
		query += " WHERE teacher_id = ?"
		params.append(teacher_id)
	query += " ORDER BY start_time, name COLLATE NOCASE"
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return [_row_to_class(r) for r in c.fetchall()]


def update_class_by_id(class_id, record):
	"""Rewrite a class in the canonical form (the legacy column is cleared).
	Roster assignments follow the class to its new owner in the same transaction."""
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			"""
			UPDATE classes
			SET name=?, teacher_id=?, start_time=?, end_time=?, recurring=?,
				days_of_week=?, day_of_week=NULL, date=?, updated_at=datetime('now','localtime')
			WHERE id=?
			""",
			(
				record["name"],
				record["teacher_id"],
				record["start_time"],
				record["end_time"],
				record["recurring"],
				_encode_days(record),
				record.get("date"),
				class_id,
			),
		)
		updated = c.rowcount
		c.execute(
			"UPDATE assignments SET teacher_id=? WHERE class_id=? AND COALESCE(teacher_id, '') != ?",
			(record["teacher_id"], class_id, record["teacher_id"]),
		)
		if c.rowcount:
			logger.info("class %s: %d assignment(s) moved to teacher %s", class_id, c.rowcount, record["teacher_id"])
		conn.commit()
		return updated


def delete_class_by_id(class_id):
	"""Delete the class, then every roster assignment pointing at it.
	Returns the number of assignments removed."""
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("DELETE FROM classes WHERE id=?", (class_id,))
		c.execute("DELETE FROM assignments WHERE class_id=?", (class_id,))
		removed = c.rowcount
		conn.commit()
		return removed
