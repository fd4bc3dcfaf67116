import logging
from Tuitiondesk.data.db import get_connection, new_id

logger = logging.getLogger(__name__)


def _row_to_user(row):
	if row is None:
		return None
	return {
		"id": row["id"],
		"email": row["email"],
		"display_name": row["display_name"],
		"role": row["role"],
	}


def insert_user(email, role="student", display_name=None, user_id=None):
	user_id = user_id or new_id()
	with get_connection() as conn:
		conn.execute(
			"INSERT INTO users (id, email, display_name, role) VALUES (?, ?, ?, ?)",
			(user_id, email, display_name, role),
		)
		conn.commit()
	return user_id


def get_user_by_id(user_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("SELECT id, email, display_name, role FROM users WHERE id = ?", (user_id,))
		return _row_to_user(c.fetchone())


def fetch_users(role=None):
	query = "SELECT id, email, display_name, role FROM users"
	params = []
	if role:
		query += " WHERE role = ?"
		params.append(role)
	query += " ORDER BY email COLLATE NOCASE"
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return [_row_to_user(r) for r in c.fetchall()]


def fetch_teachers():
	return fetch_users(role="teacher")


def update_user_role(user_id, role):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			"UPDATE users SET role = ?, updated_at = datetime('now','localtime') WHERE id = ?",
			(role, user_id),
		)
		conn.commit()
		return c.rowcount


def count_users():
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("SELECT COUNT(*) FROM users")
		row = c.fetchone()
		return row[0] if row else 0
