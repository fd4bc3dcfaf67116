import json
import logging
from Tuitiondesk.data.db import get_connection, new_id

logger = logging.getLogger(__name__)

_INVOICE_COLUMNS = (
	"id, student_id, teacher_id, month, year, student_ids, amount, status, "
	"generated_at, details, description"
)


def _row_to_invoice(row):
	if row is None:
		return None
	return {
		"id": row["id"],
		"student_id": row["student_id"],
		"teacher_id": row["teacher_id"],
		"month": row["month"],
		"year": row["year"],
		"student_ids": json.loads(row["student_ids"]) if row["student_ids"] else [],
		"amount": row["amount"],
		"status": row["status"],
		"generated_at": row["generated_at"],
		"details": json.loads(row["details"]) if row["details"] else {},
		"description": row["description"],
	}


def _encode_student_ids(student_ids):
	if not student_ids:
		return None
	return json.dumps(sorted(student_ids))


_KEY_WHERE = """
	student_id = ? AND teacher_id = ? AND month = ? AND year = ?
	AND COALESCE(student_ids, '') = ?
"""


def _key_params(student_id, teacher_id, month, year, student_ids):
	return (student_id, teacher_id, int(month), int(year), _encode_student_ids(student_ids) or "")


def save_invoice(student_id, teacher_id, month, year, amount, status, generated_at,
				 details, description=None, student_ids=()):
	"""Insert the invoice for its key, or overwrite the stored one, in one transaction.
	Returns ``(invoice_id, created)``; the id never changes once assigned."""
	key = _key_params(student_id, teacher_id, month, year, student_ids)
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(
			f"""
			INSERT INTO invoices ({_INVOICE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
			ON CONFLICT DO NOTHING
			""",
			(
				new_id(), student_id, teacher_id, int(month), int(year),
				_encode_student_ids(student_ids), amount, status, generated_at,
				json.dumps(details), description,
			),
		)
		created = c.rowcount == 1
		if not created:
			c.execute(
				f"""
				UPDATE invoices
				SET amount = ?, status = ?, generated_at = ?, details = ?,
					description = COALESCE(?, description), updated_at = datetime('now','localtime')
				WHERE {_KEY_WHERE}
				""",
				(amount, status, generated_at, json.dumps(details), description) + key,
			)
		c.execute(f"SELECT id FROM invoices WHERE {_KEY_WHERE}", key)
		invoice_id = c.fetchone()["id"]
		conn.commit()
	return invoice_id, created


def get_invoice_by_id(invoice_id):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute(f"SELECT {_INVOICE_COLUMNS} FROM invoices WHERE id = ?", (invoice_id,))
		return _row_to_invoice(c.fetchone())


def fetch_invoices(teacher_id=None, month=None, year=None):
	query = f"SELECT {_INVOICE_COLUMNS} FROM invoices"
	conditions = []
	params = []

	if teacher_id:
		conditions.append("teacher_id = ?")
		params.append(teacher_id)
	if month:
		conditions.append("month = ?")
		params.append(int(month))
	if year:
		conditions.append("year = ?")
		params.append(int(year))

	if conditions:
		query += " WHERE " + " AND ".join(conditions)

	query += " ORDER BY year DESC, month DESC, generated_at DESC"

	with get_connection() as conn:
		c = conn.cursor()
		c.execute(query, tuple(params))
		return [_row_to_invoice(r) for r in c.fetchall()]


def delete_invoice(invoice_id):
	"""Delete an invoice record by its ID."""
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
		conn.commit()
		return c.rowcount
