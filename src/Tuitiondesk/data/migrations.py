import json
import logging
from Tuitiondesk.data.db import get_connection
from Tuitiondesk.core.records import migrated_class, migrated_student

logger = logging.getLogger(__name__)


def _table_exists(c, name):
	c.execute("SELECT sql FROM sqlite_master WHERE type='table' AND name=?;", (name,))
	return c.fetchone()


def migrate_attendance_unique_constraint():
	"""
	Ensure attendance has UNIQUE(student_id, class_id, date).
	If not, rebuild table with correct constraint and keep the latest mark per key.
	"""
	with get_connection() as conn:
		c = conn.cursor()

		# 1) table present?
		row = _table_exists(c, "attendance")
		if not row:
			return

		# 2) constraint already in place?
		ddl = (row[0] or "")
		ddl_norm = "".join(ddl.split()).lower()
		wanted = "unique(student_id,class_id,date)"
		if wanted in ddl_norm:
			logger.debug("attendance UNIQUE constraint present; nothing to migrate")
			return

		logger.info("Rebuilding attendance table with UNIQUE(student_id, class_id, date)...")

		# 3) keep the old table around while copying
		c.execute("ALTER TABLE attendance RENAME TO attendance_old;")

		# 4) new table with the right constraint
		c.execute("""
			CREATE TABLE attendance (
				id TEXT PRIMARY KEY,
				student_id TEXT NOT NULL,
				class_id TEXT,
				teacher_id TEXT,
				date TEXT NOT NULL,
				status TEXT NOT NULL,
				marked_by TEXT,
				marked_at TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime')),
				UNIQUE(student_id, class_id, date)
			);
		""")

		# 5) copy rows, newest mark first so INSERT OR IGNORE keeps it
		c.execute("""
			INSERT OR IGNORE INTO attendance
				(id, student_id, class_id, teacher_id, date, status,
				 marked_by, marked_at, created_at, updated_at)
			SELECT id, student_id, class_id, teacher_id, date, status,
				   marked_by, marked_at, created_at, updated_at
			FROM attendance_old
			ORDER BY COALESCE(marked_at, '1900-01-01') DESC;
		""")

		# 6) drop the old copy
		c.execute("DROP TABLE attendance_old;")

		# 7) indexes (idempotent)
		c.execute("CREATE INDEX IF NOT EXISTS idx_attendance_date ON attendance(date);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_attendance_student_date ON attendance(student_id, date);")

		conn.commit()
		logger.info("attendance table migrated")


def migrate_student_teacher_ids():
	"""
	Rewrite students that still carry the legacy single ``teacher_id`` into the
	``teacher_ids`` list form, dropping the old field. Safe to re-run.
	Returns the number of students updated.
	"""
	updated = 0
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("""
			SELECT id, teacher_id, teacher_ids
			FROM students
			WHERE teacher_id IS NOT NULL AND teacher_id != ''
		""")
		rows = c.fetchall()

		for row in rows:
			record = {
				"id": row["id"],
				"teacher_id": row["teacher_id"],
				"teacher_ids": json.loads(row["teacher_ids"]) if row["teacher_ids"] else None,
			}
			migrated, changed = migrated_student(record)
			if not changed:
				continue
			if record["teacher_ids"] is None:
				logger.info("Migrating student %s...", row["id"])
			else:
				logger.info("Cleaning up student %s (had both fields)...", row["id"])
			c.execute("""
				UPDATE students
				SET teacher_ids = ?, teacher_id = NULL, updated_at = datetime('now','localtime')
				WHERE id = ?
			""", (json.dumps(migrated["teacher_ids"]), row["id"]))
			updated += 1

		conn.commit()

	if updated:
		logger.info("Student migration complete. Updated %d records.", updated)
	return updated


def migrate_class_days_of_week():
	"""Move legacy ``day_of_week`` values into ``days_of_week``. Returns the count."""
	updated = 0
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("""
			SELECT id, day_of_week, days_of_week
			FROM classes
			WHERE day_of_week IS NOT NULL
		""")
		for row in c.fetchall():
			record = {
				"day_of_week": row["day_of_week"],
				"days_of_week": json.loads(row["days_of_week"]) if row["days_of_week"] else None,
			}
			migrated, changed = migrated_class(record)
			if not changed:
				continue
			c.execute("""
				UPDATE classes
				SET days_of_week = ?, day_of_week = NULL, updated_at = datetime('now','localtime')
				WHERE id = ?
			""", (json.dumps(migrated["days_of_week"]), row["id"]))
			updated += 1

		conn.commit()

	if updated:
		logger.info("Class migration complete. Updated %d records.", updated)
	return updated


def migrate_invoice_unique_key():
	"""
	Enforce one invoice per (student_id, teacher_id, month, year, student_ids).
	Older databases may hold duplicates; the most recently generated one is
	kept. ``student_ids`` is NULL for per-student invoices, and NULLs never
	collide in a UNIQUE index, hence the COALESCE. Returns rows removed.
	"""
	with get_connection() as conn:
		c = conn.cursor()
		if not _table_exists(c, "invoices"):
			return 0

		c.execute("""
			DELETE FROM invoices
			WHERE EXISTS (
				SELECT 1 FROM invoices AS newer
				WHERE newer.student_id = invoices.student_id
				  AND newer.teacher_id = invoices.teacher_id
				  AND newer.month = invoices.month
				  AND newer.year = invoices.year
				  AND COALESCE(newer.student_ids, '') = COALESCE(invoices.student_ids, '')
				  AND (COALESCE(newer.generated_at, '') > COALESCE(invoices.generated_at, '')
				       OR (COALESCE(newer.generated_at, '') = COALESCE(invoices.generated_at, '')
				           AND newer.rowid > invoices.rowid))
			);
		""")
		removed = c.rowcount
		if removed:
			logger.warning("Removed %d duplicate invoice(s) before adding the unique key", removed)

		c.execute("""
			CREATE UNIQUE INDEX IF NOT EXISTS idx_invoices_unique_key
			ON invoices(student_id, teacher_id, month, year, COALESCE(student_ids, ''));
		""")
		conn.commit()
	return removed
