import logging
from Tuitiondesk.data.db import get_connection
from Tuitiondesk.data.repos.settings_repo import seed_default_settings
from Tuitiondesk.data.migrations import (
	migrate_attendance_unique_constraint,
	migrate_class_days_of_week,
	migrate_invoice_unique_key,
	migrate_student_teacher_ids,
)

logger = logging.getLogger(__name__)


def create_tables(run_migrations=True):
	"""Create all tables with UNIQUE constraints, indexes, and audit columns.

	Cross-entity cascades are done by the repos, not by foreign keys, so the
	store behaves like the document database it replaces.
	"""
	with get_connection() as conn:
		c = conn.cursor()

		# Users (teachers, admins, students with a login)
		c.execute("""
			CREATE TABLE IF NOT EXISTS users (
				id TEXT PRIMARY KEY,
				email TEXT UNIQUE NOT NULL,
				display_name TEXT,
				role TEXT NOT NULL DEFAULT 'student',
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")

		# Classes ("subjects")
		c.execute("""
			CREATE TABLE IF NOT EXISTS classes (
				id TEXT PRIMARY KEY,
				name TEXT NOT NULL,
				teacher_id TEXT NOT NULL,
				start_time TEXT NOT NULL,
				end_time TEXT NOT NULL,
				recurring TEXT NOT NULL DEFAULT 'none',
				days_of_week TEXT,
				day_of_week INTEGER,
				date TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")

		# Students
		c.execute("""
			CREATE TABLE IF NOT EXISTS students (
				id TEXT PRIMARY KEY,
				name TEXT NOT NULL,
				email TEXT DEFAULT '',
				hourly_rate REAL NOT NULL DEFAULT 35,
				teacher_ids TEXT,
				teacher_id TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")

		# Roster assignments
		c.execute("""
			CREATE TABLE IF NOT EXISTS assignments (
				id TEXT PRIMARY KEY,
				class_id TEXT NOT NULL,
				student_id TEXT NOT NULL,
				teacher_id TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				UNIQUE(class_id, student_id)
			);
		""")

		# Attendance (class_id is NULL for legacy marks)
		c.execute("""
			CREATE TABLE IF NOT EXISTS attendance (
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

		# Invoices
		c.execute("""
			CREATE TABLE IF NOT EXISTS invoices (
				id TEXT PRIMARY KEY,
				student_id TEXT NOT NULL,
				teacher_id TEXT NOT NULL,
				month INTEGER NOT NULL,
				year INTEGER NOT NULL,
				student_ids TEXT,
				amount REAL NOT NULL DEFAULT 0,
				status TEXT NOT NULL DEFAULT 'pending',
				generated_at TEXT,
				details TEXT,
				description TEXT,
				created_at TEXT DEFAULT (datetime('now','localtime')),
				updated_at TEXT DEFAULT (datetime('now','localtime'))
			);
		""")

		# Settings table
		c.execute("""
			CREATE TABLE IF NOT EXISTS settings (
				key TEXT PRIMARY KEY,
				value TEXT NOT NULL
			);
		""")

		# Indexes for the lookups the services run on every call
		c.execute("CREATE INDEX IF NOT EXISTS idx_classes_teacher_id ON classes(teacher_id);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_assignments_class_id ON assignments(class_id);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_assignments_student_id ON assignments(student_id);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_attendance_date ON attendance(date);")
		c.execute("CREATE INDEX IF NOT EXISTS idx_attendance_student_date ON attendance(student_id, date);")

		seed_default_settings(c)

		conn.commit()

	# the invoice key is part of the schema, not an optional migration
	migrate_invoice_unique_key()

	if run_migrations:
		migrate_attendance_unique_constraint()
		migrate_class_days_of_week()
		migrate_student_teacher_ids()
