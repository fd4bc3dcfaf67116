import logging
import os
import sys

from dotenv import load_dotenv

from Tuitiondesk import paths
from Tuitiondesk.core.scope import ROLE_SUPERADMIN
from Tuitiondesk.data.migrations import (
    migrate_attendance_unique_constraint,
    migrate_class_days_of_week,
    migrate_student_teacher_ids,
)
from Tuitiondesk.data.repos.settings_repo import get_setting_bool
from Tuitiondesk.data.repos.users_repo import count_users, insert_user
from Tuitiondesk.data.schema import create_tables

logger = logging.getLogger(__name__)


def _ensure_logging():
    root = logging.getLogger()
    if root.handlers:
        return  # respect existing setup
    log_dir = paths.ensure_app_data_dir()

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    file_handler = logging.FileHandler(log_dir / paths.LOG_PATH.name, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    root.setLevel(logging.INFO)
    root.addHandler(file_handler)

    # frozen builds have no console to write to
    if not getattr(sys, "frozen", False):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)


def run_migrations():
    migrate_attendance_unique_constraint()
    classes = migrate_class_days_of_week()
    students = migrate_student_teacher_ids()
    return {"classes": classes, "students": students}


def initialize_app():
    # 1) environment first: it may move the data dir and the database
    load_dotenv()
    paths.reload_from_env()
    _ensure_logging()
    logger.info("using database %s", paths.DB_PATH)

    # 2) tables and default settings, then migrations unless switched off
    create_tables(run_migrations=False)
    if get_setting_bool("auto_migrate", True):
        run_migrations()

    # 3) first superadmin
    admin_email = (os.getenv("ADMIN_EMAIL") or "").strip()
    if count_users() == 0:
        if admin_email:
            insert_user(admin_email, role=ROLE_SUPERADMIN, display_name="Administrator")
            logger.info("default superadmin %s created", admin_email)
        else:
            logger.warning("ADMIN_EMAIL not set; no superadmin user was created")
