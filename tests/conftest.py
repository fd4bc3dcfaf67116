from datetime import date

import pytest

from Tuitiondesk import paths
from Tuitiondesk.core.scope import Scope
from Tuitiondesk.data.repos.users_repo import insert_user
from Tuitiondesk.data.schema import create_tables


@pytest.fixture(autouse=True)
def db(tmp_path, monkeypatch):
    """Every test gets its own empty database file."""
    db_path = tmp_path / "tuitiondesk.db"
    monkeypatch.setattr(paths, "APP_DATA_DIR", tmp_path)
    monkeypatch.setattr(paths, "DB_PATH", db_path)
    monkeypatch.setattr(paths, "LOG_PATH", tmp_path / "tuitiondesk.log")
    create_tables()
    return db_path


@pytest.fixture
def teacher():
    user_id = insert_user("alice@example.com", role="teacher", display_name="Alice")
    return Scope.teacher(user_id)


@pytest.fixture
def other_teacher():
    user_id = insert_user("bob@example.com", role="teacher", display_name="Bob")
    return Scope.teacher(user_id)


@pytest.fixture
def admin():
    user_id = insert_user("admin@example.com", role="superadmin")
    return Scope.superadmin(user_id)


@pytest.fixture
def march_fridays():
    return [date(2024, 3, d) for d in (1, 8, 15, 22)]
