import sqlite3
import uuid
from datetime import datetime

from Tuitiondesk import paths


def get_connection():
    # resolved per call so a relocated DB_PATH (tests, env override) is honored
    paths.DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(paths.DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA synchronous = NORMAL")
    return conn


def new_id() -> str:
    return uuid.uuid4().hex


def now_str() -> str:
    return datetime.now().isoformat(timespec="seconds")
