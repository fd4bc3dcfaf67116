from pathlib import Path
import platform, os

APP_NAME = "Tuitiondesk"

def get_app_data_dir() -> Path:
    override = os.getenv("TUITIONDESK_DATA_DIR")
    if override:
        return Path(override)
    sysname = platform.system()
    if sysname == "Windows":
        base = Path(os.getenv("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / APP_NAME
    elif sysname == "Darwin":  # macOS
        return Path.home() / "Library" / "Application Support" / APP_NAME
    else: # Linux / others
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))
        return base / APP_NAME

def get_db_path(app_data_dir: Path) -> Path:
    return Path(os.getenv("TUITIONDESK_DB_PATH") or app_data_dir / "tuitiondesk.db")

APP_DATA_DIR = get_app_data_dir()

DB_PATH = get_db_path(APP_DATA_DIR)
LOG_PATH = APP_DATA_DIR / "tuitiondesk.log"

def reload_from_env():
    """Re-read the path overrides, e.g. after a .env file was loaded."""
    global APP_DATA_DIR, DB_PATH, LOG_PATH
    APP_DATA_DIR = get_app_data_dir()
    DB_PATH = get_db_path(APP_DATA_DIR)
    LOG_PATH = APP_DATA_DIR / "tuitiondesk.log"
    return DB_PATH

def ensure_app_data_dir() -> Path:
    APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
    return APP_DATA_DIR
