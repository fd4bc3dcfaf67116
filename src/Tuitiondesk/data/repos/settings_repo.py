import logging
from Tuitiondesk.data.db import get_connection

logger = logging.getLogger(__name__)

DEFAULT_HOURLY_RATE = 35.0
DEFAULT_CURRENCY = "RM"

# seeded on every start; a key already present is left alone
DEFAULT_SETTINGS = {
	"currency_unit": DEFAULT_CURRENCY,
	"default_hourly_rate": "35",
	"auto_migrate": "1",
}


def set_setting(key, value):
	with get_connection() as conn:
		conn.execute("REPLACE INTO settings (key, value) VALUES (?, ?)", (key, str(value)))
		conn.commit()


def get_setting(key, default=None):
	with get_connection() as conn:
		c = conn.cursor()
		c.execute("SELECT value FROM settings WHERE key = ?", (key,))
		row = c.fetchone()
		return row[0] if row else default


def seed_default_settings(c):
	"""Insert the missing defaults through an open cursor. Returns keys added."""
	added = []
	for key, value in DEFAULT_SETTINGS.items():
		c.execute("INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)", (key, value))
		if c.rowcount:
			added.append(key)
	if added:
		logger.info("default settings added: %s", ", ".join(added))
	return added


def get_setting_bool(key, default=False):
	"""Flags are stored as "1"/"0"; anything else reads as ``default``."""
	raw = str(get_setting(key, "")).strip()
	if raw == "1":
		return True
	if raw == "0":
		return False
	if raw:
		logger.warning("Setting %s=%r is not 0/1; using %s", key, raw, default)
	return default


def set_setting_bool(key, value):
	set_setting(key, "1" if value else "0")


def get_currency_label():
	return str(get_setting("currency_unit", DEFAULT_CURRENCY) or DEFAULT_CURRENCY).strip()


def get_default_hourly_rate():
	raw = get_setting("default_hourly_rate", DEFAULT_HOURLY_RATE)
	try:
		rate = float(raw)
	except (TypeError, ValueError):
		logger.warning("Invalid default_hourly_rate setting %r; using %s", raw, DEFAULT_HOURLY_RATE)
		return DEFAULT_HOURLY_RATE
	return rate if rate > 0 else DEFAULT_HOURLY_RATE
