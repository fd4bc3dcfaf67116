import re
from typing import Union

_AMOUNT_RE = re.compile(r"\d+(?:\.\d+)?")

# -------------------- Currency helpers --------------------

def format_currency(amount: Union[int, float], label: str = "RM") -> str:
    """Format an amount for invoices and exports, e.g. ``RM 240.00``.

    Rounding to cents happens here and nowhere else.
    """
    try:
        return f"{label} {float(amount):,.2f}"
    except (TypeError, ValueError):
        return str(amount)


def format_hours(hours: Union[int, float]) -> str:
    try:
        return f"{float(hours):.1f}h"
    except (TypeError, ValueError):
        return str(hours)


def parse_user_amount(text: str) -> float:
    """Parse a user-entered amount such as ``"1,250.50"`` or ``"RM 40"``."""
    if text is None:
        return 0.0
    s = str(text).replace(",", "").strip()
    if not s:
        return 0.0
    try:
        return float(s)
    except ValueError:
        match = _AMOUNT_RE.search(s)
        return float(match.group(0)) if match else 0.0
