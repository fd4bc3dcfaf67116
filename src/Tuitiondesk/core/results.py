from dataclasses import dataclass
from typing import Any, Optional

OK = "ok"
VALIDATION = "validation"
SCOPE = "scope"
NOT_FOUND = "not_found"
DUPLICATE = "duplicate"
NO_DATA = "no_data"
STORE = "store"


@dataclass
class Outcome:
    """What a service call reports back to the screen that triggered it."""

    ok: bool
    message: str
    reason: str = OK
    data: Optional[Any] = None

    @classmethod
    def success(cls, message: str, data: Any = None) -> "Outcome":
        return cls(True, message, OK, data)

    @classmethod
    def failure(cls, reason: str, message: str, data: Any = None) -> "Outcome":
        return cls(False, message, reason, data)

    def __bool__(self) -> bool:
        return self.ok
