from dataclasses import dataclass
from typing import Any, Dict, Optional

from .records import teacher_ids

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_SUPERADMIN = "superadmin"
ROLES = (ROLE_STUDENT, ROLE_TEACHER, ROLE_SUPERADMIN)


@dataclass(frozen=True)
class Scope:
    """Which records a caller may see.

    A teacher scope restricts every read to the teacher's own records; the
    superadmin scope is unrestricted.
    """

    role: str
    user_id: Optional[str] = None

    @classmethod
    def teacher(cls, user_id: str) -> "Scope":
        return cls(ROLE_TEACHER, user_id)

    @classmethod
    def superadmin(cls, user_id: Optional[str] = None) -> "Scope":
        return cls(ROLE_SUPERADMIN, user_id)

    @property
    def is_restricted(self) -> bool:
        return self.role != ROLE_SUPERADMIN

    @property
    def teacher_filter(self) -> Optional[str]:
        """Teacher id to filter store queries by, or None for everything."""
        return self.user_id if self.is_restricted else None

    def owns(self, record: Dict[str, Any]) -> bool:
        if not self.is_restricted:
            return True
        return record.get("teacher_id") == self.user_id

    def can_see_student(self, student: Dict[str, Any]) -> bool:
        if not self.is_restricted:
            return True
        return self.user_id in teacher_ids(student)
