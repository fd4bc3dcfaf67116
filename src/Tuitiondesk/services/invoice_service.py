import logging
from dataclasses import dataclass
from typing import Tuple

from Tuitiondesk.core.billing import (
    compute_consolidated_invoice,
    compute_invoice,
    month_bounds,
)
from Tuitiondesk.core.errors import ScopeError, ValidationError
from Tuitiondesk.core.results import NO_DATA, NOT_FOUND, Outcome
from Tuitiondesk.core.validation import validate_period
from Tuitiondesk.data.db import now_str
from Tuitiondesk.data.repos.attendance_repo import fetch_present_attendance
from Tuitiondesk.data.repos.classes_repo import fetch_classes
from Tuitiondesk.data.repos.invoices_repo import (
    delete_invoice as _delete_invoice,
    fetch_invoices,
    save_invoice,
)
from Tuitiondesk.data.repos.settings_repo import get_default_hourly_rate
from Tuitiondesk.data.repos.students_repo import fetch_students, get_student_by_id
from Tuitiondesk.data.repos.users_repo import fetch_users
from Tuitiondesk.services.common import reported

logger = logging.getLogger(__name__)

CONSOLIDATED_STUDENT_ID = "CONSOLIDATED"
CONSOLIDATED_ISSUER = "superadmin"

STATUS_PENDING = "pending"
STATUS_GENERATED = "generated"


@dataclass(frozen=True)
class InvoiceKey:
    """Identity of an invoice; there is never more than one per key."""

    student_id: str
    teacher_id: str
    month: int
    year: int
    student_ids: Tuple[str, ...] = ()

    @classmethod
    def consolidated(cls, student_ids, month, year) -> "InvoiceKey":
        return cls(CONSOLIDATED_STUDENT_ID, CONSOLIDATED_ISSUER, int(month), int(year),
                   tuple(sorted(set(student_ids))))

    @property
    def is_consolidated(self) -> bool:
        return self.student_id == CONSOLIDATED_STUDENT_ID


def upsert_invoice(key: InvoiceKey, breakdown, grand_total, description=None) -> str:
    """Create the invoice for ``key`` or overwrite the one already stored.

    Repeated generation keeps the same invoice id; the amount always reflects
    the latest computation.
    """
    status = STATUS_GENERATED if key.is_consolidated else STATUS_PENDING
    details = {"breakdown": breakdown, "grand_total": grand_total}
    if key.is_consolidated:
        details["student_ids"] = list(key.student_ids)
    generated_at = now_str()

    invoice_id, created = save_invoice(
        key.student_id, key.teacher_id, key.month, key.year, grand_total, status,
        generated_at, details, description, key.student_ids,
    )
    logger.info("invoice %s %s for %s %02d/%d (%.2f)", invoice_id, "created" if created else "regenerated",
                key.student_id, key.month, key.year, grand_total)
    return invoice_id


@reported("Failed to generate invoice")
def generate_invoice(scope, student_id, month, year, teacher_id=None):
    """Bill one student for one month on behalf of a teacher.

    A teacher scope bills its own sessions; a superadmin must name the teacher.
    """
    month, year = validate_period(month, year)
    teacher_id = scope.user_id if scope.is_restricted else teacher_id
    if not teacher_id:
        raise ValidationError("Please select a teacher.")

    student = get_student_by_id(student_id)
    if student is None:
        return Outcome.failure(NOT_FOUND, "Student not found.")
    if not scope.can_see_student(student):
        raise ScopeError("You can only bill your own students.")

    date_from, date_to = month_bounds(month, year)
    marks = fetch_present_attendance([student_id], date_from, date_to, teacher_id=teacher_id)
    rate = student.get("hourly_rate") or get_default_hourly_rate()
    computation = compute_invoice(student_id, month, year, marks, fetch_classes(), rate)

    if not computation.has_data:
        return Outcome.failure(
            NO_DATA, f"No attendance records found for {student['name']} in {month}/{year}",
            {"computation": computation},
        )

    key = InvoiceKey(student_id, teacher_id, month, year)
    invoice_id = upsert_invoice(key, computation.breakdown(), computation.grand_total)
    return Outcome.success(
        f"Invoice generated for {student['name']}!",
        {"invoice_id": invoice_id, "computation": computation},
    )


@reported("Failed to generate consolidated invoice")
def generate_consolidated_invoice(student_ids, month, year):
    """One admin invoice covering several students for one month."""
    month, year = validate_period(month, year)
    student_ids = list(dict.fromkeys(student_ids or []))
    if not student_ids:
        raise ValidationError("Please select at least one student.")

    students = fetch_students()
    date_from, date_to = month_bounds(month, year)
    marks = fetch_present_attendance(student_ids, date_from, date_to)
    computation = compute_consolidated_invoice(
        student_ids, month, year, marks, fetch_classes(), students,
        default_rate=get_default_hourly_rate(), teachers=fetch_users(),
    )

    if not computation.has_data:
        return Outcome.failure(
            NO_DATA, "No attendance records found for selected students in this period.",
            {"computation": computation},
        )

    names = sorted(set(
        item.student_name for item in computation.line_items if item.student_name
    ))
    key = InvoiceKey.consolidated(student_ids, month, year)
    invoice_id = upsert_invoice(
        key, computation.breakdown(), computation.grand_total,
        description=f"Consolidated Invoice for: {', '.join(names)}",
    )
    return Outcome.success(
        "Consolidated invoice generated successfully!",
        {"invoice_id": invoice_id, "computation": computation},
    )


def list_invoices(scope, month=None, year=None):
    return fetch_invoices(teacher_id=scope.teacher_filter, month=month, year=year)


@reported("Failed to delete invoice")
def delete_invoice(invoice_id):
    if not _delete_invoice(invoice_id):
        return Outcome.failure(NOT_FOUND, "Invoice not found.")
    return Outcome.success("Invoice deleted successfully!")
