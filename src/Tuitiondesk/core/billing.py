"""Monthly invoice computation.

Present attendance for a billing period is grouped by class; each class
contributes ``sessions * hourly rate * session duration`` to the total.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .records import (
    STATUS_PRESENT,
    UNKNOWN_SUBJECT,
    index_by_id,
    parse_hhmm,
)

DEFAULT_DURATION_HOURS = 1.0
DEFAULT_HOURLY_RATE = 35.0


def month_bounds(month: int, year: int) -> Tuple[str, str]:
    """Inclusive ``YYYY-MM-DD`` range for a billing period.

    The upper bound is always day 31, whatever the month length; dates are
    compared as strings, so every real date of the month falls inside.
    """
    prefix = f"{int(year)}-{int(month):02d}"
    return f"{prefix}-01", f"{prefix}-31"


def session_duration_hours(class_def: Optional[Dict[str, Any]]) -> float:
    if not class_def:
        return DEFAULT_DURATION_HOURS
    start = parse_hhmm(class_def.get("start_time"))
    end = parse_hhmm(class_def.get("end_time"))
    if start is None or end is None or end <= start:
        return DEFAULT_DURATION_HOURS
    return (end - start) / 60


@dataclass
class LineItem:
    class_id: Optional[str]
    class_name: str
    session_count: int
    duration_hours: float
    rate: float
    subtotal: float
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    teacher_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None or k == "class_id"}


@dataclass
class InvoiceComputation:
    line_items: List[LineItem] = field(default_factory=list)
    grand_total: float = 0.0
    student_ids: List[str] = field(default_factory=list)
    contributing_student_ids: List[str] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return bool(self.line_items)

    def breakdown(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.line_items]


def present_marks_in_period(student_id, month, year, marks) -> List[Dict[str, Any]]:
    date_from, date_to = month_bounds(month, year)
    return [
        m for m in marks
        if m.get("student_id") == student_id
        and m.get("status") == STATUS_PRESENT
        and isinstance(m.get("date"), str)
        and date_from <= m["date"] <= date_to
    ]


def _group_by_class(marks) -> Dict[Optional[str], int]:
    # dicts keep insertion order, so line items follow first appearance
    counts: Dict[Optional[str], int] = {}
    for m in marks:
        key = m.get("class_id")
        counts[key] = counts.get(key, 0) + 1
    return counts


def _line_items(counts, classes_by_id, rate) -> List[LineItem]:
    items = []
    for class_id, sessions in counts.items():
        class_def = classes_by_id.get(class_id) if class_id is not None else None
        duration = session_duration_hours(class_def)
        items.append(LineItem(
            class_id=class_id,
            class_name=(class_def or {}).get("name") or UNKNOWN_SUBJECT,
            session_count=sessions,
            duration_hours=duration,
            rate=rate,
            subtotal=sessions * rate * duration,
        ))
    return items


def compute_invoice(student_id, month, year, marks: Iterable[Dict[str, Any]],
                    class_defs: Iterable[Dict[str, Any]], hourly_rate) -> InvoiceComputation:
    """Bill one student for one month.

    An empty result (no present sessions) is the "no data" case, not an error.
    """
    rate = float(hourly_rate)
    present = present_marks_in_period(student_id, month, year, list(marks))
    items = _line_items(_group_by_class(present), index_by_id(class_defs), rate)
    total = sum(i.subtotal for i in items)
    contributing = [student_id] if items else []
    return InvoiceComputation(items, total, [student_id], contributing)


def compute_consolidated_invoice(student_ids, month, year, marks, class_defs, students,
                                 default_rate=DEFAULT_HOURLY_RATE,
                                 teachers=None) -> InvoiceComputation:
    """One invoice covering several students' sessions.

    Each student is billed at their own rate. Ids that do not resolve to a
    student are skipped. Line items are tagged with the student and the
    owning teacher so the merged breakdown stays readable.
    """
    marks = list(marks)
    classes_by_id = index_by_id(class_defs)
    students_by_id = index_by_id(students)
    teachers_by_id = index_by_id(teachers or [])

    result = InvoiceComputation(student_ids=list(student_ids))
    for student_id in student_ids:
        student = students_by_id.get(student_id)
        if student is None:
            continue
        rate = float(student.get("hourly_rate") or default_rate)
        present = present_marks_in_period(student_id, month, year, marks)
        items = _line_items(_group_by_class(present), classes_by_id, rate)
        for item in items:
            class_def = classes_by_id.get(item.class_id) or {}
            teacher = teachers_by_id.get(class_def.get("teacher_id")) or {}
            item.student_id = student_id
            item.student_name = student.get("name")
            item.teacher_name = teacher.get("display_name") or teacher.get("email") or "Unknown"
        if items:
            result.contributing_student_ids.append(student_id)
        result.line_items.extend(items)

    result.grand_total = sum(i.subtotal for i in result.line_items)
    return result
