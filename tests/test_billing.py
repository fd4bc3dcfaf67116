import pytest

from Tuitiondesk.core.billing import (
    compute_consolidated_invoice,
    compute_invoice,
    month_bounds,
    session_duration_hours,
)

MATHS = {"id": "c1", "name": "Maths", "teacher_id": "t1", "start_time": "14:00", "end_time": "15:30"}


def _present(student_id, class_id, day, status="present"):
    return {"student_id": student_id, "class_id": class_id, "date": day, "status": status}


def test_month_bounds_use_day_31():
    assert month_bounds(2, 2024) == ("2024-02-01", "2024-02-31")
    assert month_bounds(11, 2024) == ("2024-11-01", "2024-11-31")


@pytest.mark.parametrize("start, end, hours", [
    ("14:00", "15:30", 1.5),
    ("09:00", "09:45", 0.75),
    ("15:00", "14:00", 1.0),
    ("15:00", "15:00", 1.0),
    ("bad", "15:00", 1.0),
])
def test_session_duration(start, end, hours):
    assert session_duration_hours({"start_time": start, "end_time": end}) == hours


def test_missing_class_bills_one_hour():
    assert session_duration_hours(None) == 1.0


def test_four_sessions_of_ninety_minutes():
    marks = [_present("s1", "c1", f"2024-03-{d:02d}") for d in (1, 8, 15, 22)]
    marks.append(_present("s1", "c1", "2024-03-29", status="absent"))
    marks.append(_present("s1", "c1", "2024-04-05"))
    marks.append(_present("s2", "c1", "2024-03-01"))

    result = compute_invoice("s1", 3, 2024, marks, [MATHS], 40)

    assert result.grand_total == 240.0
    assert len(result.line_items) == 1
    item = result.line_items[0]
    assert (item.class_name, item.session_count, item.duration_hours, item.subtotal) == ("Maths", 4, 1.5, 240.0)


def test_empty_period_is_no_data():
    result = compute_invoice("s1", 3, 2024, [_present("s1", "c1", "2024-02-28")], [MATHS], 40)
    assert not result.has_data
    assert result.grand_total == 0
    assert result.breakdown() == []


def test_unknown_subject_and_legacy_marks():
    marks = [_present("s1", "deleted", "2024-03-04"), _present("s1", None, "2024-03-05")]
    result = compute_invoice("s1", 3, 2024, marks, [MATHS], 35)
    assert [i.class_name for i in result.line_items] == ["Unknown Subject", "Unknown Subject"]
    assert [i.duration_hours for i in result.line_items] == [1.0, 1.0]
    assert result.grand_total == 70.0


def test_amounts_keep_full_precision():
    short = {"id": "c2", "name": "Reading", "start_time": "10:00", "end_time": "10:20"}
    result = compute_invoice("s1", 3, 2024, [_present("s1", "c2", "2024-03-04")], [short], 35)
    assert result.grand_total == pytest.approx(35 / 3)
    assert result.grand_total != 11.67


def test_one_more_session_adds_rate_times_duration():
    # 50 minutes does not divide evenly into hours
    physics = {"id": "c3", "name": "Physics", "start_time": "14:00", "end_time": "14:50"}
    marks = [_present("s1", "c3", f"2024-03-{d:02d}") for d in (4, 11, 18, 25)]

    three = compute_invoice("s1", 3, 2024, marks[:3], [physics], 35).grand_total
    four = compute_invoice("s1", 3, 2024, marks, [physics], 35).grand_total

    assert four - three == pytest.approx(35 * 50 / 60)
    assert four == pytest.approx(4 * 35 * 50 / 60)


def test_consolidated_uses_each_students_rate():
    students = [
        {"id": "s1", "name": "Ana", "hourly_rate": 40},
        {"id": "s2", "name": "Ben", "hourly_rate": None},
    ]
    marks = [
        _present("s1", "c1", "2024-03-01"),
        _present("s2", "c1", "2024-03-01"),
        _present("s2", "c1", "2024-03-08"),
    ]
    teachers = [{"id": "t1", "email": "alice@example.com", "display_name": "Alice"}]

    result = compute_consolidated_invoice(
        ["s1", "s2", "missing"], 3, 2024, marks, [MATHS], students, default_rate=35, teachers=teachers,
    )

    assert result.grand_total == 60.0 + 105.0
    assert result.contributing_student_ids == ["s1", "s2"]
    assert [(i.student_name, i.teacher_name, i.rate) for i in result.line_items] == [
        ("Ana", "Alice", 40.0),
        ("Ben", "Alice", 35.0),
    ]
    assert result.breakdown()[0]["student_id"] == "s1"
