"""CSV export of admin lists using the stdlib csv writer (fields are quoted as needed)."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date

from models import Course, Payment, User
from store import DomainStore, parse_timestamp

USER_COLUMNS = ["Name", "Email", "Role", "Status", "Joined", "Subjects"]
PAYMENT_COLUMNS = [
    "Payment ID", "Student", "Course", "Amount", "Status",
    "Payment Method", "Date", "Transaction ID",
]
COURSE_COLUMNS = [
    "Title", "Teacher", "Subject", "Level", "Price",
    "Students", "Rating", "Status", "Created",
]


def _write(header: list[str], rows: Iterable[list]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(header)
    writer.writerows(rows)
    return output.getvalue()


def _day(value: str) -> str:
    return parse_timestamp(value).date().isoformat() if value else ""


def users_csv(users: Iterable[User]) -> str:
    return _write(USER_COLUMNS, (
        [u.full_name, u.email, u.role, u.status, _day(u.join_date), "; ".join(u.subjects)]
        for u in users
    ))


def payments_csv(store: DomainStore, payments: Iterable[Payment]) -> str:
    """Payment rows with the student's name and course title resolved ("Unknown" if gone)."""
    rows = []
    for p in payments:
        student = store.get_by_id(store.users, p.student_id)
        course = store.get_by_id(store.courses, p.course_id)
        rows.append([
            p.id,
            student.full_name if student else "Unknown",
            course.title if course else "Unknown",
            f"{p.amount:.2f}",
            p.status,
            p.payment_method,
            _day(p.created_at),
            p.transaction_id,
        ])
    return _write(PAYMENT_COLUMNS, rows)


def courses_csv(courses: Iterable[Course]) -> str:
    return _write(COURSE_COLUMNS, (
        [c.title, c.teacher, c.subject, c.level, f"{c.price:.2f}",
         c.enrolled_students, c.rating, c.status, _day(c.created_at)]
        for c in courses
    ))


def export_filename(kind: str, today: date, extension: str = "csv") -> str:
    return f"{kind}-{today.isoformat()}.{extension}"
