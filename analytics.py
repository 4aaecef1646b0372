"""Platform Analytics: dashboard aggregates for admins and teachers.

Every figure is recomputed from the store's collections on each call; there
is no cached state. "This month" means the calendar month of the store's
clock at call time, while revenue analytics uses a rolling window of days.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import timedelta
from typing import Optional

from models import REVENUE_STATUSES, USER_ROLES
from store import DomainStore, in_same_month, parse_timestamp


class PlatformAnalytics:
    """Aggregate statistics over a DomainStore."""

    def __init__(self, store: DomainStore):
        self.store = store

    def user_stats(self) -> dict:
        users = self.store.users
        now = self.store.now()
        return {
            "total_users": len(users),
            "active_users": sum(1 for u in users if u.status == "active"),
            "pending_users": sum(1 for u in users if u.status == "pending"),
            "suspended_users": sum(1 for u in users if u.status == "suspended"),
            "users_by_role": {role: sum(1 for u in users if u.role == role) for role in USER_ROLES},
            "new_users_this_month": sum(1 for u in users if in_same_month(u.join_date, now)),
        }

    def payment_stats(self) -> dict:
        """Ledger totals for the admin payments page.

        Revenue counts completed and partially refunded payments at their full
        amount; refunds are subtracted separately to give net revenue.
        """
        payments = self.store.payments
        now = self.store.now()
        earning = [p for p in payments if p.status in REVENUE_STATUSES]

        total_revenue = sum(p.amount for p in earning)
        total_refunded = sum(p.refund_amount or 0 for p in payments)
        total_fees = sum(p.total_fees for p in earning)

        this_month = [p for p in payments if in_same_month(p.created_at, now)]
        monthly_revenue = sum(p.amount for p in this_month if p.status in REVENUE_STATUSES)
        monthly_refunded = sum(p.refund_amount or 0 for p in this_month)

        method_stats: dict[str, dict] = {}
        for p in payments:
            entry = method_stats.setdefault(p.payment_method, {"count": 0, "amount": 0})
            entry["count"] += 1
            if p.status in REVENUE_STATUSES:
                entry["amount"] += p.amount

        return {
            "total_payments": len(payments),
            "completed_payments": sum(1 for p in payments if p.status == "completed"),
            "pending_payments": sum(1 for p in payments if p.status == "pending"),
            "failed_payments": sum(1 for p in payments if p.status == "failed"),
            "refunded_payments": sum(
                1 for p in payments if p.status in ("refunded", "partially_refunded")
            ),
            "total_revenue": round(total_revenue, 2),
            "total_refunded": round(total_refunded, 2),
            "net_revenue": round(total_revenue - total_refunded, 2),
            "total_fees": round(total_fees, 2),
            "monthly_revenue": round(monthly_revenue, 2),
            "monthly_refunded": round(monthly_refunded, 2),
            "payment_method_stats": method_stats,
            "this_month_payments": len(this_month),
        }

    def revenue_analytics(self, days: int = 30) -> dict[str, dict]:
        """Per-day revenue, transaction count and refunds over the last ``days`` days."""
        end = self.store.now()
        start = end - timedelta(days=days)
        daily: dict[str, dict] = defaultdict(lambda: {"revenue": 0, "transactions": 0, "refunds": 0})
        for p in self.store.payments:
            if p.status not in REVENUE_STATUSES:
                continue
            created = parse_timestamp(p.created_at)
            if not start <= created <= end:
                continue
            bucket = daily[created.date().isoformat()]
            bucket["revenue"] += p.amount
            bucket["transactions"] += 1
            if p.refund_amount:
                bucket["refunds"] += p.refund_amount
        return dict(sorted(daily.items()))

    def course_analytics(self, course_id: str) -> Optional[dict]:
        course = self.store.get_by_id(self.store.courses, course_id)
        if course is None:
            return None
        now = self.store.now()
        paid = [
            e for e in self.store.enrollments
            if e.course_id == course_id and e.payment_status == "paid"
        ]
        new_this_month = [e for e in paid if in_same_month(e.enrolled_at, now)]
        return {
            "completed_students": sum(1 for e in paid if e.progress == 100),
            "new_enrollments": len(new_this_month),
            "monthly_revenue": course.price * len(new_this_month),
            "average_progress": round(sum(e.progress for e in paid) / len(paid)) if paid else 0,
        }

    def teacher_analytics(self, teacher_id: str) -> dict:
        """Dashboard figures across every course the teacher owns.

        Totals use the denormalized ``enrolled_students`` counter; the monthly
        figures count enrollment records of any payment status.
        """
        courses = self.store.get_by_relation(self.store.courses, "teacher_id", teacher_id)
        prices = {c.id: c.price for c in courses}
        now = self.store.now()
        this_month = [
            e for e in self.store.enrollments
            if e.course_id in prices and in_same_month(e.enrolled_at, now)
        ]
        return {
            "total_courses": len(courses),
            "total_students": sum(c.enrolled_students for c in courses),
            "total_revenue": sum(c.price * c.enrolled_students for c in courses),
            "new_students_this_month": len(this_month),
            "monthly_revenue": sum(prices[e.course_id] for e in this_month),
            "average_rating": (
                sum(c.rating for c in courses) / len(courses) if courses else 0
            ),
        }
