"""Payment ledger: lookups, admin search and filtering, status changes and refunds."""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import Optional

from errors import NotFoundError, ValidationError, require_choice
from models import PAYMENT_STATUSES, Payment
from store import DomainStore, parse_timestamp

logger = logging.getLogger(__name__)

PAYMENT_SORT_FIELDS = ("id", "amount", "created_at")

# date_range filter value -> lookback window
DATE_RANGES = {
    "today": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "quarter": timedelta(days=90),
}


class PaymentStore:
    """Payment collection operations over a shared DomainStore."""

    def __init__(self, store: DomainStore):
        self.store = store

    # ── Queries ────────────────────────────────────────────────

    def all(self) -> list[Payment]:
        return list(self.store.payments)

    def get(self, payment_id: str) -> Optional[Payment]:
        return self.store.get_by_id(self.store.payments, payment_id)

    def by_student(self, student_id: str) -> list[Payment]:
        return self.store.get_by_relation(self.store.payments, "student_id", student_id)

    def by_status(self, status: str) -> list[Payment]:
        return self.store.get_by_relation(self.store.payments, "status", status)

    def by_method(self, method: str) -> list[Payment]:
        return self.store.get_by_relation(self.store.payments, "payment_method", method)

    def by_date_range(self, start: str, end: str) -> list[Payment]:
        """Payments created between ``start`` and ``end``, both ends inclusive."""
        lo, hi = parse_timestamp(start), parse_timestamp(end)
        return [p for p in self.store.payments if lo <= parse_timestamp(p.created_at) <= hi]

    def _matches(self, payment: Payment, needle: str) -> bool:
        fields = [payment.id, payment.transaction_id, payment.payment_method, payment.status]
        student = self.store.get_by_id(self.store.users, payment.student_id)
        if student is not None:
            fields += [student.full_name, student.email]
        course = self.store.get_by_id(self.store.courses, payment.course_id)
        if course is not None:
            fields.append(course.title)
        return any(needle in value.lower() for value in fields)

    def search(self, query: str) -> list[Payment]:
        """Case-insensitive substring search over ids, method, status, student and course.

        Results keep collection order.
        """
        needle = query.strip().lower()
        if not needle:
            return self.all()
        return [p for p in self.store.payments if self._matches(p, needle)]

    def filter(
        self,
        query: str = "",
        status: str = "all",
        method: str = "all",
        date_range: str = "all",
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> list[Payment]:
        """Admin payment list."""
        payments = self.search(query)
        if status != "all":
            payments = [p for p in payments if p.status == status]
        if method != "all":
            payments = [p for p in payments if p.payment_method == method]
        if date_range in DATE_RANGES:
            cutoff = self.store.now() - DATE_RANGES[date_range]
            payments = [p for p in payments if parse_timestamp(p.created_at) >= cutoff]

        if sort_by == "amount":
            key = lambda p: p.amount  # noqa: E731
        elif sort_by == "id":
            key = lambda p: p.id  # noqa: E731
        else:
            key = lambda p: parse_timestamp(p.created_at)  # noqa: E731
        payments.sort(key=key, reverse=(sort_order == "desc"))
        return payments

    # ── Mutations ──────────────────────────────────────────────

    def update_status(self, payment_id: str, status: str) -> Payment:
        """Overwrite the payment status. Any transition between known statuses is accepted."""
        require_choice(status, PAYMENT_STATUSES, "payment status")
        with self.store.transaction():
            payment = self.get(payment_id)
            if payment is None:
                raise NotFoundError("Payment not found")
            payment.status = status
            if status == "completed" and payment.completed_at is None:
                payment.completed_at = self.store.now_iso()
        logger.info("Payment %s status set to %s", payment_id, status)
        return payment

    def process_refund(self, payment_id: str, amount: float, reason: str) -> Payment:
        """Refund a completed payment, fully or in part.

        Only the payment record changes; the matching enrollment and the
        course's enrolled_students count are left alone.
        """
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            raise ValidationError("Refund amount must be a number")
        if not math.isfinite(amount):
            raise ValidationError("Refund amount must be a number")
        if amount <= 0:
            raise ValidationError("Refund amount must be positive")

        with self.store.transaction():
            payment = self.get(payment_id)
            if payment is None:
                raise NotFoundError("Payment not found")
            if payment.status != "completed":
                raise ValidationError("Payment cannot be refunded")
            payment.status = "partially_refunded" if amount < payment.amount else "refunded"
            payment.refund_amount = min(amount, payment.amount)
            payment.refund_reason = reason
            payment.refunded_at = self.store.now_iso()
        logger.info("Refunded %.2f on payment %s (%s)", amount, payment_id, payment.status)
        return payment
