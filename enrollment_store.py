"""
Enrollment rules: buying a course, lesson progress and the wishlist.

``enroll_in_course`` is the one multi-entity write on the student side: it
creates the enrollment, records the completed payment and drops the course
from the student's wishlist under a single store transaction.
"""

from __future__ import annotations

import logging
from typing import Optional

from course_store import CourseStore
from errors import NotFoundError
from models import Enrollment, Payment, WishlistItem
from store import DomainStore

logger = logging.getLogger(__name__)


def compute_fees(amount: float, rates: dict[str, float]) -> dict[str, float]:
    """Fee breakdown for a payment of ``amount``, each rounded to cents.

    Only the processing and platform fees come off the net amount
    (99.00 -> 86.13 at default rates).
    """
    processing = round(amount * rates.get("processing", 0), 2)
    gateway = round(amount * rates.get("gateway", 0), 2)
    platform = round(amount * rates.get("platform", 0), 2)
    return {
        "processing_fee": processing,
        "gateway_fee": gateway,
        "platform_fee": platform,
        "net_amount": round(amount - processing - platform, 2),
    }


class EnrollmentStore:
    """Enrollment and wishlist operations over a shared DomainStore."""

    def __init__(self, store: DomainStore):
        self.store = store

    # ── Enrollments ────────────────────────────────────────────

    def get(self, enrollment_id: str) -> Optional[Enrollment]:
        return self.store.get_by_id(self.store.enrollments, enrollment_id)

    def by_student(self, student_id: str) -> list[Enrollment]:
        return self.store.get_by_relation(self.store.enrollments, "student_id", student_id)

    def by_course(self, course_id: str) -> list[Enrollment]:
        return self.store.get_by_relation(self.store.enrollments, "course_id", course_id)

    def enroll_in_course(
        self, student_id: str, course_id: str, payment_method: str = "Credit Card"
    ) -> tuple[Enrollment, Payment]:
        """Enroll a student and record the completed payment.

        Raises NotFoundError when the course does not exist. The student id is
        not checked and repeat enrollments in the same course are not refused.
        """
        with self.store.transaction():
            course = self.store.get_by_id(self.store.courses, course_id)
            if course is None:
                raise NotFoundError("Course not found")

            now = self.store.now_iso()
            payment_id = f"pay_{self.store.next_id()}"
            enrollment = Enrollment(
                id=self.store.next_id(),
                student_id=student_id,
                course_id=course_id,
                enrolled_at=now,
                last_accessed_at=now,
                progress=0,
                completed_lessons=[],
                payment_status="paid",
                payment_id=payment_id,
            )
            payment = Payment(
                id=payment_id,
                student_id=student_id,
                course_id=course_id,
                amount=course.price,
                currency=self.store.currency,
                status="completed",
                payment_method=payment_method,
                transaction_id=f"txn_{self.store.next_id()}",
                created_at=now,
                completed_at=now,
                **compute_fees(course.price, self.store.fee_rates),
            )
            self.store.enrollments.append(enrollment)
            self.store.payments.append(payment)
            self._remove_wishlist_entry(student_id, course_id)

        logger.info("Student %s enrolled in course %s (payment %s)", student_id, course_id, payment_id)
        return enrollment, payment

    def complete_lesson(self, enrollment_id: str, lesson_id: str) -> Enrollment:
        """Mark a lesson done and recompute progress against the course's lesson count.

        Raises NotFoundError unless ``lesson_id`` belongs to one of the course's sections.
        """
        with self.store.transaction():
            enrollment = self.get(enrollment_id)
            if enrollment is None:
                raise NotFoundError("Enrollment not found")
            course = self.store.get_by_id(self.store.courses, enrollment.course_id)
            if course is None:
                raise NotFoundError("Course not found")
            if lesson_id not in CourseStore(self.store).lesson_ids(course.id):
                raise NotFoundError("Lesson not found")

            if lesson_id not in enrollment.completed_lessons:
                enrollment.completed_lessons.append(lesson_id)
            if course.total_lessons > 0:
                enrollment.progress = min(
                    100, round(len(enrollment.completed_lessons) / course.total_lessons * 100)
                )
            now = self.store.now_iso()
            enrollment.last_accessed_at = now
            if enrollment.progress == 100 and enrollment.completed_at is None:
                enrollment.completed_at = now
        return enrollment

    # ── Wishlist ───────────────────────────────────────────────

    def wishlist_by_student(self, student_id: str) -> list[WishlistItem]:
        return self.store.get_by_relation(self.store.wishlist, "student_id", student_id)

    def _find_wishlist_entry(self, student_id: str, course_id: str) -> Optional[WishlistItem]:
        for item in self.store.wishlist:
            if item.student_id == student_id and item.course_id == course_id:
                return item
        return None

    def is_in_wishlist(self, student_id: str, course_id: str) -> bool:
        return self._find_wishlist_entry(student_id, course_id) is not None

    def add_to_wishlist(self, student_id: str, course_id: str) -> WishlistItem:
        """Add a course to the wishlist. Adding it twice returns the first entry."""
        with self.store.transaction():
            existing = self._find_wishlist_entry(student_id, course_id)
            if existing is not None:
                return existing
            item = WishlistItem(
                id=self.store.next_id(),
                student_id=student_id,
                course_id=course_id,
                added_at=self.store.now_iso(),
            )
            self.store.wishlist.append(item)
        return item

    def _remove_wishlist_entry(self, student_id: str, course_id: str) -> bool:
        item = self._find_wishlist_entry(student_id, course_id)
        if item is None:
            return False
        self.store.wishlist.remove(item)
        return True

    def remove_from_wishlist(self, student_id: str, course_id: str) -> bool:
        with self.store.transaction():
            return self._remove_wishlist_entry(student_id, course_id)
