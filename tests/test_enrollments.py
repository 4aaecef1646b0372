"""Tests for enrollment rules, lesson progress and the wishlist."""

from __future__ import annotations

import pytest

from errors import NotFoundError


@pytest.fixture
def enrollments(store):
    from enrollment_store import EnrollmentStore
    return EnrollmentStore(store)


class TestComputeFees:
    def test_default_rates_match_seeded_ledger(self):
        from enrollment_store import compute_fees
        fees = compute_fees(99, {"processing": 0.03, "gateway": 0.03, "platform": 0.10})
        assert fees == {
            "processing_fee": 2.97,
            "gateway_fee": 2.97,
            "platform_fee": 9.9,
            "net_amount": 86.13,
        }

    def test_free_course(self):
        from enrollment_store import compute_fees
        fees = compute_fees(0, {"processing": 0.03, "gateway": 0.03, "platform": 0.10})
        assert fees["net_amount"] == 0


class TestEnrollInCourse:
    def test_creates_enrollment_and_payment(self, enrollments, store):
        before_enrollments = len(store.enrollments)
        before_payments = len(store.payments)

        enrollment, payment = enrollments.enroll_in_course("7", "1")

        assert len(store.enrollments) == before_enrollments + 1
        assert len(store.payments) == before_payments + 1
        assert enrollment.payment_status == "paid"
        assert enrollment.progress == 0
        assert enrollment.completed_lessons == []
        assert enrollment.payment_id == payment.id
        assert payment.status == "completed"
        assert payment.amount == 99
        assert payment.currency == "USD"
        assert payment.payment_method == "Credit Card"
        assert payment.id.startswith("pay_")
        assert payment.transaction_id.startswith("txn_")
        assert payment.created_at == payment.completed_at == "2024-02-15T12:00:00"
        assert payment.net_amount == 86.13

    def test_ids_from_generator_not_clock(self, enrollments):
        first, first_payment = enrollments.enroll_in_course("7", "1")
        second, second_payment = enrollments.enroll_in_course("7", "2")
        assert first.id != second.id
        assert first_payment.id != second_payment.id

    def test_unknown_course(self, enrollments, store):
        before = len(store.payments)
        with pytest.raises(NotFoundError):
            enrollments.enroll_in_course("7", "999")
        assert len(store.payments) == before

    def test_unknown_student_is_not_checked(self, enrollments):
        enrollment, _ = enrollments.enroll_in_course("ghost", "1")
        assert enrollment.student_id == "ghost"

    def test_removes_wishlist_entry(self, enrollments):
        enrollments.add_to_wishlist("7", "4")
        enrollments.enroll_in_course("7", "4")
        assert enrollments.is_in_wishlist("7", "4") is False

    def test_custom_payment_method(self, enrollments):
        _, payment = enrollments.enroll_in_course("7", "8", payment_method="PayPal")
        assert payment.payment_method == "PayPal"

    def test_duplicate_enrollment_not_guarded(self, enrollments):
        enrollments.enroll_in_course("7", "1")
        enrollments.enroll_in_course("7", "1")
        assert len([e for e in enrollments.by_student("7") if e.course_id == "1"]) == 2

    def test_enrolled_students_counter_untouched(self, enrollments, store):
        enrollments.enroll_in_course("7", "1")
        assert store.get_by_id(store.courses, "1").enrolled_students == 145

    def test_course_then_shows_as_enrolled(self, enrollments, store):
        from course_store import CourseStore
        enrollments.enroll_in_course("7", "1")
        courses = CourseStore(store)
        assert courses.is_enrolled("7", "1")
        assert "1" not in {c.id for c in courses.available_for("7")}


class TestCompleteLesson:
    def test_progress_recomputed(self, enrollments):
        enrollment, _ = enrollments.enroll_in_course("7", "1")  # 24 lessons
        enrollments.complete_lesson(enrollment.id, "1")
        updated = enrollments.complete_lesson(enrollment.id, "2")
        assert updated.completed_lessons == ["1", "2"]
        assert updated.progress == 8
        assert updated.completed_at is None

    def test_same_lesson_counted_once(self, enrollments):
        enrollment, _ = enrollments.enroll_in_course("7", "1")
        enrollments.complete_lesson(enrollment.id, "1")
        updated = enrollments.complete_lesson(enrollment.id, "1")
        assert updated.completed_lessons == ["1"]

    def test_reaching_100_stamps_completed_at(self, enrollments, store):
        store.get_by_id(store.courses, "1").total_lessons = 2
        enrollment, _ = enrollments.enroll_in_course("7", "1")
        enrollments.complete_lesson(enrollment.id, "1")
        updated = enrollments.complete_lesson(enrollment.id, "2")
        assert updated.progress == 100
        assert updated.completed_at == "2024-02-15T12:00:00"

    def test_unknown_lesson_rejected(self, enrollments, store):
        store.get_by_id(store.courses, "1").total_lessons = 2
        enrollment, _ = enrollments.enroll_in_course("7", "1")
        for lesson_id in ("no-such-lesson-a", "no-such-lesson-b"):
            with pytest.raises(NotFoundError):
                enrollments.complete_lesson(enrollment.id, lesson_id)
        assert enrollment.completed_lessons == []
        assert enrollment.progress == 0
        assert enrollment.completed_at is None

    def test_lesson_from_another_course_rejected(self, enrollments):
        enrollment, _ = enrollments.enroll_in_course("7", "2")
        with pytest.raises(NotFoundError):
            enrollments.complete_lesson(enrollment.id, "1")

    def test_unknown_enrollment(self, enrollments):
        with pytest.raises(NotFoundError):
            enrollments.complete_lesson("999", "1")


class TestWishlist:
    def test_add_and_list(self, enrollments):
        item = enrollments.add_to_wishlist("7", "4")
        assert enrollments.is_in_wishlist("7", "4")
        assert enrollments.wishlist_by_student("7") == [item]

    def test_add_twice_returns_existing(self, enrollments, store):
        first = enrollments.add_to_wishlist("7", "4")
        second = enrollments.add_to_wishlist("7", "4")
        assert first is second
        assert len(store.wishlist) == 1

    def test_remove(self, enrollments):
        enrollments.add_to_wishlist("7", "4")
        assert enrollments.remove_from_wishlist("7", "4") is True
        assert enrollments.remove_from_wishlist("7", "4") is False
