"""Tests for PaymentStore: ledger queries, search, filters, status changes and refunds."""

from __future__ import annotations

import pytest

from errors import NotFoundError, ValidationError


@pytest.fixture
def payments(store):
    from payment_store import PaymentStore
    return PaymentStore(store)


class TestPaymentQueries:
    def test_by_student(self, payments):
        assert [p.id for p in payments.by_student("5")] == ["pay_1", "pay_2", "pay_3"]

    def test_by_status(self, payments):
        assert [p.id for p in payments.by_status("refunded")] == ["pay_7"]

    def test_by_method(self, payments):
        assert [p.id for p in payments.by_method("Apple Pay")] == ["pay_9"]

    def test_date_range_inclusive(self, payments):
        ids = [p.id for p in payments.by_date_range("2024-02-01T11:30:00Z", "2024-02-08T12:00:00Z")]
        assert ids == ["pay_5", "pay_6", "pay_9"]

    def test_get_miss(self, payments):
        assert payments.get("pay_999") is None


class TestSearchPayments:
    def test_by_student_name(self, payments):
        assert [p.id for p in payments.search("alice")] == ["pay_4", "pay_8"]

    def test_by_method_case_insensitive(self, payments):
        assert [p.id for p in payments.search("PAYPAL")] == ["pay_2", "pay_5", "pay_7"]

    def test_by_course_title(self, payments):
        assert [p.id for p in payments.search("advanced math")] == ["pay_1", "pay_4"]

    def test_by_transaction_id(self, payments):
        assert [p.id for p in payments.search("txn_9900")] == ["pay_9"]

    def test_results_subset_of_collection_in_order(self, payments, store):
        results = payments.search("a")
        positions = [store.payments.index(p) for p in results]
        assert positions == sorted(positions)

    def test_empty_query_returns_all(self, payments):
        assert len(payments.search("")) == 10


class TestFilterPayments:
    def test_status_and_method(self, payments):
        ids = [p.id for p in payments.filter(status="completed", method="PayPal", sort_by="id", sort_order="asc")]
        assert ids == ["pay_2", "pay_5"]

    def test_sort_amount_desc(self, payments):
        assert payments.filter(sort_by="amount")[0].id == "pay_5"

    def test_default_sort_newest_first(self, payments):
        assert payments.filter()[0].id == "pay_10"

    def test_date_ranges(self, payments):
        assert payments.filter(date_range="today") == []
        assert {p.id for p in payments.filter(date_range="week")} == {"pay_9", "pay_10"}
        assert len(payments.filter(date_range="quarter")) == 10


class TestUpdateStatus:
    def test_overwrite_any_transition(self, payments):
        assert payments.update_status("pay_7", "pending").status == "pending"

    def test_completion_stamped(self, payments):
        payment = payments.update_status("pay_3", "completed")
        assert payment.completed_at == "2024-02-15T12:00:00"

    def test_unknown_status(self, payments):
        with pytest.raises(ValidationError):
            payments.update_status("pay_1", "lost")

    def test_unknown_payment(self, payments):
        with pytest.raises(NotFoundError):
            payments.update_status("pay_999", "completed")


class TestProcessRefund:
    def test_partial_refund(self, payments):
        payment = payments.process_refund("pay_1", 50, "Changed mind")
        assert payment.status == "partially_refunded"
        assert payment.refund_amount == 50
        assert payment.refund_reason == "Changed mind"
        assert payment.refunded_at == "2024-02-15T12:00:00"

    def test_full_refund(self, payments):
        assert payments.process_refund("pay_1", 99, "Duplicate").status == "refunded"

    def test_refund_over_amount_is_full(self, payments):
        assert payments.process_refund("pay_1", 150, "Oops").status == "refunded"

    def test_refund_amount_capped(self, payments):
        assert payments.process_refund("pay_1", 150, "Oops").refund_amount == 99

    @pytest.mark.parametrize("amount", ["nan", "inf", float("nan"), float("-inf")])
    def test_non_finite_amount_rejected(self, payments, amount):
        with pytest.raises(ValidationError):
            payments.process_refund("pay_1", amount, "x")
        payment = payments.get("pay_1")
        assert payment.status == "completed"
        assert payment.refund_amount is None

    @pytest.mark.parametrize("amount", [0, -5, "abc", None])
    def test_bad_amount_rejected(self, payments, amount):
        with pytest.raises(ValidationError):
            payments.process_refund("pay_1", amount, "x")

    @pytest.mark.parametrize("payment_id", ["pay_3", "pay_6", "pay_7", "pay_8"])
    def test_only_completed_refundable(self, payments, payment_id):
        before = payments.get(payment_id).status
        with pytest.raises(ValidationError):
            payments.process_refund(payment_id, 10, "x")
        assert payments.get(payment_id).status == before

    def test_unknown_payment(self, payments):
        with pytest.raises(NotFoundError):
            payments.process_refund("pay_999", 10, "x")

    def test_refund_is_ledger_only(self, payments, store):
        payments.process_refund("pay_1", 99, "x")
        enrollment = store.get_by_id(store.enrollments, "1")
        assert enrollment.payment_status == "paid"
        assert store.get_by_id(store.courses, "1").enrolled_students == 145
