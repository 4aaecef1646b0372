"""Admin dashboard routes: users, payments, course catalogue and platform settings."""

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from analytics import PlatformAnalytics
from audit import log_event
from course_store import CourseStore
from export import export_filename
from extensions import get_settings, get_store
from helpers import current_user_id, json_body, paginate_args, paginated_response, role_required, serialize
from models import to_dict
from payment_store import PaymentStore
from user_store import UserStore

bp = Blueprint("admin", __name__, url_prefix="/api/admin")


def user_filters() -> dict:
    """List filters shared by the users page and the users CSV export."""
    return {
        "query": request.args.get("q", ""),
        "role": request.args.get("role", "all"),
        "status": request.args.get("status", "all"),
        "sort_by": request.args.get("sort_by", "join_date"),
        "sort_order": request.args.get("sort_order", "desc"),
    }


def payment_filters() -> dict:
    return {
        "query": request.args.get("q", ""),
        "status": request.args.get("status", "all"),
        "method": request.args.get("method", "all"),
        "date_range": request.args.get("date_range", "all"),
        "sort_by": request.args.get("sort_by", "created_at"),
        "sort_order": request.args.get("sort_order", "desc"),
    }


def course_filters() -> dict:
    return {
        "query": request.args.get("q", ""),
        "status": request.args.get("status", "all"),
        "subject": request.args.get("subject", "all"),
    }


# ── Users ──────────────────────────────────────────────────

@bp.route("/users")
@role_required("admin")
def list_users():
    users = UserStore(get_store()).filter(**user_filters())
    page, limit = paginate_args()
    return jsonify(paginated_response(users, page, limit))


@bp.route("/users", methods=["POST"])
@role_required("admin")
def create_user():
    data = json_body()
    store = get_store()
    user = UserStore(store).create(
        email=data.get("email", ""),
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        role=data.get("role", "student"),
        status=data.get("status", "active"),
        bio=data.get("bio"),
        subjects=data.get("subjects"),
        avatar=data.get("avatar"),
    )
    log_event(store, "user_created", current_user_id(), f"user_id={user.id}")
    return jsonify(to_dict(user)), 201


@bp.route("/users/stats")
@role_required("admin")
def user_stats():
    return jsonify(PlatformAnalytics(get_store()).user_stats())


@bp.route("/users/<user_id>")
@role_required("admin")
def get_user(user_id):
    user = UserStore(get_store()).get(user_id)
    if user is None:
        return jsonify({"error": "User not found", "kind": "not_found"}), 404
    return jsonify(to_dict(user))


@bp.route("/users/<user_id>", methods=["PATCH"])
@role_required("admin")
def update_user(user_id):
    store = get_store()
    user = UserStore(store).update(user_id, json_body())
    log_event(store, "user_updated", current_user_id(), f"user_id={user_id}")
    return jsonify(to_dict(user))


@bp.route("/users/<user_id>", methods=["DELETE"])
@role_required("admin")
def delete_user(user_id):
    store = get_store()
    if not UserStore(store).delete(user_id):
        return jsonify({"error": "User not found", "kind": "not_found"}), 404
    log_event(store, "user_deleted", current_user_id(), f"user_id={user_id}")
    return jsonify({"success": True})


# ── Payments ───────────────────────────────────────────────

@bp.route("/payments")
@role_required("admin")
def list_payments():
    payments = PaymentStore(get_store()).filter(**payment_filters())
    page, limit = paginate_args()
    return jsonify(paginated_response(payments, page, limit))


@bp.route("/payments/stats")
@role_required("admin")
def payment_stats():
    return jsonify(PlatformAnalytics(get_store()).payment_stats())


@bp.route("/payments/revenue")
@role_required("admin")
def revenue():
    days = request.args.get("days", 30, type=int)
    if days is None or days < 1:
        return jsonify({"error": "days must be a positive integer", "kind": "validation"}), 400
    return jsonify(PlatformAnalytics(get_store()).revenue_analytics(days))


@bp.route("/payments/<payment_id>")
@role_required("admin")
def get_payment(payment_id):
    payment = PaymentStore(get_store()).get(payment_id)
    if payment is None:
        return jsonify({"error": "Payment not found", "kind": "not_found"}), 404
    return jsonify(to_dict(payment))


@bp.route("/payments/<payment_id>/status", methods=["POST"])
@role_required("admin")
def update_payment_status(payment_id):
    store = get_store()
    status = json_body().get("status", "")
    payment = PaymentStore(store).update_status(payment_id, status)
    log_event(store, "payment_status_changed", current_user_id(), f"payment_id={payment_id} status={status}")
    return jsonify(to_dict(payment))


@bp.route("/payments/<payment_id>/refund", methods=["POST"])
@role_required("admin")
def refund_payment(payment_id):
    store = get_store()
    data = json_body()
    payment = PaymentStore(store).process_refund(
        payment_id, data.get("amount"), data.get("reason", "")
    )
    log_event(store, "payment_refunded", current_user_id(),
              f"payment_id={payment_id} amount={payment.refund_amount}")
    return jsonify(to_dict(payment))


# ── Courses ────────────────────────────────────────────────

@bp.route("/courses")
@role_required("admin")
def list_courses():
    courses = CourseStore(get_store()).search(**course_filters())
    return jsonify(serialize(courses))


@bp.route("/courses/<course_id>", methods=["DELETE"])
@role_required("admin")
def delete_course(course_id):
    store = get_store()
    if not CourseStore(store).delete(course_id):
        return jsonify({"error": "Course not found", "kind": "not_found"}), 404
    log_event(store, "course_deleted", current_user_id(), f"course_id={course_id}")
    return jsonify({"success": True})


# ── Settings ───────────────────────────────────────────────

@bp.route("/settings")
@role_required("admin")
def get_platform_settings():
    return jsonify(get_settings().get_all())


@bp.route("/settings", methods=["PUT"])
@role_required("admin")
def update_platform_settings():
    data = json_body()
    settings = get_settings()
    if "section" in data:
        result = settings.update(data["section"], data.get("key", ""), data.get("value"))
    else:
        result = settings.update_many(data)
    log_event(get_store(), "settings_updated", current_user_id())
    return jsonify(result)


@bp.route("/settings", methods=["DELETE"])
@role_required("admin")
def reset_platform_settings():
    result = get_settings().reset()
    log_event(get_store(), "settings_reset", current_user_id())
    return jsonify(result)


@bp.route("/settings/export")
@role_required("admin")
def export_platform_settings():
    filename = export_filename("platform-settings", get_store().now().date(), "json")
    return Response(
        get_settings().export_json(),
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
