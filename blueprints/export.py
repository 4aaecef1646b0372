"""CSV export routes for the admin lists. Each honours the same filters as its list route."""

from __future__ import annotations

from flask import Blueprint, Response

from audit import log_event
from blueprints.admin import course_filters, payment_filters, user_filters
from course_store import CourseStore
from export import courses_csv, export_filename, payments_csv, users_csv
from extensions import get_store
from helpers import current_user_id, role_required
from payment_store import PaymentStore
from user_store import UserStore

bp = Blueprint("export", __name__, url_prefix="/api/export")


def _csv_response(body: str, kind: str) -> Response:
    store = get_store()
    log_event(store, "data_export", current_user_id(), f"type={kind}_csv")
    filename = export_filename(kind, store.now().date())
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@bp.route("/users.csv")
@role_required("admin")
def export_users():
    users = UserStore(get_store()).filter(**user_filters())
    return _csv_response(users_csv(users), "users")


@bp.route("/payments.csv")
@role_required("admin")
def export_payments():
    store = get_store()
    payments = PaymentStore(store).filter(**payment_filters())
    return _csv_response(payments_csv(store, payments), "payments")


@bp.route("/courses.csv")
@role_required("admin")
def export_courses():
    courses = CourseStore(get_store()).search(**course_filters())
    return _csv_response(courses_csv(courses), "courses")
