"""Student dashboard routes: browsing, enrollment, wishlist, payments, reviews and downloads."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from audit import log_event
from course_store import CourseStore
from enrollment_store import EnrollmentStore
from extensions import get_store
from helpers import current_user_id, json_body, role_required, serialize
from models import to_dict
from payment_store import PaymentStore
from review_store import ReviewStore

bp = Blueprint("student", __name__, url_prefix="/api/student")


@bp.route("/browse")
@role_required("student")
def browse():
    """Active courses the student is not enrolled in, with optional search and filters."""
    courses = CourseStore(get_store()).available_for(current_user_id())
    needle = request.args.get("q", "").strip().lower()
    subject = request.args.get("subject", "all")
    level = request.args.get("level", "all")
    if needle:
        courses = [
            c for c in courses
            if needle in c.title.lower() or needle in c.description.lower() or needle in c.teacher.lower()
        ]
    if subject != "all":
        courses = [c for c in courses if c.subject == subject]
    if level != "all":
        courses = [c for c in courses if c.level == level]
    return jsonify(serialize(courses))


@bp.route("/courses")
@role_required("student")
def my_courses():
    rows = CourseStore(get_store()).filter_student_courses(
        current_user_id(),
        query=request.args.get("q", ""),
        status=request.args.get("status", "all"),
        sort_by=request.args.get("sort_by", "recent"),
    )
    return jsonify(serialize(rows))


@bp.route("/courses/<course_id>/enroll", methods=["POST"])
@role_required("student")
def enroll(course_id):
    store = get_store()
    method = json_body().get("payment_method", "Credit Card")
    enrollment, payment = EnrollmentStore(store).enroll_in_course(current_user_id(), course_id, method)
    log_event(store, "course_enrolled", current_user_id(), f"course_id={course_id} payment_id={payment.id}")
    return jsonify({"enrollment": to_dict(enrollment), "payment": to_dict(payment)}), 201


@bp.route("/enrollments/<enrollment_id>/lessons/<lesson_id>", methods=["POST"])
@role_required("student")
def complete_lesson(enrollment_id, lesson_id):
    enrollments = EnrollmentStore(get_store())
    enrollment = enrollments.get(enrollment_id)
    if enrollment is None or enrollment.student_id != current_user_id():
        return jsonify({"error": "Enrollment not found", "kind": "not_found"}), 404
    return jsonify(to_dict(enrollments.complete_lesson(enrollment_id, lesson_id)))


# ── Wishlist ───────────────────────────────────────────────

@bp.route("/wishlist")
@role_required("student")
def wishlist():
    store = get_store()
    items = []
    for item in EnrollmentStore(store).wishlist_by_student(current_user_id()):
        course = store.get_by_id(store.courses, item.course_id)
        items.append({**to_dict(item), "course": to_dict(course) if course else None})
    return jsonify(items)


@bp.route("/wishlist", methods=["POST"])
@role_required("student")
def add_to_wishlist():
    course_id = json_body().get("course_id", "")
    if CourseStore(get_store()).get(course_id) is None:
        return jsonify({"error": "Course not found", "kind": "not_found"}), 404
    item = EnrollmentStore(get_store()).add_to_wishlist(current_user_id(), course_id)
    return jsonify(to_dict(item)), 201


@bp.route("/wishlist", methods=["DELETE"])
@role_required("student")
def remove_from_wishlist():
    course_id = request.args.get("course_id") or json_body().get("course_id", "")
    removed = EnrollmentStore(get_store()).remove_from_wishlist(current_user_id(), course_id)
    return jsonify({"success": removed})


# ── Payments, reviews, downloads ───────────────────────────

@bp.route("/payments")
@role_required("student")
def my_payments():
    payments = PaymentStore(get_store()).by_student(current_user_id())
    return jsonify(serialize(payments))


@bp.route("/reviews/pending")
@role_required("student")
def pending_reviews():
    """Finished courses still waiting for this student's review."""
    courses = CourseStore(get_store())
    course_ids = ReviewStore(get_store()).pending_reviews(current_user_id())
    return jsonify([to_dict(courses.get(cid)) for cid in course_ids if courses.get(cid)])


@bp.route("/downloads")
@role_required("student")
def downloads():
    materials = CourseStore(get_store()).materials_for_student(
        current_user_id(),
        query=request.args.get("q", ""),
        sort_by=request.args.get("sort_by", "name"),
    )
    return jsonify(serialize(materials))
