"""Teacher dashboard routes: course CRUD, enrolled students, materials and analytics."""

from __future__ import annotations

from flask import Blueprint, abort, jsonify

from analytics import PlatformAnalytics
from audit import log_event
from course_store import CourseStore
from errors import NotFoundError
from extensions import get_store
from helpers import current_user, current_user_id, json_body, role_required, serialize
from models import Course, to_dict

bp = Blueprint("teacher", __name__, url_prefix="/api/teacher")


def _owned_course(course_id: str) -> Course:
    """Course the acting teacher may manage. Admins may manage any course."""
    course = CourseStore(get_store()).get(course_id)
    if course is None:
        raise NotFoundError("Course not found")
    user = current_user()
    if user.role != "admin" and course.teacher_id != user.id:
        abort(403)
    return course


@bp.errorhandler(403)
def _forbidden(exc):
    return jsonify({"error": "You do not own this course", "kind": "forbidden"}), 403


# ── Courses ────────────────────────────────────────────────

@bp.route("/courses")
@role_required("teacher", "admin")
def my_courses():
    return jsonify(serialize(CourseStore(get_store()).by_teacher(current_user_id())))


@bp.route("/courses", methods=["POST"])
@role_required("teacher", "admin")
def create_course():
    data = json_body()
    store = get_store()
    course = CourseStore(store).create(
        title=data.get("title", ""),
        description=data.get("description", ""),
        teacher_id=current_user_id(),
        price=data.get("price", 0),
        subject=data.get("subject", ""),
        level=data.get("level", "beginner"),
        duration=data.get("duration", ""),
        total_lessons=data.get("total_lessons", 0),
        thumbnail=data.get("thumbnail", ""),
        status=data.get("status", "draft"),
        tags=data.get("tags"),
        requirements=data.get("requirements"),
        learning_objectives=data.get("learning_objectives"),
    )
    log_event(store, "course_created", current_user_id(), f"course_id={course.id}")
    return jsonify(to_dict(course)), 201


@bp.route("/courses/<course_id>", methods=["PATCH"])
@role_required("teacher", "admin")
def update_course(course_id):
    _owned_course(course_id)
    course = CourseStore(get_store()).update(course_id, json_body())
    return jsonify(to_dict(course))


@bp.route("/courses/<course_id>", methods=["DELETE"])
@role_required("teacher", "admin")
def delete_course(course_id):
    _owned_course(course_id)
    store = get_store()
    CourseStore(store).delete(course_id)
    log_event(store, "course_deleted", current_user_id(), f"course_id={course_id}")
    return jsonify({"success": True})


@bp.route("/courses/<course_id>/duplicate", methods=["POST"])
@role_required("teacher", "admin")
def duplicate_course(course_id):
    _owned_course(course_id)
    copy = CourseStore(get_store()).duplicate(course_id)
    return jsonify(to_dict(copy)), 201


# ── Course management ──────────────────────────────────────

@bp.route("/courses/<course_id>/students")
@role_required("teacher", "admin")
def course_students(course_id):
    _owned_course(course_id)
    return jsonify(serialize(CourseStore(get_store()).students_by_course(course_id)))


@bp.route("/courses/<course_id>/analytics")
@role_required("teacher", "admin")
def course_analytics(course_id):
    _owned_course(course_id)
    return jsonify(PlatformAnalytics(get_store()).course_analytics(course_id))


@bp.route("/courses/<course_id>/materials", methods=["POST"])
@role_required("teacher", "admin")
def add_material(course_id):
    _owned_course(course_id)
    data = json_body()
    material = CourseStore(get_store()).add_material(
        course_id,
        name=data.get("name", ""),
        type=data.get("type", "pdf"),
        size=data.get("size", ""),
        url=data.get("url", ""),
        is_premium=data.get("is_premium", False),
    )
    return jsonify(to_dict(material)), 201


@bp.route("/analytics")
@role_required("teacher", "admin")
def teacher_analytics():
    return jsonify(PlatformAnalytics(get_store()).teacher_analytics(current_user_id()))
