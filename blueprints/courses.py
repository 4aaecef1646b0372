"""Course detail page routes: course info, reviews, helpful votes and material downloads."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from course_store import CourseStore
from enrollment_store import EnrollmentStore
from extensions import get_store
from helpers import current_user, current_user_id, json_body, role_required, serialize
from models import to_dict
from review_store import REVIEW_SORTS, ReviewStore

bp = Blueprint("courses", __name__, url_prefix="/api")


@bp.route("/courses/<course_id>")
def course_detail(course_id):
    store = get_store()
    courses = CourseStore(store)
    course = courses.get(course_id)
    if course is None:
        return jsonify({"error": "Course not found", "kind": "not_found"}), 404

    result = {
        **to_dict(course),
        "sections": serialize(courses.sections(course_id)),
        "materials": serialize(courses.materials(course_id)),
    }
    user = current_user()
    if user is not None:
        reviews = ReviewStore(store)
        result["viewer"] = {
            "is_enrolled": courses.is_enrolled(user.id, course_id),
            "is_in_wishlist": EnrollmentStore(store).is_in_wishlist(user.id, course_id),
            "has_reviewed": reviews.has_reviewed(user.id, course_id),
            "can_review": reviews.can_review_course(user.id, course_id),
        }
    return jsonify(result)


@bp.route("/courses/<course_id>/reviews")
def course_reviews(course_id):
    sort_by = request.args.get("sort_by", "newest")
    if sort_by not in REVIEW_SORTS:
        sort_by = "newest"
    reviews = ReviewStore(get_store())
    items = []
    user_id = current_user_id()
    for review in reviews.course_reviews(course_id, sort_by):
        entry = to_dict(review)
        if user_id is not None:
            entry["my_vote"] = reviews.user_review_vote(review.id, user_id)
        items.append(entry)
    return jsonify(items)


@bp.route("/courses/<course_id>/reviews", methods=["POST"])
@role_required("student")
def add_review(course_id):
    data = json_body()
    review = ReviewStore(get_store()).add_course_review(
        course_id=course_id,
        student_id=current_user_id(),
        rating=data.get("rating"),
        title=data.get("title", ""),
        comment=data.get("comment", ""),
        pros=data.get("pros"),
        cons=data.get("cons"),
        would_recommend=data.get("would_recommend", True),
    )
    return jsonify(to_dict(review)), 201


@bp.route("/reviews/<review_id>/helpful", methods=["POST"])
@role_required("student", "teacher", "admin")
def mark_helpful(review_id):
    is_helpful = json_body().get("is_helpful", True)
    if not isinstance(is_helpful, bool):
        return jsonify({"error": "is_helpful must be true or false", "kind": "validation"}), 400
    reviews = ReviewStore(get_store())
    vote = reviews.mark_review_helpful(review_id, current_user_id(), is_helpful)
    review = reviews.get(review_id)
    return jsonify({
        "vote": to_dict(vote),
        "helpful_votes": review.helpful_votes if review else None,
    })


@bp.route("/materials/<material_id>/download", methods=["POST"])
@role_required("student", "teacher", "admin")
def download_material(material_id):
    """Count a download. Students need a paid enrollment in the material's course."""
    courses = CourseStore(get_store())
    material = courses.get_material(material_id)
    if material is None:
        return jsonify({"error": "Material not found", "kind": "not_found"}), 404
    user = current_user()
    if user.role == "student" and not courses.is_enrolled(user.id, material.course_id):
        return jsonify({"error": "Enroll in the course to download its materials", "kind": "forbidden"}), 403
    material = courses.record_download(material_id)
    return jsonify(to_dict(material))
