"""
Course reviews and helpfulness votes.

A course's ``rating`` and ``review_count`` are derived from its reviews and
recomputed whenever a review is added; a review's ``helpful_votes`` is
derived from the vote records and recomputed on every vote.
"""

from __future__ import annotations

from typing import Optional

from errors import NotFoundError, ValidationError
from models import CourseReview, ReviewHelpful
from store import DomainStore, parse_timestamp

REVIEW_SORTS = ("newest", "oldest", "highest", "lowest", "helpful")


class ReviewStore:
    """Review operations over a shared DomainStore."""

    def __init__(self, store: DomainStore):
        self.store = store

    # ── Queries ────────────────────────────────────────────────

    def get(self, review_id: str) -> Optional[CourseReview]:
        return self.store.get_by_id(self.store.reviews, review_id)

    def course_reviews(self, course_id: str, sort_by: str = "newest") -> list[CourseReview]:
        reviews = self.store.get_by_relation(self.store.reviews, "course_id", course_id)
        if sort_by == "newest":
            reviews.sort(key=lambda r: parse_timestamp(r.created_at), reverse=True)
        elif sort_by == "oldest":
            reviews.sort(key=lambda r: parse_timestamp(r.created_at))
        elif sort_by == "highest":
            reviews.sort(key=lambda r: r.rating, reverse=True)
        elif sort_by == "lowest":
            reviews.sort(key=lambda r: r.rating)
        elif sort_by == "helpful":
            reviews.sort(key=lambda r: r.helpful_votes, reverse=True)
        return reviews

    def student_review(self, student_id: str, course_id: str) -> Optional[CourseReview]:
        for review in self.store.reviews:
            if review.student_id == student_id and review.course_id == course_id:
                return review
        return None

    def has_reviewed(self, student_id: str, course_id: str) -> bool:
        return self.student_review(student_id, course_id) is not None

    def user_review_vote(self, review_id: str, user_id: str) -> Optional[bool]:
        """The user's helpfulness vote on a review, or None if they have not voted."""
        vote = self._find_vote(review_id, user_id)
        return vote.is_helpful if vote is not None else None

    def can_review_course(self, student_id: str, course_id: str) -> bool:
        """A student may review a course they paid for, finished, and have not reviewed yet."""
        finished = any(
            e.student_id == student_id
            and e.course_id == course_id
            and e.payment_status == "paid"
            and e.progress == 100
            for e in self.store.enrollments
        )
        return finished and not self.has_reviewed(student_id, course_id)

    def pending_reviews(self, student_id: str) -> list[str]:
        """Course ids the student is eligible to review right now."""
        course_ids = []
        for e in self.store.enrollments:
            if e.student_id == student_id and e.course_id not in course_ids:
                if self.can_review_course(student_id, e.course_id):
                    course_ids.append(e.course_id)
        return course_ids

    # ── Mutations ──────────────────────────────────────────────

    def _recompute_course_rating(self, course_id: str) -> None:
        course = self.store.get_by_id(self.store.courses, course_id)
        if course is None:
            return
        ratings = [r.rating for r in self.store.reviews if r.course_id == course_id]
        course.review_count = len(ratings)
        course.rating = round(sum(ratings) / len(ratings), 1) if ratings else 0.0

    def add_course_review(
        self,
        course_id: str,
        student_id: str,
        rating: int,
        title: str,
        comment: str,
        student_name: Optional[str] = None,
        pros: Optional[list[str]] = None,
        cons: Optional[list[str]] = None,
        would_recommend: bool = True,
        is_verified_purchase: Optional[bool] = None,
    ) -> CourseReview:
        """Add a review and refresh the course's rating and review count.

        Raises NotFoundError for an unknown course and ValidationError for a
        rating outside 1-5 or a second review by the same student.
        """
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise ValidationError("Rating must be a whole number from 1 to 5")
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be a whole number from 1 to 5")

        with self.store.transaction():
            if self.store.get_by_id(self.store.courses, course_id) is None:
                raise NotFoundError("Course not found")
            if self.has_reviewed(student_id, course_id):
                raise ValidationError("You have already reviewed this course", kind="conflict")

            if student_name is None:
                student = self.store.get_by_id(self.store.users, student_id)
                student_name = student.full_name if student else ""
            if is_verified_purchase is None:
                is_verified_purchase = any(
                    e.student_id == student_id and e.course_id == course_id and e.payment_status == "paid"
                    for e in self.store.enrollments
                )

            now = self.store.now_iso()
            review = CourseReview(
                id=self.store.next_id(),
                course_id=course_id,
                student_id=student_id,
                student_name=student_name,
                rating=rating,
                title=title or "",
                comment=comment or "",
                pros=list(pros or []),
                cons=list(cons or []),
                would_recommend=bool(would_recommend),
                created_at=now,
                updated_at=now,
                helpful_votes=0,
                reported_count=0,
                is_verified_purchase=bool(is_verified_purchase),
            )
            self.store.reviews.append(review)
            self._recompute_course_rating(course_id)
        return review

    def _find_vote(self, review_id: str, user_id: str) -> Optional[ReviewHelpful]:
        for vote in self.store.review_votes:
            if vote.review_id == review_id and vote.user_id == user_id:
                return vote
        return None

    def mark_review_helpful(self, review_id: str, user_id: str, is_helpful: bool) -> ReviewHelpful:
        """Record (or change) a user's vote, then recount the review's helpful votes.

        The vote is stored even if the review id does not resolve.
        """
        with self.store.transaction():
            vote = self._find_vote(review_id, user_id)
            if vote is None:
                vote = ReviewHelpful(
                    id=self.store.next_id(),
                    review_id=review_id,
                    user_id=user_id,
                    is_helpful=bool(is_helpful),
                    created_at=self.store.now_iso(),
                )
                self.store.review_votes.append(vote)
            else:
                vote.is_helpful = bool(is_helpful)

            review = self.get(review_id)
            if review is not None:
                review.helpful_votes = sum(
                    1 for v in self.store.review_votes if v.review_id == review_id and v.is_helpful
                )
        return vote
