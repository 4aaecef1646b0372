"""
Entity records for the course platform.

Plain dataclasses standing in for database rows. Every entity has a unique
string ``id``; collections keep insertion order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional


USER_ROLES = ("admin", "teacher", "student")
USER_STATUSES = ("active", "pending", "suspended")
COURSE_LEVELS = ("beginner", "intermediate", "advanced")
COURSE_STATUSES = ("draft", "active", "archived")
LESSON_TYPES = ("video", "text", "pdf", "quiz")
ENROLLMENT_PAYMENT_STATUSES = ("paid", "pending", "failed")
PAYMENT_STATUSES = ("completed", "pending", "failed", "refunded", "partially_refunded")
MATERIAL_TYPES = ("pdf", "zip", "doc", "video", "image")
MESSAGE_TYPES = ("text", "file")

# Payment statuses that count as money received
REVENUE_STATUSES = ("completed", "partially_refunded")


@dataclass
class User:
    id: str
    email: str
    first_name: str
    last_name: str
    role: str  # admin, teacher, student
    join_date: str  # YYYY-MM-DD
    status: str = "active"
    avatar: Optional[str] = None
    bio: Optional[str] = None
    subjects: list[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class Course:
    id: str
    title: str
    description: str
    teacher_id: str
    teacher: str
    price: float
    subject: str
    level: str  # beginner, intermediate, advanced
    duration: str
    total_lessons: int
    created_at: str
    updated_at: str
    enrolled_students: int = 0
    rating: float = 0.0
    review_count: int = 0
    thumbnail: str = ""
    status: str = "draft"
    tags: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)
    learning_objectives: list[str] = field(default_factory=list)


@dataclass
class Lesson:
    id: str
    course_id: str
    section_id: str
    title: str
    description: str
    type: str  # video, text, pdf, quiz
    duration: str
    order: int
    is_preview: bool = False
    content: Optional[str] = None
    video_url: Optional[str] = None
    file_url: Optional[str] = None


@dataclass
class CourseSection:
    id: str
    course_id: str
    title: str
    description: str
    order: int
    lessons: list[Lesson] = field(default_factory=list)


@dataclass
class Enrollment:
    id: str
    student_id: str
    course_id: str
    enrolled_at: str
    last_accessed_at: str
    progress: int = 0  # 0-100
    completed_lessons: list[str] = field(default_factory=list)
    payment_status: str = "pending"  # paid, pending, failed
    payment_id: Optional[str] = None
    completed_at: Optional[str] = None


@dataclass
class Payment:
    id: str
    student_id: str
    course_id: str
    amount: float
    status: str
    payment_method: str
    transaction_id: str
    created_at: str
    currency: str = "USD"
    completed_at: Optional[str] = None
    refunded_at: Optional[str] = None
    refund_amount: Optional[float] = None
    refund_reason: Optional[str] = None
    processing_fee: Optional[float] = None
    gateway_fee: Optional[float] = None
    platform_fee: Optional[float] = None
    net_amount: Optional[float] = None

    @property
    def total_fees(self) -> float:
        return (self.processing_fee or 0) + (self.gateway_fee or 0) + (self.platform_fee or 0)


@dataclass
class CourseMaterial:
    id: str
    course_id: str
    name: str
    type: str  # pdf, zip, doc, video, image
    size: str
    url: str
    uploaded_at: str
    download_count: int = 0
    is_premium: bool = False


@dataclass
class Message:
    id: str
    sender_id: str
    receiver_id: str
    content: str
    sent_at: str
    course_id: Optional[str] = None
    read_at: Optional[str] = None
    type: str = "text"
    file_url: Optional[str] = None
    file_name: Optional[str] = None


@dataclass
class WishlistItem:
    id: str
    student_id: str
    course_id: str
    added_at: str


@dataclass
class CourseReview:
    id: str
    course_id: str
    student_id: str
    student_name: str
    rating: int  # 1-5
    title: str
    comment: str
    created_at: str
    updated_at: str
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)
    would_recommend: bool = True
    helpful_votes: int = 0
    reported_count: int = 0
    is_verified_purchase: bool = False


@dataclass
class ReviewHelpful:
    id: str
    review_id: str
    user_id: str
    is_helpful: bool
    created_at: str


@dataclass
class EnrolledCourse:
    """A course joined with one of the student's enrollments in it."""
    course: Course
    enrollment: Enrollment

    def to_dict(self) -> dict:
        return {**asdict(self.course), "enrollment": asdict(self.enrollment)}


@dataclass
class EnrolledStudent:
    """A user joined with their enrollment date and progress in one course."""
    user: User
    enrolled_at: str
    progress: int

    def to_dict(self) -> dict:
        return {**asdict(self.user), "enrolled_at": self.enrolled_at, "progress": self.progress}


def to_dict(entity) -> dict:
    """JSON-serializable dict for an entity or a joined row."""
    if hasattr(entity, "to_dict"):
        return entity.to_dict()
    return asdict(entity)
