"""Courses: catalogue queries, teacher CRUD, sections and downloadable materials."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Optional

from errors import IntegrityError, NotFoundError, ValidationError, require_choice
from models import (
    COURSE_LEVELS,
    COURSE_STATUSES,
    MATERIAL_TYPES,
    Course,
    CourseMaterial,
    CourseSection,
    EnrolledCourse,
    EnrolledStudent,
    Enrollment,
)
from store import DomainStore, parse_timestamp

# rating, review_count and enrolled_students are derived; id and created_at are fixed
EDITABLE_FIELDS = (
    "title", "description", "teacher_id", "teacher", "price", "subject", "level",
    "duration", "total_lessons", "thumbnail", "status", "tags", "requirements",
    "learning_objectives",
)

STUDENT_COURSE_FILTERS = ("all", "active", "completed", "pending")


def _check_price(price: Any) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if not math.isfinite(value):
        raise ValidationError("Price must be a number")
    if value < 0:
        raise ValidationError("Price cannot be negative")
    return value


def _check_lessons(total_lessons: Any) -> int:
    # bool is an int subclass
    if isinstance(total_lessons, bool) or not isinstance(total_lessons, (int, str)):
        raise ValidationError("Total lessons must be a whole number")
    try:
        value = int(total_lessons)
    except ValueError:
        raise ValidationError("Total lessons must be a whole number")
    if value < 0:
        raise ValidationError("Total lessons cannot be negative")
    return value


class CourseStore:
    """Course collection operations over a shared DomainStore."""

    def __init__(self, store: DomainStore):
        self.store = store

    # ── Catalogue queries ──────────────────────────────────────

    def get(self, course_id: str) -> Optional[Course]:
        return self.store.get_by_id(self.store.courses, course_id)

    def all(self) -> list[Course]:
        return list(self.store.courses)

    def by_teacher(self, teacher_id: str) -> list[Course]:
        return self.store.get_by_relation(self.store.courses, "teacher_id", teacher_id)

    def by_status(self, status: str) -> list[Course]:
        return self.store.get_by_relation(self.store.courses, "status", status)

    def search(self, query: str = "", status: str = "all", subject: str = "all") -> list[Course]:
        needle = query.strip().lower()
        courses = self.all()
        if needle:
            courses = [
                c for c in courses
                if needle in c.title.lower() or needle in c.teacher.lower() or needle in c.subject.lower()
            ]
        if status != "all":
            courses = [c for c in courses if c.status == status]
        if subject != "all":
            courses = [c for c in courses if c.subject == subject]
        return courses

    def available_for(self, student_id: str) -> list[Course]:
        """Active courses the student has no enrollment in, whatever its payment status."""
        enrolled_ids = {
            e.course_id for e in self.store.enrollments if e.student_id == student_id
        }
        return [
            c for c in self.store.courses
            if c.id not in enrolled_ids and c.status == "active"
        ]

    def is_enrolled(self, student_id: str, course_id: str) -> bool:
        return any(
            e.student_id == student_id and e.course_id == course_id and e.payment_status == "paid"
            for e in self.store.enrollments
        )

    def _join(self, enrollments: list[Enrollment]) -> list[EnrolledCourse]:
        rows = []
        for enrollment in enrollments:
            course = self.get(enrollment.course_id)
            if course is None:
                raise IntegrityError(
                    f"Enrollment {enrollment.id} references missing course {enrollment.course_id}"
                )
            rows.append(EnrolledCourse(course=course, enrollment=enrollment))
        return rows

    def student_courses(self, student_id: str) -> list[EnrolledCourse]:
        """Every enrollment of the student joined to its course."""
        enrollments = self.store.get_by_relation(self.store.enrollments, "student_id", student_id)
        return self._join(enrollments)

    def filter_student_courses(
        self,
        student_id: str,
        query: str = "",
        status: str = "all",
        sort_by: str = "recent",
    ) -> list[EnrolledCourse]:
        """The "My Courses" list: search, status filter, then sort."""
        rows = self.student_courses(student_id)
        needle = query.strip().lower()
        if needle:
            rows = [
                r for r in rows
                if needle in r.course.title.lower()
                or needle in r.course.teacher.lower()
                or needle in r.course.subject.lower()
            ]

        if status == "active":
            rows = [r for r in rows if r.enrollment.payment_status == "paid" and r.enrollment.progress < 100]
        elif status == "completed":
            rows = [r for r in rows if r.enrollment.progress == 100]
        elif status == "pending":
            rows = [r for r in rows if r.enrollment.payment_status == "pending"]

        if sort_by == "recent":
            rows.sort(key=lambda r: parse_timestamp(r.enrollment.last_accessed_at), reverse=True)
        elif sort_by == "progress":
            rows.sort(key=lambda r: r.enrollment.progress, reverse=True)
        elif sort_by == "title":
            rows.sort(key=lambda r: r.course.title.lower())
        return rows

    def completed_courses(self, student_id: str) -> list[EnrolledCourse]:
        """Paid enrollments at 100% progress."""
        enrollments = [
            e for e in self.store.enrollments
            if e.student_id == student_id and e.payment_status == "paid" and e.progress == 100
        ]
        return self._join(enrollments)

    def students_by_course(self, course_id: str) -> list[EnrolledStudent]:
        """Users holding a paid enrollment in the course. Dangling student ids are skipped."""
        rows = []
        for e in self.store.enrollments:
            if e.course_id != course_id or e.payment_status != "paid":
                continue
            user = self.store.get_by_id(self.store.users, e.student_id)
            if user is not None:
                rows.append(EnrolledStudent(user=user, enrolled_at=e.enrolled_at, progress=e.progress))
        return rows

    # ── Sections & materials ───────────────────────────────────

    def sections(self, course_id: str) -> list[CourseSection]:
        sections = self.store.get_by_relation(self.store.sections, "course_id", course_id)
        return sorted(sections, key=lambda s: s.order)

    def lesson_ids(self, course_id: str) -> set[str]:
        return {lesson.id for section in self.sections(course_id) for lesson in section.lessons}

    def materials(self, course_id: str) -> list[CourseMaterial]:
        return self.store.get_by_relation(self.store.materials, "course_id", course_id)

    def get_material(self, material_id: str) -> Optional[CourseMaterial]:
        return self.store.get_by_id(self.store.materials, material_id)

    def materials_for_student(
        self, student_id: str, query: str = "", sort_by: str = "name"
    ) -> list[CourseMaterial]:
        """Downloads page: materials of every course the student has paid for."""
        paid_course_ids = {
            e.course_id for e in self.store.enrollments
            if e.student_id == student_id and e.payment_status == "paid"
        }
        materials = [m for m in self.store.materials if m.course_id in paid_course_ids]
        needle = query.strip().lower()
        if needle:
            materials = [m for m in materials if needle in m.name.lower()]
        if sort_by == "name":
            materials.sort(key=lambda m: m.name.lower())
        elif sort_by == "date":
            materials.sort(key=lambda m: parse_timestamp(m.uploaded_at), reverse=True)
        elif sort_by == "downloads":
            materials.sort(key=lambda m: m.download_count, reverse=True)
        return materials

    def add_material(
        self,
        course_id: str,
        name: str,
        type: str,
        size: str,
        url: str,
        is_premium: bool = False,
    ) -> CourseMaterial:
        if self.get(course_id) is None:
            raise NotFoundError("Course not found")
        if not (name or "").strip():
            raise ValidationError("Material name is required")
        require_choice(type, MATERIAL_TYPES, "material type")
        material = CourseMaterial(
            id=self.store.next_id(),
            course_id=course_id,
            name=name.strip(),
            type=type,
            size=size,
            url=url,
            uploaded_at=self.store.today_iso(),
            is_premium=bool(is_premium),
        )
        with self.store.transaction():
            self.store.materials.append(material)
        return material

    def record_download(self, material_id: str) -> Optional[CourseMaterial]:
        with self.store.transaction():
            material = self.get_material(material_id)
            if material is not None:
                material.download_count += 1
        return material

    # ── Teacher CRUD ───────────────────────────────────────────

    def create(
        self,
        title: str,
        description: str,
        teacher_id: str,
        price: float,
        subject: str,
        level: str,
        duration: str,
        total_lessons: int,
        thumbnail: str = "",
        status: str = "draft",
        teacher: Optional[str] = None,
        tags: Optional[list[str]] = None,
        requirements: Optional[list[str]] = None,
        learning_objectives: Optional[list[str]] = None,
    ) -> Course:
        if not (title or "").strip():
            raise ValidationError("Title is required")
        require_choice(level, COURSE_LEVELS, "level")
        require_choice(status, ("draft", "active"), "status")
        price = _check_price(price)
        total_lessons = _check_lessons(total_lessons)

        if teacher is None:
            owner = self.store.get_by_id(self.store.users, teacher_id)
            teacher = owner.full_name if owner else ""

        now = self.store.now_iso()
        course = Course(
            id=self.store.next_id(),
            title=title.strip(),
            description=description or "",
            teacher_id=teacher_id,
            teacher=teacher,
            price=price,
            subject=subject or "",
            level=level,
            duration=duration or "",
            total_lessons=total_lessons,
            thumbnail=thumbnail or "",
            status=status,
            created_at=now,
            updated_at=now,
            tags=list(tags or []),
            requirements=list(requirements or []),
            learning_objectives=list(learning_objectives or []),
        )
        with self.store.transaction():
            self.store.courses.append(course)
        return course

    def update(self, course_id: str, updates: dict[str, Any]) -> Course:
        unknown = set(updates) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "level" in updates:
            require_choice(updates["level"], COURSE_LEVELS, "level")
        if "status" in updates:
            require_choice(updates["status"], COURSE_STATUSES, "status")
        if "price" in updates:
            updates = {**updates, "price": _check_price(updates["price"])}
        if "total_lessons" in updates:
            updates = {**updates, "total_lessons": _check_lessons(updates["total_lessons"])}

        with self.store.transaction():
            course = self.get(course_id)
            if course is None:
                raise NotFoundError("Course not found")
            for key, value in updates.items():
                setattr(course, key, value)
            course.updated_at = self.store.now_iso()
        return course

    def delete(self, course_id: str) -> bool:
        return self.store.remove_by_id(self.store.courses, course_id)

    def duplicate(self, course_id: str) -> Course:
        """Copy a course as a fresh draft with zeroed counters."""
        original = self.get(course_id)
        if original is None:
            raise NotFoundError("Course not found")
        now = self.store.now_iso()
        copy = replace(
            original,
            id=self.store.next_id(),
            title=f"{original.title} (Copy)",
            enrolled_students=0,
            rating=0.0,
            review_count=0,
            status="draft",
            created_at=now,
            updated_at=now,
            tags=list(original.tags),
            requirements=list(original.requirements),
            learning_objectives=list(original.learning_objectives),
        )
        with self.store.transaction():
            self.store.courses.append(copy)
        return copy
