"""
In-memory domain store.

Holds every entity collection as a plain list (insertion order preserved),
plus the id generator, the clock and the lock that serializes multi-entity
mutations. One ``DomainStore`` is built per app (and per test) and handed to
the store classes that implement queries and rules.
"""

from __future__ import annotations

import itertools
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from models import (
    Course,
    CourseMaterial,
    CourseReview,
    CourseSection,
    Enrollment,
    Message,
    Payment,
    ReviewHelpful,
    User,
    WishlistItem,
)


def parse_timestamp(value: str) -> datetime:
    """Parse a stored date or ISO timestamp into a naive datetime.

    Accepts ``YYYY-MM-DD``, naive ISO strings and ``Z``/offset suffixed ones.
    Aware values are converted to UTC and made naive so they compare with the clock.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def in_same_month(value: str, reference: datetime) -> bool:
    """True when ``value`` falls in the calendar month and year of ``reference``."""
    stamp = parse_timestamp(value)
    return stamp.month == reference.month and stamp.year == reference.year


class SequentialIdGenerator:
    """Monotonic string ids, safe across threads."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            return str(next(self._counter))


def uuid_id_generator() -> str:
    return uuid.uuid4().hex


class DomainStore:
    """Shared mutable state standing in for the database tables."""

    def __init__(
        self,
        id_generator: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        fee_rates: Optional[dict[str, float]] = None,
        currency: str = "USD",
    ):
        self.next_id = id_generator or SequentialIdGenerator()
        self.clock = clock or datetime.now
        self.fee_rates = fee_rates or {"processing": 0.03, "gateway": 0.03, "platform": 0.10}
        self.currency = currency
        self._lock = threading.RLock()

        self.users: list[User] = []
        self.courses: list[Course] = []
        self.sections: list[CourseSection] = []
        self.enrollments: list[Enrollment] = []
        self.payments: list[Payment] = []
        self.materials: list[CourseMaterial] = []
        self.messages: list[Message] = []
        self.wishlist: list[WishlistItem] = []
        self.reviews: list[CourseReview] = []
        self.review_votes: list[ReviewHelpful] = []
        self.audit_log: list[dict] = []

    # ── Clock ──────────────────────────────────────────────────

    def now(self) -> datetime:
        return self.clock()

    def now_iso(self) -> str:
        return self.now().isoformat()

    def today_iso(self) -> str:
        return self.now().date().isoformat()

    # ── Locking ────────────────────────────────────────────────

    @contextmanager
    def transaction(self) -> Iterator[DomainStore]:
        """Serialize a mutation that touches several collections.

        There is no rollback: a failure part-way leaves earlier writes in place.
        """
        with self._lock:
            yield self

    # ── Generic scans ──────────────────────────────────────────

    @staticmethod
    def get_by_id(collection: list, entity_id: str) -> Any:
        """First entity with a matching id, or None."""
        for item in collection:
            if item.id == entity_id:
                return item
        return None

    @staticmethod
    def get_by_relation(collection: list, field_name: str, value: Any) -> list:
        """All entities whose ``field_name`` equals ``value`` (possibly empty)."""
        return [item for item in collection if getattr(item, field_name) == value]

    def remove_by_id(self, collection: list, entity_id: str) -> bool:
        with self._lock:
            for index, item in enumerate(collection):
                if item.id == entity_id:
                    del collection[index]
                    return True
        return False

    # ── Lifecycle ──────────────────────────────────────────────

    def reset(self) -> None:
        """Empty every collection."""
        with self._lock:
            for name in (
                "users", "courses", "sections", "enrollments", "payments",
                "materials", "messages", "wishlist", "reviews", "review_votes",
                "audit_log",
            ):
                getattr(self, name).clear()

    def counts(self) -> dict[str, int]:
        return {
            "users": len(self.users),
            "courses": len(self.courses),
            "enrollments": len(self.enrollments),
            "payments": len(self.payments),
            "materials": len(self.materials),
            "messages": len(self.messages),
            "reviews": len(self.reviews),
            "wishlist": len(self.wishlist),
        }
