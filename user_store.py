"""User accounts: lookups, admin CRUD with email uniqueness, list filtering."""

from __future__ import annotations

from typing import Any, Optional

from errors import NotFoundError, ValidationError, require_choice
from models import USER_ROLES, USER_STATUSES, User
from store import DomainStore, parse_timestamp

# Fields a patch may touch; id and join_date are fixed at creation
EDITABLE_FIELDS = ("email", "first_name", "last_name", "role", "status", "avatar", "bio", "subjects")

USER_SORT_FIELDS = ("first_name", "last_name", "email", "role", "status", "join_date")


def _clean_email(email: Any) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required")
    return email.strip()


def _clean_first_name(first_name: Any) -> str:
    if not isinstance(first_name, str) or not first_name.strip():
        raise ValidationError("First name is required")
    return first_name.strip()


class UserStore:
    """User collection operations over a shared DomainStore."""

    def __init__(self, store: DomainStore):
        self.store = store

    # ── Queries ────────────────────────────────────────────────

    def get(self, user_id: str) -> Optional[User]:
        return self.store.get_by_id(self.store.users, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self.store.users:
            if user.email == email:
                return user
        return None

    def all(self) -> list[User]:
        return list(self.store.users)

    def by_role(self, role: str) -> list[User]:
        return self.store.get_by_relation(self.store.users, "role", role)

    def filter(
        self,
        query: str = "",
        role: str = "all",
        status: str = "all",
        sort_by: str = "join_date",
        sort_order: str = "desc",
    ) -> list[User]:
        """Admin user list: search name/email, filter role/status, then sort."""
        users = self.all()
        needle = query.strip().lower()
        if needle:
            users = [
                u for u in users
                if needle in u.full_name.lower() or needle in u.email.lower()
            ]
        if role != "all":
            users = [u for u in users if u.role == role]
        if status != "all":
            users = [u for u in users if u.status == status]

        if sort_by not in USER_SORT_FIELDS:
            sort_by = "join_date"
        if sort_by == "join_date":
            key = lambda u: parse_timestamp(u.join_date)  # noqa: E731
        else:
            key = lambda u: str(getattr(u, sort_by)).lower()  # noqa: E731
        users.sort(key=key, reverse=(sort_order == "desc"))
        return users

    # ── Mutations ──────────────────────────────────────────────

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return any(u.email == email and u.id != exclude_id for u in self.store.users)

    def create(
        self,
        email: str,
        first_name: str,
        last_name: str,
        role: str,
        status: str = "active",
        bio: Optional[str] = None,
        subjects: Optional[list[str]] = None,
        avatar: Optional[str] = None,
    ) -> User:
        """Create a user. Raises ValidationError on a duplicate email or bad value."""
        email = _clean_email(email)
        first_name = _clean_first_name(first_name)
        require_choice(role, USER_ROLES, "role")
        require_choice(status, USER_STATUSES, "status")

        with self.store.transaction():
            if self._email_taken(email):
                raise ValidationError("User with this email already exists", kind="conflict")
            user = User(
                id=self.store.next_id(),
                email=email,
                first_name=first_name,
                last_name=(last_name or "").strip(),
                role=role,
                status=status,
                join_date=self.store.today_iso(),
                bio=bio,
                subjects=list(subjects or []),
                avatar=avatar,
            )
            self.store.users.append(user)
        return user

    def update(self, user_id: str, updates: dict[str, Any]) -> User:
        """Shallow-merge ``updates`` into the user.

        Fields present in the patch replace the old value; absent fields are kept.
        """
        unknown = set(updates) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        if "email" in updates:
            updates = {**updates, "email": _clean_email(updates["email"])}
        if "first_name" in updates:
            updates = {**updates, "first_name": _clean_first_name(updates["first_name"])}
        if "role" in updates:
            require_choice(updates["role"], USER_ROLES, "role")
        if "status" in updates:
            require_choice(updates["status"], USER_STATUSES, "status")

        with self.store.transaction():
            user = self.get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            if "email" in updates and self._email_taken(updates["email"], exclude_id=user_id):
                raise ValidationError("User with this email already exists", kind="conflict")
            for key, value in updates.items():
                setattr(user, key, list(value) if key == "subjects" and value is not None else value)
        return user

    def delete(self, user_id: str) -> bool:
        """Remove a user. False when the id is unknown."""
        return self.store.remove_by_id(self.store.users, user_id)
