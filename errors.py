"""
Domain error taxonomy.

Store operations raise these when a precondition fails. Reads never raise on
a miss (they return None or an empty list) and deletes return a bool.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for rule-engine failures surfaced to callers."""

    kind = "error"
    status_code = 400

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


class ValidationError(DomainError, ValueError):
    """A precondition was violated (duplicate email, illegal refund, bad value)."""

    kind = "validation"
    status_code = 400

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message, kind)
        if self.kind == "conflict":
            self.status_code = 409


def require_choice(value: str, choices: tuple[str, ...], field_name: str) -> str:
    """Return ``value`` if it is one of ``choices``, else raise ValidationError."""
    if value not in choices:
        raise ValidationError(
            f"Invalid {field_name} '{value}'. Expected one of: {', '.join(choices)}"
        )
    return value


class NotFoundError(DomainError, LookupError):
    """A write referenced an entity that does not exist."""

    kind = "not_found"
    status_code = 404


class IntegrityError(DomainError):
    """Stored data references an entity that is gone (dangling id)."""

    kind = "integrity"
    status_code = 500
