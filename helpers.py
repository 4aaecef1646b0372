"""
Shared helpers used across blueprints.

The acting user is whoever the ``X-User-Email`` header names. This mirrors
the demo sign-in of the dashboards and is not an authentication layer.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, request

from extensions import get_store
from models import User, to_dict
from user_store import UserStore

USER_HEADER = "X-User-Email"


def current_user() -> Optional[User]:
    """Resolve the acting user from the request header, or None."""
    if "current_user" not in g:
        email = (request.headers.get(USER_HEADER) or "").strip()
        g.current_user = UserStore(get_store()).get_by_email(email) if email else None
    return g.current_user


def current_user_id() -> Optional[str]:
    user = current_user()
    return user.id if user else None


def role_required(*roles: str) -> Callable:
    """Require an acting user whose role is one of ``roles``.

    401 when no user resolves, 403 when the role does not match.
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated(*args: Any, **kwargs: Any) -> Any:
            user = current_user()
            if user is None:
                return jsonify({"error": "Sign in required", "kind": "unauthorized"}), 401
            if user.role not in roles:
                return jsonify({"error": "Forbidden", "kind": "forbidden"}), 403
            return f(*args, **kwargs)
        return decorated
    return decorator


def json_body() -> dict:
    """Request JSON as a dict; a missing or non-object body reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def serialize(items: list) -> list[dict]:
    return [to_dict(item) for item in items]


# ── Pagination ──────────────────────────────────────────────

def paginate_args(default_limit: int = 20, max_limit: int = 100) -> tuple[int, int]:
    """Extract page/limit from request.args. Returns (page, limit)."""
    try:
        page = max(1, int(request.args.get("page", 1)))
    except (ValueError, TypeError):
        page = 1
    try:
        limit = min(max_limit, max(1, int(request.args.get("limit", default_limit))))
    except (ValueError, TypeError):
        limit = default_limit
    return page, limit


def paginated_response(items: list, page: int, limit: int) -> dict:
    """Slice ``items`` to one page and wrap it in the standard envelope."""
    total = len(items)
    start = (page - 1) * limit
    return {
        "items": serialize(items[start:start + limit]),
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": max(1, (total + limit - 1) // limit),
        },
    }
