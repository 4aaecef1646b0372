"""
Audit logging: records who changed what.

Events are appended to the store's audit trail and emitted as a log line.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import has_request_context, request

from store import DomainStore

logger = logging.getLogger(__name__)


def log_event(store: DomainStore, action: str, user_id: Optional[str] = None, detail: str = "") -> dict:
    """Append an audit entry and emit a structured log line."""
    ip = (request.remote_addr or "") if has_request_context() else ""
    entry = {
        "action": action,
        "user_id": user_id,
        "detail": detail,
        "ip_address": ip,
        "created_at": store.now_iso(),
    }
    with store.transaction():
        store.audit_log.append(entry)

    logger.info("audit: %s user_id=%s detail=%s ip=%s", action, user_id, detail, ip)
    return entry
