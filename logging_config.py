"""
Logging for the course platform API.

Records are written to stderr as text in development and as one JSON object
per line in production (``LOG_FORMAT``). Every record emitted while serving a
dashboard request is tagged with the request id and the acting user's email,
and each request ends with a single access line.
"""

from __future__ import annotations

import json
import logging
import time
import uuid

from flask import Flask, g, has_request_context, request

from helpers import USER_HEADER

REQUEST_ID_HEADER = "X-Request-ID"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s %(actor)s]: %(message)s"


class RequestContextFilter(logging.Filter):
    """Tag records with ``request_id`` and ``actor`` ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        in_request = has_request_context()
        if not hasattr(record, "request_id"):
            record.request_id = getattr(g, "request_id", "-") if in_request else "-"
        if not hasattr(record, "actor"):
            record.actor = (request.headers.get(USER_HEADER) or "-") if in_request else "-"
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
            "actor": getattr(record, "actor", "-"),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def init_logging(app: Flask) -> None:
    """Point the root logger at stderr per LOG_FORMAT/LOG_LEVEL and hook request tagging."""
    root = logging.getLogger()
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    if app.config.get("LOG_FORMAT", "text") == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    @app.before_request
    def _start_request():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def _access_line(response):
        response.headers[REQUEST_ID_HEADER] = getattr(g, "request_id", "-")
        elapsed_ms = (time.time() - getattr(g, "request_start", time.time())) * 1000
        app.logger.info("%s %s -> %s in %.0fms", request.method, request.path, response.status_code, elapsed_ms)
        return response
