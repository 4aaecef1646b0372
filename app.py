"""
Course Platform: Flask Web Application

JSON routes for the admin, teacher and student dashboards over the
in-memory domain store.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Flask, Response, jsonify

from blueprints import register_blueprints
from errors import DomainError
from extensions import StoreManager

logger = logging.getLogger(__name__)


def create_app(test_config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    # Load config
    from config import config_by_name
    if test_config is not None:
        app.config.from_object(config_by_name["testing"])
        app.config.update(test_config)
    else:
        env = os.environ.get("FLASK_ENV", "development")
        cfg = config_by_name.get(env, config_by_name["development"])
        app.config.from_object(cfg)
        if hasattr(cfg, "validate"):
            cfg.validate()

    app.secret_key = app.config.get("SECRET_KEY")
    app.json.sort_keys = False

    # Structured logging
    from logging_config import init_logging
    init_logging(app)

    # Domain store + settings
    StoreManager.init_app(app)

    # Register all application blueprints
    register_blueprints(app)

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if exc.status_code >= 500:
            logger.error("Domain error: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({"error": "Not found", "kind": "not_found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return jsonify({"error": "Method not allowed", "kind": "method_not_allowed"}), 405

    @app.route("/health")
    def health():
        from extensions import get_store
        return jsonify({"status": "ok", "counts": get_store().counts()})

    # Security headers
    @app.after_request
    def set_security_headers(response: Response) -> Response:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        if not app.debug and not app.testing:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=5001)
