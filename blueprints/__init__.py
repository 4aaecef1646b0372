"""
Blueprint registration for the course platform.

Each blueprint carries its own ``/api/...`` URL prefix.
"""

from __future__ import annotations


def register_blueprints(app):
    from blueprints.admin import bp as admin_bp
    from blueprints.teacher import bp as teacher_bp
    from blueprints.student import bp as student_bp
    from blueprints.courses import bp as courses_bp
    from blueprints.messages import bp as messages_bp
    from blueprints.export import bp as export_bp

    app.register_blueprint(admin_bp)
    app.register_blueprint(teacher_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(courses_bp)
    app.register_blueprint(messages_bp)
    app.register_blueprint(export_bp)
