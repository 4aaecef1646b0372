"""
Platform settings: a sectioned key/value blob saved as a JSON file.

Stored values are overlaid on ``DEFAULT_SETTINGS``, so keys missing from the
file fall back to their defaults. Unknown sections and keys are rejected.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from typing import Any, Optional

from errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "general": {
        "platform_name": "Instituto Miral",
        "platform_description": "A comprehensive educational platform for online learning",
        "support_email": "support@institutomiralargentina.com",
        "contact_phone": "+1 (555) 123-4567",
        "timezone": "UTC",
        "language": "es",
        "currency": "ARS",
        "maintenance_mode": False,
    },
    "security": {
        "require_email_verification": True,
        "enable_two_factor": False,
        "password_min_length": 8,
        "session_timeout": 24,
        "max_login_attempts": 5,
        "enable_captcha": True,
    },
    "email": {
        "smtp_host": "smtp.gmail.com",
        "smtp_port": "587",
        "smtp_username": "",
        "smtp_password": "",
        "from_email": "noreply@institutomiralargentina.com",
        "from_name": "Instituto Miral",
        "enable_email_notifications": True,
    },
    "notifications": {
        "enable_push_notifications": True,
        "enable_email_digest": True,
        "enable_sms_notifications": False,
        "notify_on_new_user": True,
        "notify_on_new_course": True,
        "notify_on_payment": True,
    },
    "payments": {
        "enable_payments": True,
        "stripe_public_key": "",
        "stripe_secret_key": "",
        "paypal_client_id": "",
        "paypal_client_secret": "",
        "currency": "USD",
        "tax_rate": 8.5,
        "processing_fee": 2.9,
    },
    "content": {
        "max_file_size": 100,
        "allowed_file_types": ["pdf", "doc", "docx", "ppt", "pptx", "mp4", "mp3", "jpg", "png"],
        "enable_video_streaming": True,
        "enable_downloads": True,
        "watermark_enabled": False,
        "content_moderation": True,
    },
    "appearance": {
        "primary_color": "#3b82f6",
        "secondary_color": "#64748b",
        "logo_url": "",
        "favicon_url": "",
        "custom_css": "",
        "enable_dark_mode": True,
    },
}


def _check_key(section: str, key: str) -> None:
    if section not in DEFAULT_SETTINGS:
        raise ValidationError(f"Unknown settings section '{section}'")
    if key not in DEFAULT_SETTINGS[section]:
        raise ValidationError(f"Unknown setting '{section}.{key}'")


class SettingsStore:
    """Settings persisted at ``path``; with no path they live in memory only."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._lock = threading.Lock()
        self._overrides: dict[str, dict[str, Any]] = {}
        self._load()

    def _load(self) -> None:
        if not self.path or not os.path.exists(self.path):
            return
        with open(self.path, encoding="utf-8") as f:
            saved = json.load(f)
        # Silently drop keys that are no longer part of the schema
        for section, values in saved.items():
            if section in DEFAULT_SETTINGS and isinstance(values, dict):
                self._overrides[section] = {
                    k: v for k, v in values.items() if k in DEFAULT_SETTINGS[section]
                }

    def _save(self) -> None:
        if not self.path:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._overrides, f, indent=2)

    def get_all(self) -> dict[str, dict[str, Any]]:
        merged = copy.deepcopy(DEFAULT_SETTINGS)
        for section, values in self._overrides.items():
            merged[section].update(copy.deepcopy(values))
        return merged

    def get(self, section: str, key: str) -> Any:
        _check_key(section, key)
        return self.get_all()[section][key]

    def update(self, section: str, key: str, value: Any) -> dict[str, dict[str, Any]]:
        _check_key(section, key)
        with self._lock:
            self._overrides.setdefault(section, {})[key] = value
            self._save()
        logger.info("Setting %s.%s updated", section, key)
        return self.get_all()

    def update_many(self, changes: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        """Apply a ``{section: {key: value}}`` patch. Validates everything before writing."""
        if not isinstance(changes, dict):
            raise ValidationError("Settings must be an object of sections")
        for section, values in changes.items():
            if not isinstance(values, dict):
                raise ValidationError(f"Settings section '{section}' must be an object")
            for key in values:
                _check_key(section, key)
        with self._lock:
            for section, values in changes.items():
                self._overrides.setdefault(section, {}).update(values)
            self._save()
        return self.get_all()

    def reset(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            self._overrides = {}
            if self.path and os.path.exists(self.path):
                os.remove(self.path)
        logger.info("Settings reset to defaults")
        return self.get_all()

    def export_json(self) -> str:
        return json.dumps(self.get_all(), indent=2)
