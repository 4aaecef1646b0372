"""
Application configuration: environment-aware settings.

All environment variables are documented here. See .env.example for a template.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent

load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    # Core Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-production")
    JSON_SORT_KEYS = False

    # Upload limits
    MAX_CONTENT_LENGTH = 2 * 1024 * 1024  # 2 MB of JSON is plenty

    # Logging
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Domain store
    SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", "true")
    ID_STRATEGY = os.environ.get("ID_STRATEGY", "sequence")  # "sequence" or "uuid"
    SETTINGS_PATH = os.environ.get("SETTINGS_PATH", str(BASE_DIR / "data" / "platform_settings.json"))

    # Payment ledger
    DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "USD")
    PROCESSING_FEE_RATE = float(os.environ.get("PROCESSING_FEE_RATE", "0.03"))
    GATEWAY_FEE_RATE = float(os.environ.get("GATEWAY_FEE_RATE", "0.03"))
    PLATFORM_FEE_RATE = float(os.environ.get("PLATFORM_FEE_RATE", "0.10"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")

    @classmethod
    def validate(cls):
        """Fail fast on missing or insecure configuration in production."""
        errors: list[str] = []

        if cls.SECRET_KEY in ("dev-key-change-in-production", ""):
            errors.append("SECRET_KEY must be set to a secure value in production.")

        if cls.ID_STRATEGY not in ("sequence", "uuid"):
            errors.append(f"ID_STRATEGY must be 'sequence' or 'uuid', got '{cls.ID_STRATEGY}'.")

        for name in ("PROCESSING_FEE_RATE", "GATEWAY_FEE_RATE", "PLATFORM_FEE_RATE"):
            if not 0 <= getattr(cls, name) < 1:
                errors.append(f"{name} must be between 0 and 1.")

        if cls.SEED_DEMO_DATA:
            warnings.warn("SEED_DEMO_DATA is on; the store will start with demo accounts.")

        if errors:
            raise RuntimeError(
                "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )


class TestingConfig(BaseConfig):
    TESTING = True
    SETTINGS_PATH = None
    LOG_LEVEL = "WARNING"


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
