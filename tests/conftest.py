"""
Test fixtures for the course platform.

Provides a seeded DomainStore with a frozen clock, the Flask app and test
client built on the same clock, and request headers for each demo role.
"""

from __future__ import annotations

import pytest
from datetime import datetime

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Mid-February 2024: the seeded ledger has payments on both sides of the month boundary
FIXED_NOW = datetime(2024, 2, 15, 12, 0, 0)

ADMIN_EMAIL = "admin@email.com"
TEACHER_EMAIL = "dr.wilson@email.com"  # user 2, owns courses 1, 4 and 13
STUDENT_EMAIL = "student@example.com"  # user 5, enrolled in courses 1, 2 and 3 (pending)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def store():
    """A freshly seeded store, independent of any app."""
    from seed_data import FIRST_FREE_ID, seed
    from store import DomainStore, SequentialIdGenerator

    domain_store = DomainStore(
        id_generator=SequentialIdGenerator(start=FIRST_FREE_ID),
        clock=fixed_clock,
    )
    seed(domain_store)
    return domain_store


@pytest.fixture
def empty_store():
    from store import DomainStore
    return DomainStore(clock=fixed_clock)


@pytest.fixture
def app(tmp_path):
    """Create the app with a seeded store and a settings file under tmp_path."""
    from app import create_app

    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "SEED_DEMO_DATA": True,
        "ID_STRATEGY": "sequence",
        "SETTINGS_PATH": str(tmp_path / "settings.json"),
        "CLOCK": fixed_clock,
    })
    yield app


@pytest.fixture
def client(app):
    """Test client with no acting user."""
    return app.test_client()


@pytest.fixture
def app_store(app):
    """The DomainStore behind ``app``."""
    return app.extensions["domain_store"]


def as_user(email: str) -> dict[str, str]:
    return {"X-User-Email": email}


@pytest.fixture
def admin_headers():
    return as_user(ADMIN_EMAIL)


@pytest.fixture
def teacher_headers():
    return as_user(TEACHER_EMAIL)


@pytest.fixture
def student_headers():
    return as_user(STUDENT_EMAIL)
