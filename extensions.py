"""
Per-app singletons: the DomainStore and the SettingsStore.

Both are built once in ``create_app()`` and parked on ``app.extensions`` so
every request (and every test app) gets its own isolated state.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app

from seed_data import FIRST_FREE_ID, seed
from settings_store import SettingsStore
from store import DomainStore, SequentialIdGenerator, uuid_id_generator

logger = logging.getLogger(__name__)

STORE_KEY = "domain_store"
SETTINGS_KEY = "platform_settings"


class StoreManager:
    """Builds the app's stores from config."""

    @classmethod
    def build_store(cls, config) -> DomainStore:
        strategy = config.get("ID_STRATEGY", "sequence")
        if strategy == "uuid":
            id_generator = uuid_id_generator
        elif strategy == "sequence":
            # Seeded ids occupy everything below FIRST_FREE_ID
            id_generator = SequentialIdGenerator(start=FIRST_FREE_ID)
        else:
            raise RuntimeError(f"Unknown ID_STRATEGY '{strategy}'")

        store = DomainStore(
            id_generator=id_generator,
            clock=config.get("CLOCK"),
            fee_rates={
                "processing": config.get("PROCESSING_FEE_RATE", 0.03),
                "gateway": config.get("GATEWAY_FEE_RATE", 0.03),
                "platform": config.get("PLATFORM_FEE_RATE", 0.10),
            },
            currency=config.get("DEFAULT_CURRENCY", "USD"),
        )
        if config.get("SEED_DEMO_DATA", True):
            counts = seed(store)
            logger.info("Seeded demo data: %s", counts)
        return store

    @classmethod
    def init_app(cls, app: Flask) -> None:
        app.extensions[STORE_KEY] = cls.build_store(app.config)
        app.extensions[SETTINGS_KEY] = SettingsStore(app.config.get("SETTINGS_PATH"))


def get_store() -> DomainStore:
    return current_app.extensions[STORE_KEY]


def get_settings() -> SettingsStore:
    return current_app.extensions[SETTINGS_KEY]
