"""
Wayfarer persistence wiring.
Builds the configured UserStore once at startup; routes get it injected
through api.deps.get_store instead of importing a module-level instance.
"""

import logging
from typing import Optional

from config import Settings, get_settings
from repositories import FileUserStore, MemoryUserStore, UserStore

logger = logging.getLogger(__name__)


def build_store(settings: Optional[Settings] = None) -> UserStore:
    settings = settings or get_settings()
    if settings.WAYFARER_STORAGE == "memory":
        logger.info("Using volatile in-memory user store")
        return MemoryUserStore()
    return FileUserStore(settings.WAYFARER_USERS_FILE)


async def open_store(settings: Optional[Settings] = None) -> UserStore:
    """Build the store and run its initialization phase."""
    store = build_store(settings)
    await store.load()
    if store.load_error is not None:
        logger.warning("User store is degraded: %s", store.load_error)
    return store
