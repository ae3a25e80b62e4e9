"""
Wayfarer backend configuration.
Single source of truth for environment and app settings.
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv

load_dotenv()


def get_settings():
    """Return app settings (use as FastAPI Depends or call directly)."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    APP_TITLE: str = "Wayfarer API"
    APP_VERSION: str = "1.0.0"
    ALLOWED_ORIGINS: list[str]

    # Storage: "file" (JSON snapshot) | "memory" (volatile, nothing on disk)
    WAYFARER_STORAGE: Literal["file", "memory"] = "file"
    WAYFARER_DATA_DIR: Path
    WAYFARER_USERS_FILE: Path

    def __init__(self):
        origins = os.environ.get("ALLOWED_ORIGINS", "http://localhost:5173")
        self.ALLOWED_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        self.WAYFARER_STORAGE = os.environ.get("WAYFARER_STORAGE", "file").lower()
        if self.WAYFARER_STORAGE not in ("file", "memory"):
            self.WAYFARER_STORAGE = "file"
        data_dir = os.environ.get("WAYFARER_DATA_DIR", "data")
        self.WAYFARER_DATA_DIR = Path(data_dir)
        users_file = (os.environ.get("WAYFARER_USERS_FILE") or "").strip()
        self.WAYFARER_USERS_FILE = Path(users_file) if users_file else self.WAYFARER_DATA_DIR / "users.json"
