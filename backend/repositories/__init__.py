"""Persistence layer: abstract interface and implementations."""

from .base import StoreError, StoreNotReadyError, StoreWriteError, UserStore
from .file_store import FileUserStore
from .memory_store import MemoryUserStore

__all__ = [
    "FileUserStore",
    "MemoryUserStore",
    "StoreError",
    "StoreNotReadyError",
    "StoreWriteError",
    "UserStore",
]
