"""Pydantic schemas for stored records and API request bodies."""

from .requests import Credentials, UserPatch
from .users import User, UserCreate, UserUpdate

__all__ = [
    "Credentials",
    "User",
    "UserCreate",
    "UserPatch",
    "UserUpdate",
]
