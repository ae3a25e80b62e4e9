"""
User store contract and storage errors.

Route handlers depend on `UserStore` only; `MemoryUserStore` and
`FileUserStore` are interchangeable at construction time.
Not-found is never an error here: lookups return None, deletes return False.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel

from schemas.users import User, UserCreate, UserUpdate


class StoreError(Exception):
    """Base for storage faults (surfaced to clients as a generic 500)."""


class StoreNotReadyError(StoreError):
    """An operation was issued before the store finished loading."""


class StoreWriteError(StoreError):
    """The snapshot could not be written. The in-memory change already happened."""


def as_fields(data: Union[BaseModel, Mapping[str, Any]]) -> dict:
    """Plain dict of the fields a caller actually supplied, minus any `id`."""
    if isinstance(data, BaseModel):
        fields = data.model_dump(exclude_unset=True)
    else:
        fields = dict(data)
    fields.pop("id", None)
    return fields


class UserStore(ABC):
    """Async CRUD contract over `User` records."""

    @property
    @abstractmethod
    def ready(self) -> bool:
        pass

    @property
    def load_error(self) -> Optional[BaseException]:
        return None

    async def load(self) -> None:
        """Initialization phase. Must complete before the store is handed to callers."""

    def describe(self) -> dict:
        return {
            "backend": type(self).__name__,
            "ready": self.ready,
            "degraded": self.load_error is not None,
        }

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create_user(self, data: Union[UserCreate, Mapping[str, Any]]) -> User:
        pass

    @abstractmethod
    async def update_user(
        self, user_id: str, patch: Union[UserUpdate, Mapping[str, Any]]
    ) -> Optional[User]:
        pass

    @abstractmethod
    async def delete_user(self, user_id: str) -> bool:
        pass

    @abstractmethod
    async def list_users(self) -> list[User]:
        pass
