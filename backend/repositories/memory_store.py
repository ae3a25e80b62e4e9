"""Volatile implementation of UserStore: a dict keyed by id, nothing on disk."""

import uuid
from collections.abc import Mapping
from typing import Any, Optional, Union

from schemas.users import User, UserCreate, UserUpdate

from .base import StoreNotReadyError, UserStore, as_fields


class MemoryUserStore(UserStore):
    """In-memory users. Also the CRUD core that FileUserStore persists."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._ready = True

    @property
    def ready(self) -> bool:
        return self._ready

    def _require_ready(self) -> None:
        if not self._ready:
            raise StoreNotReadyError(f"{type(self).__name__} used before load() completed")

    async def get_user(self, user_id: str) -> Optional[User]:
        self._require_ready()
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        self._require_ready()
        for user in self._users.values():
            if user.username == username:
                return user.model_copy(deep=True)
        return None

    async def create_user(self, data: Union[UserCreate, Mapping[str, Any]]) -> User:
        self._require_ready()
        user = User.model_validate({**as_fields(data), "id": str(uuid.uuid4())})
        self._users[user.id] = user
        return user.model_copy(deep=True)

    async def update_user(
        self, user_id: str, patch: Union[UserUpdate, Mapping[str, Any]]
    ) -> Optional[User]:
        self._require_ready()
        existing = self._users.get(user_id)
        if existing is None:
            return None
        merged = User.model_validate({**existing.model_dump(), **as_fields(patch), "id": existing.id})
        self._users[user_id] = merged
        return merged.model_copy(deep=True)

    async def delete_user(self, user_id: str) -> bool:
        self._require_ready()
        return self._users.pop(user_id, None) is not None

    async def list_users(self) -> list[User]:
        self._require_ready()
        return [u.model_copy(deep=True) for u in self._users.values()]
