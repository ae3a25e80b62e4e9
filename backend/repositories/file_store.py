"""
File-based implementation of UserStore.
Keeps users in memory and rewrites one JSON snapshot file on every mutation.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Union

from schemas.users import User

from .base import StoreWriteError
from .memory_store import MemoryUserStore

logger = logging.getLogger(__name__)

DEFAULT_USERS_FILE = Path("data") / "users.json"


class FileUserStore(MemoryUserStore):
    """
    Durable users: the in-memory dict of MemoryUserStore mirrored to `path`.

    Call `await load()` (or use `FileUserStore.open`) before handing the store
    to callers. Loading happens once; a missing file is bootstrapped as `[]`,
    any other read or parse failure leaves the store empty with `load_error` set.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        super().__init__()
        self.path = Path(path) if path else Path.cwd() / DEFAULT_USERS_FILE
        self._ready = False
        self._load_error: Optional[BaseException] = None
        self._load_task: Optional[asyncio.Future] = None
        self._write_lock = asyncio.Lock()

    @classmethod
    async def open(cls, path: Optional[Union[str, Path]] = None) -> "FileUserStore":
        store = cls(path)
        await store.load()
        return store

    @property
    def load_error(self) -> Optional[BaseException]:
        return self._load_error

    def describe(self) -> dict:
        return {**super().describe(), "path": str(self.path)}

    async def load(self) -> None:
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._load())
        await self._load_task

    async def _load(self) -> None:
        try:
            users = await asyncio.to_thread(self._read_snapshot)
        except FileNotFoundError:
            logger.info("No user snapshot at %s, creating an empty one", self.path)
            self._users = {}
            try:
                await self._persist()
            except StoreWriteError as e:
                self._degrade(e)
        except (OSError, ValueError, RecursionError) as e:
            # ValueError covers JSON decode, bad shape and pydantic validation;
            # RecursionError is json giving up on deeply nested input
            self._degrade(e)
        else:
            self._users = users
            logger.info("Loaded %d user(s) from %s", len(users), self.path)
        self._ready = True

    def _degrade(self, error: BaseException) -> None:
        self._load_error = error
        self._users = {}
        logger.warning(
            "Failed to load users from %s, starting with an empty store: %s",
            self.path,
            error,
        )

    def _read_snapshot(self) -> dict[str, User]:
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON array of users, got {type(raw).__name__}")
        users: dict[str, User] = {}
        for item in raw:
            user = User.model_validate(item)
            # duplicate ids: last one in the file wins
            users[user.id] = user
        return users

    def _dump(self) -> str:
        return json.dumps(
            [u.model_dump() for u in self._users.values()],
            ensure_ascii=False,
            indent=2,
        )

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(payload)
            tmp.replace(self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    async def _persist(self) -> None:
        async with self._write_lock:
            # serialize after taking the lock so the last write carries the latest state
            payload = self._dump()
            try:
                await asyncio.to_thread(self._write, payload)
            except OSError as e:
                logger.error("Failed to write user snapshot %s: %s", self.path, e)
                raise StoreWriteError(f"could not write {self.path}: {e}") from e

    async def create_user(self, data) -> User:
        user = await super().create_user(data)
        await self._persist()
        return user

    async def update_user(self, user_id: str, patch) -> Optional[User]:
        user = await super().update_user(user_id, patch)
        if user is not None:
            await self._persist()
        return user

    async def delete_user(self, user_id: str) -> bool:
        removed = await super().delete_user(user_id)
        if removed:
            await self._persist()
        return removed
