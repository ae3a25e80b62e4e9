"""FastAPI dependencies and require-helpers for routes."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from repositories import UserStore
from schemas.users import User


def get_store(request: Request) -> UserStore:
    """Return the store built at startup (app.state.store). Use in Depends()."""
    return request.app.state.store


StoreDep = Annotated[UserStore, Depends(get_store)]


async def require_user(user_id: str, store: StoreDep) -> User:
    """The stored user named by the `user_id` path parameter; 404 when the store has no such id."""
    user = await store.get_user(user_id)
    if not user:
        raise HTTPException(404, f"User '{user_id}' not found")
    return user
