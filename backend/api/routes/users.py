"""User listing, lookup, patch and delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.deps import StoreDep, require_user
from api.helpers import public_user
from schemas.requests import UserPatch
from schemas.users import User
from security import hash_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users(store: StoreDep):
    users = await store.list_users()
    return JSONResponse([public_user(u) for u in users])


@router.get("/{user_id}")
async def get_user(user: Annotated[User, Depends(require_user)]):
    return JSONResponse(public_user(user))


@router.patch("/{user_id}")
async def update_user(user_id: str, body: UserPatch, store: StoreDep):
    patch = body.model_dump(exclude_unset=True, exclude_none=True)
    if "password" in patch:
        patch["password"] = hash_password(patch["password"])
    user = await store.update_user(user_id, patch)
    if not user:
        raise HTTPException(404, f"User '{user_id}' not found")
    return JSONResponse(public_user(user))


@router.delete("/{user_id}")
async def delete_user(user_id: str, store: StoreDep):
    if not await store.delete_user(user_id):
        raise HTTPException(404, f"User '{user_id}' not found")
    logger.info("Deleted user %s", user_id)
    return JSONResponse({"deleted": True})
