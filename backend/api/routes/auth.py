"""Register and login against the user store."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from api.deps import StoreDep
from api.helpers import public_user
from schemas.requests import Credentials
from schemas.users import UserCreate
from security import hash_password, verify_password

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register")
async def register(body: Credentials, store: StoreDep):
    # lookup-then-create: two concurrent registrations can both pass this check
    if await store.get_user_by_username(body.username):
        raise HTTPException(409, "username already taken")
    user = await store.create_user(
        UserCreate(username=body.username, password=hash_password(body.password))
    )
    logger.info("Registered user %s", user.id)
    return JSONResponse(public_user(user), status_code=201)


@router.post("/login")
async def login(body: Credentials, store: StoreDep):
    user = await store.get_user_by_username(body.username)
    if not user or not verify_password(body.password, user.password):
        raise HTTPException(401, "invalid credentials")
    return JSONResponse(public_user(user))
