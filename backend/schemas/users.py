"""User record models shared by the stores and the API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """A stored user. `id` is assigned by the store; extra payload fields are kept verbatim."""

    model_config = ConfigDict(extra="allow")

    id: str
    username: str
    password: Optional[str] = None


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    username: str
    password: Optional[str] = None


class UserUpdate(BaseModel):
    """Partial patch: only fields explicitly set are applied."""

    model_config = ConfigDict(extra="allow")

    username: Optional[str] = None
    password: Optional[str] = None
