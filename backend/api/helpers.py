"""Shared helpers for API routes."""

from schemas.users import User


def public_user(user: User) -> dict:
    """User as returned to clients: everything except the password hash."""
    return user.model_dump(exclude={"password"})
