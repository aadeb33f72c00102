"""
Identity adapter for the upstream authentication provider.

Authentication happens before requests reach this service; the provider
forwards the signed-in user's id and role as headers.
"""
from typing import Optional

from fastapi import Header

from app.models.models import Identity, Role
from app.utils.exceptions import AuthenticationError, AuthorizationError


async def get_current_identity(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Identity:
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Unauthorized")

    try:
        role = Role((x_user_role or "").strip().upper())
    except ValueError as e:
        raise AuthorizationError(f"Unknown role: {x_user_role}", resource="candidates", cause=e)

    return Identity(user_id=x_user_id.strip(), role=role)
