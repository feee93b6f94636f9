from __future__ import annotations

from typing import Any

import jwt
from fastapi import Depends, Header, HTTPException

from ..catalog.models import User
from ..storage.adapter import Storage, get_storage
from .tokens import decode_token


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _authenticate(authorization: str | None, storage: Storage) -> tuple[User, dict[str, Any]]:
    """Resolve the bearer token to a stored user and its claims. Raise 401 on any failure."""
    token = _bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")
    try:
        claims = decode_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = storage.get_user(str(claims["sub"]))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user, claims


def require_admin(
    authorization: str | None = Header(default=None),
    storage: Storage = Depends(get_storage),
) -> User:
    """Raise 401 if not authenticated, 403 if the user or the token role is not admin."""
    user, claims = _authenticate(authorization, storage)
    if user.role != "admin" or claims.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
