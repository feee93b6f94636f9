"""
Signed bearer tokens for the admin API.

Tokens are HS256 JWTs carrying ``sub`` (user id), ``username`` and ``role``
claims and expire ``token_ttl_hours`` after issue.
"""

from __future__ import annotations

import time
from typing import Any

import jwt

from ..catalog.models import User
from .config import DEFAULT_AUTH_CONFIG, AuthConfig


def issue_token(user: User, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> str:
    now = int(time.time())
    payload = {
        "sub": user.id,
        "username": user.username,
        "role": user.role,
        "iat": now,
        "exp": now + config.token_ttl_hours * 60 * 60,
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.algorithm)


def decode_token(token: str, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> dict[str, Any]:
    """
    Verify the signature and expiry of ``token`` and return its claims.

    Raises ``jwt.InvalidTokenError`` (or a subclass such as
    ``jwt.ExpiredSignatureError``) when the token cannot be trusted.
    """
    claims = jwt.decode(
        token,
        config.jwt_secret,
        algorithms=[config.algorithm],
        options={"require": ["sub", "exp"]},
    )
    return claims
