from __future__ import annotations

from typing import TYPE_CHECKING

import bcrypt

from ..catalog.models import User

if TYPE_CHECKING:
    from ..storage.adapter import Storage


def hash_password(plain: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed.startswith(("$2a$", "$2b$", "$2y$")):
        return False
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def authenticate(storage: Storage, username: str, password: str) -> User | None:
    """Verify credentials against the stored admin users. Returns the user or ``None``."""
    user = storage.get_user_by_username(username)
    if user and verify_password(password, user.password_hash):
        return user
    return None
