from __future__ import annotations

from pydantic import BaseModel, Field

from ..catalog.models import UserPublic


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    token: str
    user: UserPublic
