from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

logger = logging.getLogger(__name__)

INSECURE_DEFAULT_SECRET = "your-secret-key-change-in-production"


@dataclass(frozen=True)
class AuthConfig:
    jwt_secret: str = os.getenv("JWT_SECRET", INSECURE_DEFAULT_SECRET)
    algorithm: str = "HS256"
    token_ttl_hours: int = 24


DEFAULT_AUTH_CONFIG = AuthConfig()


def warn_if_insecure(config: AuthConfig = DEFAULT_AUTH_CONFIG) -> bool:
    """Log a warning when tokens are signed with the built-in default secret."""
    if config.jwt_secret == INSECURE_DEFAULT_SECRET:
        logger.warning("JWT_SECRET is not set; admin tokens are signed with the insecure default secret")
        return True
    return False
