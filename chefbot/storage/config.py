from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StorageConfig:
    """
    Configuration for the storage adapter.

    ``database_url`` is any SQLAlchemy URL. When it is empty, or the database
    cannot be reached on ``connect()``, the adapter runs on the in-memory
    demo dataset instead.
    """

    database_url: str | None = os.getenv("DATABASE_URL") or None
    seed_demo_data: bool = True
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")
    bcrypt_rounds: int = 10


DEFAULT_STORAGE_CONFIG = StorageConfig()
