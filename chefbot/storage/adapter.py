from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from ..catalog.models import (
    Flavor,
    Hotkey,
    MenuItem,
    Promo,
    Review,
    SocialShare,
    Spiciness,
    Theme,
    User,
)
from .backends import Backend, MemoryBackend, SqlBackend
from .config import DEFAULT_STORAGE_CONFIG, StorageConfig
from .repository import (
    FLAVORS,
    HOTKEYS,
    MENU_ITEMS,
    PROMOS,
    REVIEWS,
    SOCIAL_SHARES,
    SPICINESS,
    THEMES,
    USERS,
    Repository,
    new_id,
    utcnow,
)
from .seed import seed_demo_data
from .tables import Base

logger = logging.getLogger(__name__)


class StorageMode(str, Enum):
    persistent = "persistent"
    memory = "memory"


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory SQLite lives on a single shared connection.
            options["poolclass"] = StaticPool
    return options


class Storage:
    """
    Entry point to all persisted state.

    ``connect()`` picks the backend exactly once: the SQL database when
    ``database_url`` is set and reachable, otherwise the in-memory demo store.
    The choice is never revisited for the lifetime of the instance.
    """

    def __init__(self, config: StorageConfig = DEFAULT_STORAGE_CONFIG):
        self.config = config
        self._mode: StorageMode | None = None
        self._engine: Engine | None = None

    # ── Connection ───────────────────────────────────────────────────────

    @property
    def mode(self) -> StorageMode:
        if self._mode is None:
            raise RuntimeError("Storage.connect() has not been called")
        return self._mode

    @property
    def connected(self) -> bool:
        return self._mode is not None

    def connect(self) -> StorageMode:
        if self._mode is not None:
            return self._mode

        backend = self._open_persistent()
        if backend is None:
            backend = MemoryBackend()
            self._mode = StorageMode.memory
        else:
            self._mode = StorageMode.persistent

        self._bind(backend)
        if self.config.seed_demo_data:
            seed_demo_data(backend, self.config)
        logger.info("Storage ready in %s mode", self._mode.value)
        return self._mode

    def _open_persistent(self) -> SqlBackend | None:
        url = self.config.database_url
        if not url:
            logger.warning("DATABASE_URL not configured, falling back to in-memory storage")
            return None
        try:
            engine = create_engine(url, **_engine_options(url))
            Base.metadata.create_all(engine)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            logger.warning("Database connection failed, falling back to in-memory storage", exc_info=True)
            return None
        self._engine = engine
        return SqlBackend(engine)

    def _bind(self, backend: Backend) -> None:
        self._backend = backend
        self.menu_items: Repository[MenuItem] = Repository(backend, MENU_ITEMS)
        self.flavors: Repository[Flavor] = Repository(backend, FLAVORS)
        self.spiciness: Repository[Spiciness] = Repository(backend, SPICINESS)
        self.promos: Repository[Promo] = Repository(backend, PROMOS)
        self.themes: Repository[Theme] = Repository(backend, THEMES)
        self.hotkeys: Repository[Hotkey] = Repository(backend, HOTKEYS)
        self.reviews: Repository[Review] = Repository(backend, REVIEWS)
        self.social_shares: Repository[SocialShare] = Repository(backend, SOCIAL_SHARES)
        self.users: Repository[User] = Repository(backend, USERS)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        matches = self.users.find(username=username)
        return matches[0] if matches else None

    # ── Reviews ──────────────────────────────────────────────────────────

    def list_reviews(self, approved: bool | None = None) -> list[Review]:
        if approved is None:
            return self.reviews.list_all()
        return self.reviews.find(is_approved=approved)

    def reviews_for_menu_item(self, menu_item_id: str, approved_only: bool = True) -> list[Review]:
        if approved_only:
            return self.reviews.find(menu_item_id=menu_item_id, is_approved=True)
        return self.reviews.find(menu_item_id=menu_item_id)

    def approve_review(self, review_id: str) -> Review | None:
        return self.reviews.update(review_id, {"is_approved": True})

    # ── Social shares ────────────────────────────────────────────────────

    def shares_for_menu_item(self, menu_item_id: str) -> list[SocialShare]:
        return self.social_shares.find(menu_item_id=menu_item_id)

    def increment_share(self, menu_item_id: str, platform: str) -> SocialShare:
        """Add one share for (menu item, platform), creating the counter on first use."""
        now = utcnow()
        record = self._backend.increment(
            "social_shares",
            match={"menu_item_id": menu_item_id, "platform": platform},
            counter="share_count",
            touched={"last_shared_at": now},
            new_record={
                "id": new_id(),
                "menu_item_id": menu_item_id,
                "platform": platform,
                "share_count": 1,
                "last_shared_at": now,
            },
        )
        return SocialShare.model_validate(record)


_storage: Storage | None = None
_storage_lock = threading.Lock()


def get_storage() -> Storage:
    """Return the process-wide storage, connecting it on first call."""
    global _storage
    with _storage_lock:
        if _storage is None:
            storage = Storage()
            storage.connect()
            _storage = storage
    return _storage
