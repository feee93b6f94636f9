"""
Generic repository, implemented once and instantiated per entity.

Usage:
    flavors = Repository(backend, FLAVORS)
    flavors.list_active()
    flavor = flavors.create(FlavorCreate(...))
    flavors.update(flavor.id, FlavorUpdate(emoji="🍯"))
    flavors.delete(flavor.id)        # soft delete: active=False
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

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
from .backends import Backend, ConflictError
from .tables import UNIQUE_KEYS

ModelT = TypeVar("ModelT", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class EntitySpec(Generic[ModelT]):
    collection: str
    model: type[ModelT]
    order_by: str = "created_at"
    soft_delete: bool = True
    has_active: bool = True


MENU_ITEMS = EntitySpec("menu_items", MenuItem)
FLAVORS = EntitySpec("flavors", Flavor)
SPICINESS = EntitySpec("spiciness", Spiciness, order_by="level")
PROMOS = EntitySpec("promos", Promo, order_by="order")
THEMES = EntitySpec("themes", Theme)
HOTKEYS = EntitySpec("hotkeys", Hotkey)
REVIEWS = EntitySpec("reviews", Review, soft_delete=False, has_active=False)
SOCIAL_SHARES = EntitySpec(
    "social_shares", SocialShare, order_by="platform", soft_delete=False, has_active=False
)
USERS = EntitySpec("users", User, order_by="username", soft_delete=False, has_active=False)


class Repository(Generic[ModelT]):
    def __init__(self, backend: Backend, spec: EntitySpec[ModelT]):
        self._backend = backend
        self._spec = spec

    @property
    def spec(self) -> EntitySpec[ModelT]:
        return self._spec

    def _nullable(self, name: str) -> bool:
        field = self._spec.model.model_fields.get(name)
        return field is not None and not field.is_required() and field.default is None

    def _load(self, record: dict[str, Any]) -> ModelT:
        return self._spec.model.model_validate(record)

    def find(self, **filters: Any) -> list[ModelT]:
        """Return records whose fields equal every given filter value."""
        records = self._backend.find(self._spec.collection, filters or None, self._spec.order_by)
        return [self._load(r) for r in records]

    def list_active(self) -> list[ModelT]:
        if self._spec.has_active:
            return self.find(active=True)
        return self.find()

    def list_all(self) -> list[ModelT]:
        return self.find()

    def get(self, record_id: str) -> ModelT | None:
        """Return the record whether or not it is active."""
        record = self._backend.get(self._spec.collection, record_id)
        return self._load(record) if record is not None else None

    def create(self, data: BaseModel | dict[str, Any]) -> ModelT:
        fields = data.model_dump() if isinstance(data, BaseModel) else dict(data)
        record = {**fields, "id": new_id(), "created_at": utcnow()}
        # Invalid records never reach the backend; model defaults are filled in.
        record = {**self._load(record).model_dump(), **record}
        try:
            return self._load(self._backend.insert(self._spec.collection, record))
        except ConflictError:
            revived = self._revive(record)
            if revived is None:
                raise
            return revived

    def _revive(self, record: dict[str, Any]) -> ModelT | None:
        """Overwrite a soft-deleted record that holds the same unique key, keeping its id."""
        if not self._spec.soft_delete:
            return None
        for key_fields in UNIQUE_KEYS.get(self._spec.collection, ()):
            filters = {field: record[field] for field in key_fields}
            matches = self._backend.find(self._spec.collection, {**filters, "active": False})
            if matches:
                changes = {k: v for k, v in record.items() if k not in ("id", "created_at")}
                updated = self._backend.update(self._spec.collection, matches[0]["id"], changes)
                return self._load(updated) if updated is not None else None
        return None

    def update(self, record_id: str, data: BaseModel | dict[str, Any]) -> ModelT | None:
        """Merge the supplied fields into the record. ``None`` means not found."""
        if isinstance(data, BaseModel):
            # An explicit null clears optional fields; on required ones it means "unchanged".
            fields = {
                name: value
                for name, value in data.model_dump(exclude_unset=True).items()
                if value is not None or self._nullable(name)
            }
        else:
            fields = dict(data)
        fields.pop("id", None)
        fields.pop("created_at", None)

        existing = self._backend.get(self._spec.collection, record_id)
        if existing is None:
            return None
        if not fields:
            return self._load(existing)

        self._load({**existing, **fields})
        updated = self._backend.update(self._spec.collection, record_id, fields)
        return self._load(updated) if updated is not None else None

    def delete(self, record_id: str) -> bool:
        """Soft- or hard-delete depending on the entity. ``False`` means not found."""
        if self._spec.soft_delete:
            return self._backend.update(self._spec.collection, record_id, {"active": False}) is not None
        return self._backend.delete(self._spec.collection, record_id)
