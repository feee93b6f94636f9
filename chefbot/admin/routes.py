"""
Admin API under ``/api/admin``.

Every route on ``router`` requires an admin bearer token. The six catalogue
entities share one set of CRUD handlers built by ``_register_crud``; reviews
get their own moderation routes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..auth.dependencies import require_admin
from ..catalog.models import (
    Flavor,
    FlavorCreate,
    FlavorUpdate,
    Hotkey,
    HotkeyCreate,
    HotkeyUpdate,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
    Promo,
    PromoCreate,
    PromoUpdate,
    Review,
    ReviewUpdate,
    Spiciness,
    SpicinessCreate,
    SpicinessUpdate,
    Theme,
    ThemeCreate,
    ThemeUpdate,
    User,
    UserPublic,
)
from ..storage.adapter import Storage, get_storage
from ..storage.backends import ConflictError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


def _register_crud(path, repo_attr, label, create_model, update_model, out_model):
    """Attach list/create/update/delete routes for one catalogue entity."""

    @router.get(f"/{path}", response_model=list[out_model])
    def list_all(storage: Storage = Depends(get_storage)):
        return getattr(storage, repo_attr).list_all()

    @router.post(f"/{path}", response_model=out_model, status_code=201)
    def create(body: create_model, storage: Storage = Depends(get_storage)):
        try:
            record = getattr(storage, repo_attr).create(body)
        except ConflictError:
            raise HTTPException(status_code=400, detail=f"{label} conflicts with an existing entry")
        logger.info("Created %s %s", repo_attr, record.id)
        return record

    @router.put(f"/{path}/{{item_id}}", response_model=out_model)
    def update(item_id: str, body: update_model, storage: Storage = Depends(get_storage)):
        try:
            record = getattr(storage, repo_attr).update(item_id, body)
        except ConflictError:
            raise HTTPException(status_code=400, detail=f"{label} conflicts with an existing entry")
        if record is None:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return record

    @router.delete(f"/{path}/{{item_id}}")
    def delete(item_id: str, storage: Storage = Depends(get_storage)) -> dict:
        if not getattr(storage, repo_attr).delete(item_id):
            raise HTTPException(status_code=404, detail=f"{label} not found")
        logger.info("Deleted %s %s", repo_attr, item_id)
        return {"message": f"{label} deleted successfully"}


# ── Catalogue ────────────────────────────────────────────────────────────

_register_crud("menuitems", "menu_items", "Menu item", MenuItemCreate, MenuItemUpdate, MenuItem)
_register_crud("flavors", "flavors", "Flavor", FlavorCreate, FlavorUpdate, Flavor)
_register_crud("spiciness", "spiciness", "Spiciness level", SpicinessCreate, SpicinessUpdate, Spiciness)
_register_crud("promos", "promos", "Promo", PromoCreate, PromoUpdate, Promo)
_register_crud("themes", "themes", "Theme", ThemeCreate, ThemeUpdate, Theme)
_register_crud("hotkeys", "hotkeys", "Hotkey", HotkeyCreate, HotkeyUpdate, Hotkey)


# ── Review moderation ────────────────────────────────────────────────────


@router.get("/reviews", response_model=list[Review])
def list_reviews(approved: bool | None = None, storage: Storage = Depends(get_storage)):
    return storage.list_reviews(approved=approved)


@router.put("/reviews/{review_id}", response_model=Review)
def update_review(review_id: str, body: ReviewUpdate, storage: Storage = Depends(get_storage)):
    review = storage.reviews.update(review_id, body)
    if review is None:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.put("/reviews/{review_id}/approve", response_model=Review)
def approve_review(review_id: str, storage: Storage = Depends(get_storage)):
    review = storage.approve_review(review_id)
    if review is None:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.delete("/reviews/{review_id}")
def delete_review(review_id: str, storage: Storage = Depends(get_storage)) -> dict:
    if not storage.reviews.delete(review_id):
        raise HTTPException(status_code=404, detail="Review not found")
    return {"message": "Review deleted successfully"}


# ── Session ──────────────────────────────────────────────────────────────


@router.get("/me", response_model=UserPublic)
def me(user: User = Depends(require_admin)):
    return UserPublic.from_user(user)
