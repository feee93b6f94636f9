from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException

from .admin.routes import router as admin_router
from .auth.config import warn_if_insecure
from .auth.models import LoginRequest, LoginResponse
from .auth.tokens import issue_token
from .auth.users import authenticate
from .catalog.models import (
    Flavor,
    Hotkey,
    MenuItem,
    Promo,
    Review,
    ReviewCreate,
    ShareIncrementRequest,
    SocialShare,
    Spiciness,
    Theme,
    UserPublic,
)
from .chat.models import ChatRequest, ChatResponse, SurpriseRequest
from .chat.recommender import recommend, surprise
from .errors import install_error_handlers
from .storage.adapter import Storage, get_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    warn_if_insecure()
    storage = get_storage()
    logger.info("ChefBot API started (storage: %s)", storage.mode.value)
    yield
    storage.close()


app = FastAPI(title="ChefBot API", version="1.0.0", lifespan=lifespan)
install_error_handlers(app)
app.include_router(admin_router)


def _require_menu_item(storage: Storage, menu_item_id: str) -> MenuItem:
    item = storage.menu_items.get(menu_item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Menu item not found")
    return item


# ── Health ───────────────────────────────────────────────────────────────


@app.get("/api/health")
def health(storage: Storage = Depends(get_storage)) -> dict[str, str]:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": storage.mode.value,
    }


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/api/admin/login", response_model=LoginResponse)
def login(body: LoginRequest, storage: Storage = Depends(get_storage)) -> LoginResponse:
    user = authenticate(storage, body.username, body.password)
    if not user:
        logger.info("Rejected admin login for %r", body.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(token=issue_token(user), user=UserPublic.from_user(user))


# ── Catalogue ────────────────────────────────────────────────────────────


@app.get("/api/flavors", response_model=list[Flavor])
def flavors(storage: Storage = Depends(get_storage)) -> list[Flavor]:
    return storage.flavors.list_active()


@app.get("/api/spiciness", response_model=list[Spiciness])
def spiciness(storage: Storage = Depends(get_storage)) -> list[Spiciness]:
    return storage.spiciness.list_active()


@app.get("/api/promos", response_model=list[Promo])
def promos(storage: Storage = Depends(get_storage)) -> list[Promo]:
    return storage.promos.list_active()


@app.get("/api/menuitems", response_model=list[MenuItem])
def menu_items(storage: Storage = Depends(get_storage)) -> list[MenuItem]:
    return storage.menu_items.list_active()


@app.get("/api/menuitems/{item_id}", response_model=MenuItem)
def menu_item(item_id: str, storage: Storage = Depends(get_storage)) -> MenuItem:
    return _require_menu_item(storage, item_id)


@app.get("/api/themes", response_model=list[Theme])
def themes(storage: Storage = Depends(get_storage)) -> list[Theme]:
    return storage.themes.list_active()


@app.get("/api/hotkeys", response_model=list[Hotkey])
def hotkeys(storage: Storage = Depends(get_storage)) -> list[Hotkey]:
    return storage.hotkeys.list_active()


# ── Reviews ──────────────────────────────────────────────────────────────


@app.get("/api/reviews", response_model=list[Review])
def reviews(storage: Storage = Depends(get_storage)) -> list[Review]:
    return storage.list_reviews(approved=True)


@app.get("/api/reviews/menuitem/{menu_item_id}", response_model=list[Review])
def menu_item_reviews(menu_item_id: str, storage: Storage = Depends(get_storage)) -> list[Review]:
    return storage.reviews_for_menu_item(menu_item_id, approved_only=True)


@app.post("/api/reviews", response_model=Review, status_code=201)
def create_review(body: ReviewCreate, storage: Storage = Depends(get_storage)) -> Review:
    _require_menu_item(storage, body.menu_item_id)
    # New reviews wait for moderation.
    return storage.reviews.create({**body.model_dump(), "is_approved": False})


# ── Social shares ────────────────────────────────────────────────────────


@app.get("/api/social-shares", response_model=list[SocialShare])
def social_shares(storage: Storage = Depends(get_storage)) -> list[SocialShare]:
    return storage.social_shares.list_all()


@app.get("/api/social-shares/menuitem/{menu_item_id}", response_model=list[SocialShare])
def menu_item_shares(menu_item_id: str, storage: Storage = Depends(get_storage)) -> list[SocialShare]:
    return storage.shares_for_menu_item(menu_item_id)


@app.post("/api/social-shares/increment", response_model=SocialShare)
def increment_share(body: ShareIncrementRequest, storage: Storage = Depends(get_storage)) -> SocialShare:
    _require_menu_item(storage, body.menu_item_id)
    return storage.increment_share(body.menu_item_id, body.platform)


# ── Recommendations ──────────────────────────────────────────────────────


@app.post("/api/chat", response_model=ChatResponse)
def chat(body: ChatRequest, storage: Storage = Depends(get_storage)) -> ChatResponse:
    return recommend(body, storage)


@app.post("/api/surprise", response_model=ChatResponse)
def surprise_me(body: SurpriseRequest, storage: Storage = Depends(get_storage)) -> ChatResponse:
    return surprise(body, storage)
