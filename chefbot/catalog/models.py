from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Language = Literal["en", "es"]

THEME_COLOR_SLOTS = ("primary", "primary-dark", "secondary", "accent", "accent-dark")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; either spelling is accepted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Localized(CamelModel):
    en: str = Field(..., min_length=1)
    es: str = Field(..., min_length=1)

    def get(self, language: str) -> str:
        return self.es if language == "es" else self.en


def _check_palette(colors: dict[str, str] | None) -> dict[str, str] | None:
    if colors is None:
        return colors
    missing = [slot for slot in THEME_COLOR_SLOTS if not colors.get(slot)]
    if missing:
        raise ValueError(f"missing color slots: {', '.join(missing)}")
    return colors


# ── Menu items ───────────────────────────────────────────────────────────


class MenuItemCreate(CamelModel):
    name: Localized
    description: Localized
    price: float = Field(..., gt=0)
    image_url: str = Field(..., min_length=1)
    spice_level: int = Field(..., ge=0, le=5)
    flavors: list[str] = Field(default_factory=list)
    category: str = Field(..., min_length=1)
    ingredients: list[str] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    active: bool = True


class MenuItemUpdate(CamelModel):
    name: Localized | None = None
    description: Localized | None = None
    price: float | None = Field(default=None, gt=0)
    image_url: str | None = Field(default=None, min_length=1)
    spice_level: int | None = Field(default=None, ge=0, le=5)
    flavors: list[str] | None = None
    category: str | None = Field(default=None, min_length=1)
    ingredients: list[str] | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    active: bool | None = None


class MenuItem(MenuItemCreate):
    id: str
    created_at: datetime


# ── Flavors ──────────────────────────────────────────────────────────────


class FlavorCreate(CamelModel):
    name: str = Field(..., min_length=1)
    emoji: str = Field(..., min_length=1)
    hotkey: str | None = None
    translations: Localized
    active: bool = True


class FlavorUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    emoji: str | None = Field(default=None, min_length=1)
    hotkey: str | None = None
    translations: Localized | None = None
    active: bool | None = None


class Flavor(FlavorCreate):
    id: str
    created_at: datetime


# ── Spice levels ─────────────────────────────────────────────────────────


class SpicinessCreate(CamelModel):
    level: int = Field(..., ge=0, le=5)
    name: str = Field(..., min_length=1)
    emoji: str = Field(..., min_length=1)
    translations: Localized
    active: bool = True


class SpicinessUpdate(CamelModel):
    level: int | None = Field(default=None, ge=0, le=5)
    name: str | None = Field(default=None, min_length=1)
    emoji: str | None = Field(default=None, min_length=1)
    translations: Localized | None = None
    active: bool | None = None


class Spiciness(SpicinessCreate):
    id: str
    created_at: datetime


# ── Promos ───────────────────────────────────────────────────────────────


class PromoCreate(CamelModel):
    title: Localized
    description: Localized
    image_url: str = Field(..., min_length=1)
    order: int = 0
    active: bool = True


class PromoUpdate(CamelModel):
    title: Localized | None = None
    description: Localized | None = None
    image_url: str | None = Field(default=None, min_length=1)
    order: int | None = None
    active: bool | None = None


class Promo(PromoCreate):
    id: str
    created_at: datetime


# ── Themes ───────────────────────────────────────────────────────────────


class ThemeCreate(CamelModel):
    name: str = Field(..., min_length=1)
    display_name: Localized
    colors: dict[str, str]
    active: bool = True
    # Uniqueness of the default theme is not enforced.
    is_default: bool = False

    @field_validator("colors")
    @classmethod
    def check_palette(cls, colors: dict[str, str] | None) -> dict[str, str] | None:
        return _check_palette(colors)


class ThemeUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    display_name: Localized | None = None
    colors: dict[str, str] | None = None
    active: bool | None = None
    is_default: bool | None = None

    @field_validator("colors")
    @classmethod
    def check_palette(cls, colors: dict[str, str] | None) -> dict[str, str] | None:
        return _check_palette(colors)


class Theme(ThemeCreate):
    id: str
    created_at: datetime


# ── Hotkeys ──────────────────────────────────────────────────────────────


class HotkeyCreate(CamelModel):
    key: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    description: Localized
    active: bool = True


class HotkeyUpdate(CamelModel):
    key: str | None = Field(default=None, min_length=1)
    action: str | None = Field(default=None, min_length=1)
    description: Localized | None = None
    active: bool | None = None


class Hotkey(HotkeyCreate):
    id: str
    created_at: datetime


# ── Reviews ──────────────────────────────────────────────────────────────


class ReviewCreate(CamelModel):
    menu_item_id: str = Field(..., min_length=1)
    user_name: str = Field(..., min_length=1, max_length=100)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=2000)


class ReviewUpdate(CamelModel):
    user_name: str | None = Field(default=None, min_length=1, max_length=100)
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)
    is_approved: bool | None = None


class Review(ReviewCreate):
    id: str
    is_approved: bool = False
    created_at: datetime


# ── Social shares ────────────────────────────────────────────────────────


class ShareIncrementRequest(CamelModel):
    menu_item_id: str = Field(..., min_length=1)
    platform: str = Field(..., min_length=1, max_length=50)


class SocialShare(CamelModel):
    id: str
    menu_item_id: str
    platform: str
    share_count: int = Field(..., ge=1)
    last_shared_at: datetime


# ── Admin users ──────────────────────────────────────────────────────────


class User(CamelModel):
    id: str
    username: str = Field(..., min_length=3)
    password_hash: str = Field(..., exclude=True)
    role: str = "admin"
    created_at: datetime


class UserPublic(CamelModel):
    id: str
    username: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> UserPublic:
        return cls(id=user.id, username=user.username, role=user.role)
