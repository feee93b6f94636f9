"""
Deterministic demo catalogue.

Seeds every collection that is still empty: six spice levels, eight flavors,
four themes, three promos, four menu items, two hotkeys and one admin user.
Ids are fixed so menu items can reference flavors by id.
"""

from __future__ import annotations

import logging
from typing import Any

from ..auth.users import hash_password
from .backends import Backend
from .config import StorageConfig
from .repository import utcnow

logger = logging.getLogger(__name__)

_UNSPLASH = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&w={}&h={}"

SPICINESS: list[dict[str, Any]] = [
    {"id": "spice-1", "level": 0, "name": "mild", "emoji": "😊", "translations": {"en": "Mild", "es": "Suave"}},
    {"id": "spice-2", "level": 1, "name": "medium", "emoji": "🌶️", "translations": {"en": "Medium", "es": "Medio"}},
    {"id": "spice-3", "level": 2, "name": "hot", "emoji": "🔥", "translations": {"en": "Hot", "es": "Picante"}},
    {"id": "spice-4", "level": 3, "name": "spicy", "emoji": "🌋", "translations": {"en": "Spicy", "es": "Muy Picante"}},
    {"id": "spice-5", "level": 4, "name": "extreme", "emoji": "💀", "translations": {"en": "Extreme", "es": "Extremo"}},
    {"id": "spice-6", "level": 5, "name": "insane", "emoji": "☠️", "translations": {"en": "Insane", "es": "Loco"}},
]

FLAVORS: list[dict[str, Any]] = [
    {"id": "flavor-1", "name": "sweet", "emoji": "🍯", "hotkey": "s", "translations": {"en": "Sweet", "es": "Dulce"}},
    {"id": "flavor-2", "name": "salty", "emoji": "🧂", "hotkey": "a", "translations": {"en": "Salty", "es": "Salado"}},
    {"id": "flavor-3", "name": "sour", "emoji": "🍋", "hotkey": "r", "translations": {"en": "Sour", "es": "Agrio"}},
    {"id": "flavor-4", "name": "bitter", "emoji": "☕", "hotkey": "b", "translations": {"en": "Bitter", "es": "Amargo"}},
    {"id": "flavor-5", "name": "umami", "emoji": "🍄", "hotkey": "u", "translations": {"en": "Umami", "es": "Umami"}},
    {"id": "flavor-6", "name": "creamy", "emoji": "🥛", "hotkey": "c", "translations": {"en": "Creamy", "es": "Cremoso"}},
    {"id": "flavor-7", "name": "crunchy", "emoji": "🥨", "hotkey": "x", "translations": {"en": "Crunchy", "es": "Crujiente"}},
    {"id": "flavor-8", "name": "fresh", "emoji": "🌿", "hotkey": "f", "translations": {"en": "Fresh", "es": "Fresco"}},
]


def _palette(primary: str, primary_dark: str, accent: str, accent_dark: str) -> dict[str, str]:
    return {
        "primary": primary,
        "primary-dark": primary_dark,
        "secondary": "#2D5A27",
        "accent": accent,
        "accent-dark": accent_dark,
    }


THEMES: list[dict[str, Any]] = [
    {
        "id": "theme-1",
        "name": "default",
        "display_name": {"en": "Default", "es": "Predeterminado"},
        "colors": _palette("#FF6B35", "#E63946", "#FFD23F", "#FB8500"),
        "is_default": True,
    },
    {
        "id": "theme-2",
        "name": "minty",
        "display_name": {"en": "Minty", "es": "Menta"},
        "colors": _palette("#00C9A7", "#00B894", "#A8E6CF", "#00B894"),
        "is_default": False,
    },
    {
        "id": "theme-3",
        "name": "sunset",
        "display_name": {"en": "Sunset", "es": "Atardecer"},
        "colors": _palette("#FF8A65", "#FF7043", "#FFD54F", "#FF7043"),
        "is_default": False,
    },
    {
        "id": "theme-4",
        "name": "inferno",
        "display_name": {"en": "Inferno", "es": "Infierno"},
        "colors": _palette("#D32F2F", "#C62828", "#FF5722", "#C62828"),
        "is_default": False,
    },
]

PROMOS: list[dict[str, Any]] = [
    {
        "id": "promo-1",
        "title": {"en": "🍔 Burger Bliss", "es": "🍔 Delicia de Hamburguesa"},
        "description": {
            "en": "Discover your perfect burger match with AI precision",
            "es": "Descubre tu hamburguesa perfecta con precisión de IA",
        },
        "image_url": _UNSPLASH.format("1586190848861-99aa4a171e90", 800, 600),
        "order": 1,
    },
    {
        "id": "promo-2",
        "title": {"en": "🍣 Sushi Sensations", "es": "🍣 Sensaciones de Sushi"},
        "description": {
            "en": "Experience authentic flavors tailored to your taste",
            "es": "Experimenta sabores auténticos adaptados a tu gusto",
        },
        "image_url": _UNSPLASH.format("1579584425555-c3ce17fd4351", 800, 600),
        "order": 2,
    },
    {
        "id": "promo-3",
        "title": {"en": "🍜 Ramen Revolution", "es": "🍜 Revolución del Ramen"},
        "description": {
            "en": "Warm your soul with personalized ramen recommendations",
            "es": "Calienta tu alma con recomendaciones personalizadas de ramen",
        },
        "image_url": _UNSPLASH.format("1569718212165-3a8278d5f624", 800, 600),
        "order": 3,
    },
]

MENU_ITEMS: list[dict[str, Any]] = [
    {
        "id": "menu-1",
        "name": {"en": "Herb-Crusted Steak", "es": "Filete con Costra de Hierbas"},
        "description": {
            "en": "Perfectly grilled with rosemary and garlic butter",
            "es": "Perfectamente asado con romero y mantequilla de ajo",
        },
        "price": 24.99,
        "image_url": _UNSPLASH.format("1546833999-b9f581a1996d", 400, 300),
        "spice_level": 1,
        "flavors": ["flavor-2", "flavor-5"],
        "category": "Main Course",
        "ingredients": ["beef", "rosemary", "garlic", "butter"],
        "rating": 4.8,
    },
    {
        "id": "menu-2",
        "name": {"en": "Spicy Thai Curry Bowl", "es": "Tazón de Curry Tailandés Picante"},
        "description": {
            "en": "Aromatic curry with vegetables and jasmine rice",
            "es": "Curry aromático con verduras y arroz jazmín",
        },
        "price": 18.99,
        "image_url": _UNSPLASH.format("1455619452474-d2be8b1e70cd", 400, 300),
        "spice_level": 4,
        "flavors": ["flavor-6", "flavor-8"],
        "category": "Main Course",
        "ingredients": ["coconut milk", "curry paste", "vegetables", "rice"],
        "rating": 4.6,
    },
    {
        "id": "menu-3",
        "name": {"en": "Miso Glazed Salmon", "es": "Salmón Glaseado con Miso"},
        "description": {
            "en": "Fresh salmon with miso glaze and pickled vegetables",
            "es": "Salmón fresco con glaseado de miso y verduras encurtidas",
        },
        "price": 22.99,
        "image_url": _UNSPLASH.format("1467003909585-2f8a72700288", 400, 300),
        "spice_level": 2,
        "flavors": ["flavor-5", "flavor-2", "flavor-8"],
        "category": "Main Course",
        "ingredients": ["salmon", "miso", "vegetables", "rice vinegar"],
        "rating": 4.7,
    },
    {
        "id": "menu-4",
        "name": {"en": "Chocolate Lava Cake", "es": "Pastel de Lava de Chocolate"},
        "description": {
            "en": "Rich chocolate cake with molten center",
            "es": "Pastel de chocolate rico con centro fundido",
        },
        "price": 8.99,
        "image_url": _UNSPLASH.format("1606313564200-e75d5e30476c", 400, 300),
        "spice_level": 0,
        "flavors": ["flavor-1", "flavor-6"],
        "category": "Dessert",
        "ingredients": ["chocolate", "butter", "eggs", "sugar"],
        "rating": 4.9,
    },
]

HOTKEYS: list[dict[str, Any]] = [
    {
        "id": "hotkey-1",
        "key": "ctrl+/",
        "action": "open_help",
        "description": {"en": "Open help menu", "es": "Abrir menú de ayuda"},
    },
    {
        "id": "hotkey-2",
        "key": "ctrl+shift+s",
        "action": "surprise_me",
        "description": {"en": "Surprise me with a recommendation", "es": "Sorpréndeme con una recomendación"},
    },
]

_CATALOGUE: dict[str, list[dict[str, Any]]] = {
    "spiciness": SPICINESS,
    "flavors": FLAVORS,
    "themes": THEMES,
    "promos": PROMOS,
    "menu_items": MENU_ITEMS,
    "hotkeys": HOTKEYS,
}


def _admin_user(config: StorageConfig) -> dict[str, Any]:
    return {
        "id": "admin-user-1",
        "username": config.admin_username,
        "password_hash": hash_password(config.admin_password, rounds=config.bcrypt_rounds),
        "role": "admin",
        "created_at": utcnow(),
    }


def seed_demo_data(backend: Backend, config: StorageConfig) -> dict[str, int]:
    """
    Insert the demo catalogue into every empty collection.

    Collections that already hold rows are left untouched, so calling this
    twice inserts nothing the second time. Returns inserted row counts.
    """
    inserted: dict[str, int] = {}
    now = utcnow()

    for collection, rows in _CATALOGUE.items():
        if backend.count(collection) > 0:
            continue
        for row in rows:
            backend.insert(collection, {**row, "active": True, "created_at": now})
        inserted[collection] = len(rows)

    if backend.count("users") == 0:
        backend.insert("users", _admin_user(config))
        inserted["users"] = 1

    if inserted:
        logger.info("Seeded demo data: %s", inserted)
    else:
        logger.info("Store already seeded, skipping")
    return inserted
