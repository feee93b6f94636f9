"""
Menu recommendations from free-text preferences.

One Groq call per request: the active menu is sent as JSON context and the
model replies with ``{"message", "recommendations", "confidence"}``. The reply
is sanitised against the menu; any failure yields a localised apology instead
of an error.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from ..catalog.models import MenuItem
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete_json
from .models import ChatRequest, ChatResponse, SurpriseRequest

if TYPE_CHECKING:
    from ..storage.adapter import Storage

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8
FALLBACK_CONFIDENCE = 0.1

SYSTEM_PROMPTS = {
    "en": (
        "You are an expert AI chef that helps users find perfect food matches. "
        "Analyze their preferences and recommend dishes from the available menu."
    ),
    "es": (
        "Eres un chef AI experto que ayuda a los usuarios a encontrar la comida perfecta. "
        "Analiza sus preferencias y recomienda platos del menú disponible."
    ),
}

_USER_PROMPTS = {
    "en": (
        'User says: "{message}"\n'
        "Preferred spice level: {spice_level}/5\n"
        "Preferred flavors: {flavors}\n\n"
        "Based on these preferences, recommend dishes from the menu and provide a helpful response.\n"
        'Respond in JSON format with this structure: '
        '{{"message": "your response", "recommendations": ["id1", "id2", "id3"], "confidence": 0.8}}'
    ),
    "es": (
        'El usuario dice: "{message}"\n'
        "Nivel de picante preferido: {spice_level}/5\n"
        "Sabores preferidos: {flavors}\n\n"
        "Basándote en estas preferencias, recomienda platos del menú y proporciona una respuesta útil.\n"
        'Responde en formato JSON con esta estructura: '
        '{{"message": "tu respuesta", "recommendations": ["id1", "id2", "id3"], "confidence": 0.8}}'
    ),
}

SUCCESS_MESSAGES = {
    "en": "I found some great options for you!",
    "es": "¡Encontré algunas opciones geniales para ti!",
}

FALLBACK_MESSAGES = {
    "en": "Sorry, I couldn't process your request right now. Please try again.",
    "es": "Lo siento, no pude procesar tu solicitud en este momento. Por favor, intenta de nuevo.",
}

SURPRISE_MESSAGES = {
    "en": "Surprise me with something delicious",
    "es": "Sorpréndeme con algo delicioso",
}


def _menu_context(menu: list[MenuItem], language: str) -> str:
    items = [
        {
            "id": item.id,
            "name": item.name.get(language),
            "description": item.description.get(language),
            "spiceLevel": item.spice_level,
            "flavors": item.flavors,
            "price": item.price,
            "rating": item.rating,
        }
        for item in menu
    ]
    return "Available menu items: " + json.dumps(items, ensure_ascii=False)


def _confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, float(raw)))


def _recommended_ids(raw: Any, menu_ids: set[str]) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"'recommendations' must be a list, got {type(raw).__name__}")
    seen: list[str] = []
    for value in raw:
        item_id = str(value)
        if item_id in menu_ids and item_id not in seen:
            seen.append(item_id)
    return seen


def fallback_response(language: str) -> ChatResponse:
    return ChatResponse(
        message=FALLBACK_MESSAGES.get(language, FALLBACK_MESSAGES["en"]),
        recommendations=[],
        confidence=FALLBACK_CONFIDENCE,
    )


def recommend(
    request: ChatRequest,
    storage: Storage,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> ChatResponse:
    """
    Ask the LLM for dishes matching ``request`` from the current active menu.

    Never raises for LLM problems: API errors, malformed replies and a
    disabled or unconfigured client all produce ``fallback_response``.
    Storage errors propagate.
    """
    language = request.language
    menu = storage.menu_items.list_active()

    user_prompt = _USER_PROMPTS[language].format(
        message=request.message,
        spice_level=request.spice_level,
        flavors=", ".join(request.flavors),
    )
    user_prompt += "\n\n" + _menu_context(menu, language)

    try:
        reply = complete_json(SYSTEM_PROMPTS[language], user_prompt, config=config)
        recommendations = _recommended_ids(reply.get("recommendations"), {item.id for item in menu})
    except Exception:
        logger.warning("LLM recommendation failed, returning fallback response", exc_info=True)
        return fallback_response(language)

    message = reply.get("message")
    if not isinstance(message, str) or not message.strip():
        message = SUCCESS_MESSAGES[language]

    return ChatResponse(
        message=message,
        recommendations=recommendations,
        confidence=_confidence(reply.get("confidence")),
    )


def surprise(
    request: SurpriseRequest,
    storage: Storage,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> ChatResponse:
    chat_request = ChatRequest(
        message=SURPRISE_MESSAGES[request.language],
        spice_level=request.spice_level,
        flavors=request.flavors,
        language=request.language,
    )
    return recommend(chat_request, storage, config=config)
