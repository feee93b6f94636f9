from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from chefbot.chat.models import ChatRequest, SurpriseRequest
from chefbot.chat.recommender import (
    DEFAULT_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    FALLBACK_MESSAGES,
    SUCCESS_MESSAGES,
    recommend,
    surprise,
)
from chefbot.llm.config import LLMConfig

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)


def _mock_groq_response(payload) -> MagicMock:
    message = MagicMock()
    message.content = payload if isinstance(payload, str) else json.dumps(payload)
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _request(**overrides) -> ChatRequest:
    fields = {"message": "something spicy", "spice_level": 4, "flavors": ["flavor-8"], "language": "en"}
    fields.update(overrides)
    return ChatRequest(**fields)


# ── Reply sanitising ─────────────────────────────────────────────────────


class TestRecommend:
    @patch("chefbot.llm.groq_client.Groq")
    def test_valid_reply(self, mock_groq_cls, storage):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"message": "Try the curry!", "recommendations": ["menu-2", "menu-3"], "confidence": 0.9}
        )

        result = recommend(_request(), storage, config=ENABLED_CONFIG)

        assert result.message == "Try the curry!"
        assert result.recommendations == ["menu-2", "menu-3"]
        assert result.confidence == 0.9

    @patch("chefbot.llm.groq_client.Groq")
    def test_unknown_and_duplicate_ids_are_dropped(self, mock_groq_cls, storage):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"message": "ok", "recommendations": ["menu-3", "ghost", "menu-3", "menu-1"]}
        )

        result = recommend(_request(), storage, config=ENABLED_CONFIG)

        assert result.recommendations == ["menu-3", "menu-1"]

    @patch("chefbot.llm.groq_client.Groq")
    def test_inactive_items_are_not_recommended(self, mock_groq_cls, storage):
        storage.menu_items.delete("menu-2")
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"message": "ok", "recommendations": ["menu-2", "menu-4"]}
        )

        result = recommend(_request(), storage, config=ENABLED_CONFIG)

        assert result.recommendations == ["menu-4"]

    @patch("chefbot.llm.groq_client.Groq")
    def test_confidence_defaults_and_clamps(self, mock_groq_cls, storage):
        create = mock_groq_cls.return_value.chat.completions.create

        create.return_value = _mock_groq_response({"message": "ok", "recommendations": []})
        assert recommend(_request(), storage, config=ENABLED_CONFIG).confidence == DEFAULT_CONFIDENCE

        create.return_value = _mock_groq_response({"message": "ok", "confidence": "very"})
        assert recommend(_request(), storage, config=ENABLED_CONFIG).confidence == DEFAULT_CONFIDENCE

        create.return_value = _mock_groq_response({"message": "ok", "confidence": 3})
        assert recommend(_request(), storage, config=ENABLED_CONFIG).confidence == 1.0

        create.return_value = _mock_groq_response({"message": "ok", "confidence": -0.5})
        assert recommend(_request(), storage, config=ENABLED_CONFIG).confidence == 0.0

    @patch("chefbot.llm.groq_client.Groq")
    def test_blank_message_becomes_localised_success(self, mock_groq_cls, storage):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"message": "  ", "recommendations": ["menu-4"]}
        )

        result = recommend(_request(language="es"), storage, config=ENABLED_CONFIG)

        assert result.message == SUCCESS_MESSAGES["es"]
        assert result.recommendations == ["menu-4"]

    @patch("chefbot.llm.groq_client.Groq")
    def test_prompt_carries_preferences_and_menu(self, mock_groq_cls, storage):
        create = mock_groq_cls.return_value.chat.completions.create
        create.return_value = _mock_groq_response({"message": "ok"})

        recommend(_request(language="es"), storage, config=ENABLED_CONFIG)

        system, user = create.call_args.kwargs["messages"]
        assert "chef AI experto" in system["content"]
        assert "Nivel de picante preferido: 4/5" in user["content"]
        assert "Sabores preferidos: flavor-8" in user["content"]
        assert '"id": "menu-2"' in user["content"]
        assert "Tazón de Curry Tailandés Picante" in user["content"]
        assert '"flavors": ["flavor-6", "flavor-8"]' in user["content"]

    @patch("chefbot.llm.groq_client.Groq")
    def test_preferred_flavors_match_menu_flavor_ids(self, mock_groq_cls, storage):
        create = mock_groq_cls.return_value.chat.completions.create
        create.return_value = _mock_groq_response({"message": "ok"})

        recommend(_request(flavors=["flavor-8", "flavor-5"]), storage, config=ENABLED_CONFIG)

        user = create.call_args.kwargs["messages"][1]["content"]
        preference_line = next(line for line in user.splitlines() if line.startswith("Preferred flavors:"))
        assert preference_line == "Preferred flavors: flavor-8, flavor-5"
        menu = json.loads(user.split("Available menu items: ", 1)[1])
        menu_flavors = {flavor for item in menu for flavor in item["flavors"]}
        assert {"flavor-8", "flavor-5"} <= menu_flavors


# ── Fallback ─────────────────────────────────────────────────────────────


class TestFallback:
    @patch("chefbot.llm.groq_client.Groq")
    def test_api_error(self, mock_groq_cls, storage):
        mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

        result = recommend(_request(), storage, config=ENABLED_CONFIG)

        assert result.message == FALLBACK_MESSAGES["en"]
        assert result.recommendations == []
        assert result.confidence == FALLBACK_CONFIDENCE

    @patch("chefbot.llm.groq_client.Groq")
    def test_unparsable_reply(self, mock_groq_cls, storage):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("not json{{")

        result = recommend(_request(language="es"), storage, config=ENABLED_CONFIG)

        assert result.message == FALLBACK_MESSAGES["es"]
        assert result.confidence == FALLBACK_CONFIDENCE

    @patch("chefbot.llm.groq_client.Groq")
    def test_recommendations_not_a_list(self, mock_groq_cls, storage):
        mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
            {"message": "ok", "recommendations": "menu-1"}
        )

        result = recommend(_request(), storage, config=ENABLED_CONFIG)

        assert result.recommendations == []
        assert result.confidence == FALLBACK_CONFIDENCE

    def test_disabled_llm(self, storage):
        result = recommend(_request(), storage, config=DISABLED_CONFIG)

        assert result.message == FALLBACK_MESSAGES["en"]
        assert result.confidence == FALLBACK_CONFIDENCE


# ── Surprise ─────────────────────────────────────────────────────────────


@patch("chefbot.llm.groq_client.Groq")
def test_surprise_uses_synthesised_message(mock_groq_cls, storage):
    create = mock_groq_cls.return_value.chat.completions.create
    create.return_value = _mock_groq_response({"message": "¡Sorpresa!", "recommendations": ["menu-4"]})

    result = surprise(SurpriseRequest(spice_level=0, language="es"), storage, config=ENABLED_CONFIG)

    assert result.recommendations == ["menu-4"]
    user_prompt = create.call_args.kwargs["messages"][1]["content"]
    assert 'El usuario dice: "Sorpréndeme con algo delicioso"' in user_prompt


# ── Endpoints ────────────────────────────────────────────────────────────


@patch("chefbot.chat.recommender.complete_json")
def test_chat_endpoint(mock_complete, client):
    mock_complete.return_value = {"message": "Curry time", "recommendations": ["menu-2"], "confidence": 0.7}

    resp = client.post("/api/chat", json={"message": "hot please", "spiceLevel": 5, "flavors": [], "language": "en"})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Curry time", "recommendations": ["menu-2"], "confidence": 0.7}


@patch("chefbot.chat.recommender.complete_json")
def test_chat_endpoint_fallback(mock_complete, client):
    mock_complete.side_effect = RuntimeError("boom")

    resp = client.post("/api/chat", json={"message": "anything", "spiceLevel": 2})

    assert resp.status_code == 200
    assert resp.json()["recommendations"] == []
    assert resp.json()["confidence"] == FALLBACK_CONFIDENCE


def test_chat_rejects_out_of_range_spice(client):
    resp = client.post("/api/chat", json={"message": "hi", "spiceLevel": 7})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request data"
    assert resp.json()["errors"]


def test_chat_rejects_empty_message(client):
    resp = client.post("/api/chat", json={"message": "", "spiceLevel": 1})
    assert resp.status_code == 400


def test_chat_rejects_unknown_language(client):
    resp = client.post("/api/chat", json={"message": "hi", "spiceLevel": 1, "language": "fr"})
    assert resp.status_code == 400


@patch("chefbot.chat.recommender.complete_json")
def test_surprise_endpoint(mock_complete, client):
    mock_complete.return_value = {"message": "Dessert!", "recommendations": ["menu-4"], "confidence": 0.6}

    resp = client.post("/api/surprise", json={"spiceLevel": 0, "flavors": ["flavor-1"], "language": "en"})

    assert resp.status_code == 200
    assert resp.json()["recommendations"] == ["menu-4"]
    assert "Surprise me with something delicious" in mock_complete.call_args.args[1]
