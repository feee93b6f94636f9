import json
from unittest.mock import MagicMock, patch

import pytest

from chefbot.llm.config import LLMConfig
from chefbot.llm.groq_client import LLMUnavailableError, complete_json

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)
NO_KEY_CONFIG = LLMConfig(api_key="", enabled=True)


def _mock_groq_response(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_returns_object(mock_groq_cls):
    payload = {"message": "Try the curry", "recommendations": ["menu-2"], "confidence": 0.9}
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(json.dumps(payload))

    result = complete_json("system", "user", config=ENABLED_CONFIG)

    assert result == payload


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_sends_json_mode_request(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("{}")

    complete_json("be a chef", "what should I eat", config=ENABLED_CONFIG)

    mock_groq_cls.assert_called_once_with(api_key="test-key", timeout=ENABLED_CONFIG.timeout)
    kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == ENABLED_CONFIG.model
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["max_tokens"] == 1000
    assert kwargs["temperature"] == 0.7
    assert kwargs["messages"] == [
        {"role": "system", "content": "be a chef"},
        {"role": "user", "content": "what should I eat"},
    ]


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_empty_content_is_empty_object(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(None)

    assert complete_json("s", "u", config=ENABLED_CONFIG) == {}


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_raises_on_bad_json(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("not valid json{{{")

    with pytest.raises(ValueError):
        complete_json("s", "u", config=ENABLED_CONFIG)


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_raises_on_non_object(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response('["menu-1"]')

    with pytest.raises(ValueError):
        complete_json("s", "u", config=ENABLED_CONFIG)


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_propagates_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    with pytest.raises(Exception, match="API timeout"):
        complete_json("s", "u", config=ENABLED_CONFIG)


@patch("chefbot.llm.groq_client.Groq")
def test_complete_json_disabled(mock_groq_cls):
    with pytest.raises(LLMUnavailableError):
        complete_json("s", "u", config=DISABLED_CONFIG)
    mock_groq_cls.assert_not_called()


def test_complete_json_without_api_key():
    with pytest.raises(LLMUnavailableError):
        complete_json("s", "u", config=NO_KEY_CONFIG)
