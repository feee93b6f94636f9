from __future__ import annotations

import json
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig


class LLMUnavailableError(RuntimeError):
    """Raised when the LLM is disabled or has no API key configured."""


def complete_json(
    system_prompt: str,
    user_prompt: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> dict[str, Any]:
    """
    Issue one chat-completion call and decode the reply as a JSON object.

    Raises on any failure (disabled config, API error, non-JSON or non-object
    content). Callers own the fallback behaviour.
    """
    if not config.enabled or not config.api_key:
        raise LLMUnavailableError("Groq LLM is disabled or GROQ_API_KEY is not set")

    client = Groq(api_key=config.api_key, timeout=config.timeout)
    response = client.chat.completions.create(
        model=config.model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        response_format={"type": "json_object"},
    )

    content = response.choices[0].message.content or "{}"
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object from the LLM, got {type(parsed).__name__}")
    return parsed
