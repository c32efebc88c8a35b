from __future__ import annotations

import json
import logging
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)


def create_client(config: LLMConfig = DEFAULT_LLM_CONFIG) -> Groq:
    """Build a Groq client with a bounded timeout and no automatic retries."""
    return Groq(
        api_key=config.api_key,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )


def complete_chat(
    client: Any,
    messages: list[dict[str, str]],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """
    Send one chat completion request and return the reply text.

    Errors from the client propagate unchanged; an empty reply is returned
    as an empty string so the caller decides how to treat it.
    """
    response = client.chat.completions.create(
        model=config.model,
        messages=messages,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )
    content = response.choices[0].message.content or ""
    logger.debug("Groq reply received (%d chars)", len(content))
    return content


def complete_json(
    client: Any,
    messages: list[dict[str, str]],
    config: LLMConfig = DEFAULT_LLM_CONFIG,
    *,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> dict[str, Any]:
    """
    Send one chat completion request in JSON mode and decode the reply.

    Raises ``ValueError`` when the reply is not a JSON object; client errors
    propagate unchanged.
    """
    response = client.chat.completions.create(
        model=config.model,
        messages=messages,
        max_tokens=max_tokens if max_tokens is not None else config.max_tokens,
        temperature=temperature if temperature is not None else config.temperature,
        response_format={"type": "json_object"},
    )
    content = response.choices[0].message.content or "{}"
    logger.debug("Groq JSON reply received (%d chars)", len(content))
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError("expected a JSON object from the model")
    return parsed
