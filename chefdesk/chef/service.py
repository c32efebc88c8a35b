from __future__ import annotations

import logging
from typing import Any, Iterable

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete_chat, create_client
from .errors import GenerationError
from .models import ChefResponse, ConversationTurn, ResponseLength, RestaurantProfile
from .parsing import categorize_response, extract_recommendations
from .prompts import (
    EFFICIENCY_ANALYSIS_PROMPT,
    FLAVOR_PAIRINGS_PROMPT,
    MENU_SUGGESTIONS_PROMPT,
    SIGNATURE_COCKTAILS_PROMPT,
    apply_length_instruction,
    build_system_prompt,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_TURNS = 10


class ChefService:
    """
    Expert chef advice for one restaurant profile at a time.

    The LLM client is passed in so tests can hand over a double; any object
    exposing ``chat.completions.create`` works. Each call makes exactly one
    completion request and either returns a full ``ChefResponse`` or raises
    ``GenerationError``.
    """

    def __init__(self, client: Any, config: LLMConfig = DEFAULT_LLM_CONFIG) -> None:
        self.client = client
        self.config = config

    @classmethod
    def from_config(cls, config: LLMConfig = DEFAULT_LLM_CONFIG) -> "ChefService":
        return cls(create_client(config), config)

    def _build_messages(
        self,
        user_message: str,
        profile: RestaurantProfile,
        history: Iterable[ConversationTurn | dict],
        response_length: ResponseLength | str,
    ) -> list[dict[str, str]]:
        turns = [
            t if isinstance(t, ConversationTurn) else ConversationTurn(**t)
            for t in history
        ][-MAX_HISTORY_TURNS:]

        messages = [{"role": "system", "content": build_system_prompt(profile)}]
        messages.extend({"role": t.role, "content": t.content} for t in turns)
        messages.append({
            "role": "user",
            "content": apply_length_instruction(user_message, response_length),
        })
        return messages

    def get_advice(
        self,
        user_message: str,
        profile: RestaurantProfile,
        history: Iterable[ConversationTurn | dict] = (),
        response_length: ResponseLength | str = ResponseLength.balanced,
    ) -> ChefResponse:
        if not self.config.enabled or not self.config.api_key:
            raise GenerationError("LLM is not configured")

        messages = self._build_messages(user_message, profile, history, response_length)

        try:
            content = complete_chat(self.client, messages, self.config)
        except Exception as exc:
            logger.warning("Chef advice request failed", exc_info=True)
            raise GenerationError(str(exc)) from exc

        if not content.strip():
            logger.warning("Chef advice request returned no content")
            raise GenerationError("empty response from model")

        return ChefResponse(
            content=content,
            category=categorize_response(user_message, content),
            recommendations=extract_recommendations(content),
        )

    # ── Quick actions ────────────────────────────────────────────────────

    def generate_menu_suggestions(self, profile: RestaurantProfile) -> ChefResponse:
        return self.get_advice(MENU_SUGGESTIONS_PROMPT, profile)

    def generate_flavor_pairings(
        self, ingredient: str, profile: RestaurantProfile
    ) -> ChefResponse:
        return self.get_advice(FLAVOR_PAIRINGS_PROMPT.format(ingredient=ingredient), profile)

    def analyze_operational_efficiency(self, profile: RestaurantProfile) -> ChefResponse:
        return self.get_advice(EFFICIENCY_ANALYSIS_PROMPT, profile)

    def create_signature_cocktails(self, profile: RestaurantProfile) -> ChefResponse:
        return self.get_advice(SIGNATURE_COCKTAILS_PROMPT.format(theme=profile.theme), profile)
