from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from chefdesk.chef.errors import GenerationError
from chefdesk.chef.generator import (
    COCKTAIL_TEMPERATURE,
    MAX_GENERATED_ITEMS,
    MENU_MAX_TOKENS,
    MenuGenerator,
    build_cocktail_prompt,
    build_menu_prompt,
)
from chefdesk.chef.models import (
    CocktailComplexity,
    CocktailGenerationOptions,
    MenuEntry,
    MenuGenerationOptions,
    PairingDish,
    PricePoint,
    RestaurantProfile,
)
from chefdesk.llm.config import LLMConfig

PROFILE = RestaurantProfile(
    name="The Depot",
    theme="Railway steakhouse",
    categories=["Steaks", "Seafood"],
    kitchen_capability="advanced",
    staff_size=12,
    location="Denver",
)

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)

RIBEYE = {
    "name": "Switchyard Ribeye",
    "description": "Coal-fired ribeye with smoked bone marrow butter.",
    "category": "entrees",
    "ingredients": [
        {"ingredient": "ribeye", "amount": 14, "unit": "oz", "cost": 11.5},
        {"ingredient": "bone marrow", "amount": "1", "unit": "oz", "cost": 0.8, "notes": "roasted"},
    ],
    "preparation_time": 25,
    "difficulty": "medium",
    "estimated_cost": 13,
    "suggested_price": 46,
    "profit_margin": 72,
    "recipe": {
        "serves": 1,
        "prep_instructions": ["Temper the steak"],
        "cooking_instructions": ["Sear over coals"],
        "plating_instructions": ["Slice against the grain"],
        "techniques": ["live fire"],
    },
    "allergens": ["dairy"],
}

CABOOSE = {
    "name": "Caboose Old Fashioned",
    "description": "Smoked bourbon with maple and orange.",
    "ingredients": [{"ingredient": "bourbon", "amount": "2", "unit": "oz", "cost": 3}],
    "instructions": ["Stir with ice", "Strain over a large cube"],
    "garnish": "orange peel",
    "glassware": "rocks",
    "estimated_cost": 4,
    "suggested_price": 15,
    "profit_margin": 73,
    "preparation_time": 3,
}


def _mock_groq_response(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _generator(payload: dict | str) -> tuple[MenuGenerator, MagicMock]:
    content = payload if isinstance(payload, str) else json.dumps(payload)
    client = MagicMock()
    client.chat.completions.create.return_value = _mock_groq_response(content)
    return MenuGenerator(client, ENABLED_CONFIG), client


def _call_kwargs(client: MagicMock) -> dict:
    return client.chat.completions.create.call_args.kwargs


# ── Prompts ──────────────────────────────────────────────────────────────


class TestMenuPrompt:
    def test_includes_profile_and_json_format(self):
        prompt = build_menu_prompt(PROFILE, MenuGenerationOptions())
        assert "- Name: The Depot" in prompt
        assert "- Location: Denver" in prompt
        assert '"items"' in prompt
        assert "Special requests" not in prompt

    def test_options_add_requirements(self):
        options = MenuGenerationOptions(
            specific_requests="a shareable starter",
            dietary_restrictions=["gluten-free", "vegan"],
            target_price_point=PricePoint.premium,
            seasonal_focus="autumn",
            focus_category="appetizers",
        )
        prompt = build_menu_prompt(PROFILE, options)
        assert "- Special requests: a shareable starter" in prompt
        assert "- Dietary considerations: gluten-free, vegan" in prompt
        assert "premium ingredients" in prompt
        assert "- Highlight autumn seasonal ingredients" in prompt
        assert "- Focus on the appetizers category" in prompt

    def test_current_menu_grouped_by_category(self):
        options = MenuGenerationOptions(current_menu=[
            MenuEntry(name="Filet", category="Steaks"),
            MenuEntry(name="Oysters", category="Seafood"),
            MenuEntry(name="Ribeye", category="Steaks"),
        ])
        prompt = build_menu_prompt(PROFILE, options)
        assert "## Current Menu" in prompt
        assert "- Steaks: Filet, Ribeye" in prompt
        assert "- Seafood: Oysters" in prompt
        assert "Do not repeat dishes" in prompt


class TestCocktailPrompt:
    def test_defaults_use_restaurant_theme(self):
        prompt = build_cocktail_prompt(PROFILE, CocktailGenerationOptions())
        assert "Railway steakhouse theme" in prompt
        assert "batch_yield for" not in prompt

    def test_options_add_requirements(self):
        options = CocktailGenerationOptions(
            theme="speakeasy",
            base_spirits=["rye", "mezcal"],
            complexity=CocktailComplexity.simple,
            batchable=True,
            seasonality="winter",
        )
        prompt = build_cocktail_prompt(PROFILE, options)
        assert "- Additional theme: speakeasy" in prompt
        assert "- Preferred spirits: rye, mezcal" in prompt
        assert "- Keep complexity simple" in prompt
        assert "- Seasonal focus: winter" in prompt
        assert "10-cocktail batches" in prompt


# ── Menu items ───────────────────────────────────────────────────────────


class TestGenerateMenuItems:
    def test_returns_validated_items(self):
        generator, _ = _generator({"items": [RIBEYE]})
        items = generator.generate_menu_items(PROFILE)

        assert len(items) == 1
        item = items[0]
        assert item.name == "Switchyard Ribeye"
        assert item.ingredients[0].amount == "14"
        assert item.ingredients[1].notes == "roasted"
        assert item.recipe.cooking_instructions == ["Sear over coals"]
        assert item.suggested_price == 46
        assert item.wine_pairings == []

    def test_request_uses_json_mode(self):
        generator, client = _generator({"items": [RIBEYE]})
        generator.generate_menu_items(PROFILE)

        kwargs = _call_kwargs(client)
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == MENU_MAX_TOKENS
        assert kwargs["messages"][0]["role"] == "system"
        assert "The Depot" in kwargs["messages"][1]["content"]

    def test_caps_item_count(self):
        entries = [{**RIBEYE, "name": f"Dish {i}"} for i in range(6)]
        generator, _ = _generator({"items": entries})
        items = generator.generate_menu_items(PROFILE)
        assert [i.name for i in items] == [f"Dish {i}" for i in range(MAX_GENERATED_ITEMS)]

    def test_malformed_entries_are_dropped(self):
        generator, _ = _generator({"items": [{"description": "no name"}, "oops", RIBEYE]})
        items = generator.generate_menu_items(PROFILE)
        assert [i.name for i in items] == ["Switchyard Ribeye"]

    def test_no_usable_items_raises(self):
        generator, _ = _generator({"items": [{"description": "no name"}]})
        with pytest.raises(GenerationError):
            generator.generate_menu_items(PROFILE)

    @pytest.mark.parametrize("payload", [{}, {"items": "Ribeye"}, "not json at all"])
    def test_unexpected_reply_raises(self, payload):
        generator, _ = _generator(payload)
        with pytest.raises(GenerationError):
            generator.generate_menu_items(PROFILE)

    def test_api_error_raises_generation_error(self):
        generator, client = _generator({"items": [RIBEYE]})
        client.chat.completions.create.side_effect = Exception("API timeout")
        with pytest.raises(GenerationError, match="API timeout"):
            generator.generate_menu_items(PROFILE)
        assert client.chat.completions.create.call_count == 1

    def test_disabled_raises_without_calling_api(self):
        client = MagicMock()
        generator = MenuGenerator(client, LLMConfig(api_key="test-key", enabled=False))
        with pytest.raises(GenerationError):
            generator.generate_menu_items(PROFILE)
        client.chat.completions.create.assert_not_called()


# ── Cocktails ────────────────────────────────────────────────────────────


class TestGenerateCocktails:
    def test_returns_validated_cocktails(self):
        generator, client = _generator({"cocktails": [CABOOSE]})
        cocktails = generator.generate_cocktails(PROFILE)

        assert cocktails[0].name == "Caboose Old Fashioned"
        assert cocktails[0].category == "signature"
        assert cocktails[0].glassware == "rocks"
        assert cocktails[0].batch_yield is None
        assert _call_kwargs(client)["temperature"] == COCKTAIL_TEMPERATURE

    def test_empty_list_raises(self):
        generator, _ = _generator({"cocktails": []})
        with pytest.raises(GenerationError):
            generator.generate_cocktails(PROFILE)


# ── Pairings ─────────────────────────────────────────────────────────────


class TestGeneratePairings:
    def test_pairs_cocktail_with_dish(self):
        generator, client = _generator(
            {"pairings": [{"menu_item": "Switchyard Ribeye", "cocktail": CABOOSE}]}
        )
        pairings = generator.generate_pairings(
            PROFILE, [PairingDish(name="Switchyard Ribeye", description="Coal-fired ribeye")]
        )

        assert pairings[0].menu_item == "Switchyard Ribeye"
        assert pairings[0].cocktail.name == "Caboose Old Fashioned"
        messages = _call_kwargs(client)["messages"]
        assert "- Name: The Depot" in messages[0]["content"]
        assert messages[1]["content"].endswith("Switchyard Ribeye (Coal-fired ribeye)")

    def test_no_dishes_skips_api(self):
        generator, client = _generator({"pairings": []})
        assert generator.generate_pairings(PROFILE, []) == []
        client.chat.completions.create.assert_not_called()

    def test_pairing_without_cocktail_is_dropped(self):
        generator, _ = _generator({"pairings": [{"menu_item": "Ribeye"}]})
        with pytest.raises(GenerationError):
            generator.generate_pairings(PROFILE, [PairingDish(name="Ribeye")])


@patch("chefdesk.llm.groq_client.Groq")
def test_from_config_builds_client_without_retries(mock_groq_cls):
    generator = MenuGenerator.from_config(ENABLED_CONFIG)
    mock_groq_cls.assert_called_once_with(
        api_key="test-key",
        timeout=ENABLED_CONFIG.timeout,
        max_retries=0,
    )
    assert generator.client is mock_groq_cls.return_value
