"""
Structured menu and cocktail generation.

Free-text advice goes through ``ChefService``; the calls here ask the model
for a JSON object instead and validate every entry into a pydantic model.
Entries that fail validation are dropped with a warning. A failed call, a
reply that is not JSON, or a reply with no usable entries raises
``GenerationError``; nothing is substituted.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import complete_json, create_client
from .errors import GenerationError
from .models import (
    CocktailGenerationOptions,
    GeneratedCocktail,
    GeneratedMenuItem,
    MenuCocktailPairing,
    MenuEntry,
    MenuGenerationOptions,
    PairingDish,
    PricePoint,
    RestaurantProfile,
)
from .prompts import describe_profile

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_GENERATED_ITEMS = 4

MENU_TEMPERATURE = 0.5
MENU_MAX_TOKENS = 3000
COCKTAIL_TEMPERATURE = 0.6
COCKTAIL_MAX_TOKENS = 2000
PAIRING_TEMPERATURE = 0.7
PAIRING_MAX_TOKENS = 4000

BATCH_SERVINGS = 10

PRICE_POINT_GUIDANCE: dict[PricePoint, str] = {
    PricePoint.budget: "Keep plates affordable with food cost under 28% and simple, high-yield preparations",
    PricePoint.mid_range: "Balance value and craft with food cost around 30% and one standout component per plate",
    PricePoint.premium: "Showcase premium ingredients and refined technique; food cost up to 35% is acceptable",
}

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

MENU_SYSTEM_PROMPT = (
    "You are an expert chef consultant specializing in menu development. "
    "Create innovative, restaurant-specific menu items that align with the "
    "establishment's theme, capabilities, and market positioning.\n\n"
    "Return ONLY valid JSON. No text outside the JSON object."
)

MENU_JSON_FORMAT = """\
JSON format:
{"items": [{
  "name": "Dish name",
  "description": "One or two sentences",
  "category": "entrees",
  "ingredients": [{"ingredient": "name", "amount": "2", "unit": "oz", "cost": 1.5, "notes": "prep notes"}],
  "preparation_time": 25,
  "difficulty": "medium",
  "estimated_cost": 12,
  "suggested_price": 28,
  "profit_margin": 57,
  "recipe": {
    "serves": 1,
    "prep_instructions": ["step"],
    "cooking_instructions": ["step"],
    "plating_instructions": ["step"],
    "techniques": ["technique"]
  },
  "allergens": ["allergen"],
  "wine_pairings": ["wine"],
  "upsell_opportunities": ["upsell"]
}]}"""

COCKTAIL_SYSTEM_PROMPT = (
    "You are an expert mixologist and beverage consultant. Create signature "
    "cocktails that complement the restaurant's theme, atmosphere, and "
    "clientele, each with a compelling one or two sentence description.\n\n"
    "Return ONLY valid JSON. No text outside the JSON object."
)

COCKTAIL_JSON_FORMAT = """\
JSON format:
{"cocktails": [{
  "name": "Cocktail name",
  "description": "One or two sentences on flavor and inspiration",
  "category": "signature",
  "ingredients": [{"ingredient": "spirit", "amount": "2", "unit": "oz", "cost": 3}],
  "instructions": ["step"],
  "garnish": "garnish",
  "glassware": "glass",
  "estimated_cost": 4,
  "suggested_price": 14,
  "profit_margin": 70,
  "preparation_time": 3,
  "batch_instructions": ["step"],
  "batch_yield": 10
}]}"""

PAIRING_SYSTEM_PROMPT = (
    "You are a beverage pairing expert. Create one cocktail designed to "
    "complement each given menu item, in the style of the restaurant below.\n\n"
    "Return ONLY valid JSON in this format:\n"
    '{"pairings": [{"menu_item": "<dish name>", "cocktail": {<cocktail object>}}]}\n'
    "Each cocktail object uses the keys: name, description, category, "
    "ingredients (ingredient, amount, unit, cost), instructions, garnish, "
    "glassware, estimated_cost, suggested_price, profit_margin, "
    "preparation_time."
)


def _current_menu_lines(current_menu: Iterable[MenuEntry]) -> list[str]:
    by_category: dict[str, list[str]] = {}
    for entry in current_menu:
        by_category.setdefault(entry.category, []).append(entry.name)
    if not by_category:
        return []
    lines = ["", "## Current Menu"]
    lines.extend(f"- {category}: {', '.join(names)}" for category, names in by_category.items())
    return lines


def build_menu_prompt(profile: RestaurantProfile, options: MenuGenerationOptions) -> str:
    lines = [
        f'Create {MAX_GENERATED_ITEMS} unique menu items for "{profile.name}".',
        "",
        describe_profile(profile),
    ]
    lines.extend(_current_menu_lines(options.current_menu))

    lines.append("")
    lines.append("## Requirements")
    lines.append(f"- Reflect the {profile.theme} theme in every dish")
    lines.append(f"- Work within the kitchen capability: {profile.kitchen_capability}")
    if options.specific_requests:
        lines.append(f"- Special requests: {options.specific_requests}")
    if options.dietary_restrictions:
        lines.append(f"- Dietary considerations: {', '.join(options.dietary_restrictions)}")
    if options.target_price_point:
        lines.append(f"- Price point: {PRICE_POINT_GUIDANCE[options.target_price_point]}")
    if options.seasonal_focus:
        lines.append(f"- Highlight {options.seasonal_focus} seasonal ingredients")
    if options.focus_category:
        lines.append(f"- Focus on the {options.focus_category} category")
    if options.current_menu:
        lines.append("- Do not repeat dishes already on the current menu")

    lines.append("")
    lines.append(MENU_JSON_FORMAT)
    return "\n".join(lines)


def build_cocktail_prompt(profile: RestaurantProfile, options: CocktailGenerationOptions) -> str:
    lines = [
        f'Create {MAX_GENERATED_ITEMS} signature cocktails for "{profile.name}".',
        "",
        describe_profile(profile),
        "",
        "## Requirements",
        f"- Reflect the {profile.theme} theme in both names and ingredients",
        "- Price to match the restaurant's market position",
    ]
    if options.theme:
        lines.append(f"- Additional theme: {options.theme}")
    if options.base_spirits:
        lines.append(f"- Preferred spirits: {', '.join(options.base_spirits)}")
    if options.complexity:
        lines.append(f"- Keep complexity {options.complexity.value}")
    if options.seasonality:
        lines.append(f"- Seasonal focus: {options.seasonality}")
    if options.batchable:
        lines.append(
            f"- Include batch_instructions and batch_yield for {BATCH_SERVINGS}-cocktail "
            "batches with scaled amounts"
        )

    lines.append("")
    lines.append(COCKTAIL_JSON_FORMAT)
    return "\n".join(lines)


def build_pairing_prompt(dishes: Iterable[PairingDish]) -> str:
    described = "; ".join(
        f"{d.name} ({d.description})" if d.description else d.name for d in dishes
    )
    return f"Create signature cocktails paired with these menu items: {described}"


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


def _validate_entries(entries: list[Any], model: type[ModelT]) -> list[ModelT]:
    valid: list[ModelT] = []
    for entry in entries:
        try:
            valid.append(model.model_validate(entry))
        except ValidationError:
            logger.warning("Dropping malformed %s from model reply", model.__name__, exc_info=True)
    return valid


class MenuGenerator:
    """JSON-mode generation of menu items, cocktails and dish pairings."""

    def __init__(self, client: Any, config: LLMConfig = DEFAULT_LLM_CONFIG) -> None:
        self.client = client
        self.config = config

    @classmethod
    def from_config(cls, config: LLMConfig = DEFAULT_LLM_CONFIG) -> "MenuGenerator":
        return cls(create_client(config), config)

    def _request_entries(
        self,
        system_prompt: str,
        user_prompt: str,
        key: str,
        temperature: float,
        max_tokens: int,
    ) -> list[Any]:
        if not self.config.enabled or not self.config.api_key:
            raise GenerationError("LLM is not configured")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            parsed = complete_json(
                self.client, messages, self.config,
                temperature=temperature, max_tokens=max_tokens,
            )
        except Exception as exc:
            logger.warning("Structured %s request failed", key, exc_info=True)
            raise GenerationError(str(exc)) from exc

        entries = parsed.get(key)
        if not isinstance(entries, list):
            raise GenerationError(f"model reply has no {key} list")
        return entries

    def generate_menu_items(
        self,
        profile: RestaurantProfile,
        options: MenuGenerationOptions | None = None,
    ) -> list[GeneratedMenuItem]:
        options = options or MenuGenerationOptions()
        entries = self._request_entries(
            MENU_SYSTEM_PROMPT, build_menu_prompt(profile, options),
            "items", MENU_TEMPERATURE, MENU_MAX_TOKENS,
        )
        items = _validate_entries(entries, GeneratedMenuItem)[:MAX_GENERATED_ITEMS]
        if not items:
            raise GenerationError("model returned no usable menu items")
        logger.info("Generated %d menu items for %s", len(items), profile.name)
        return items

    def generate_cocktails(
        self,
        profile: RestaurantProfile,
        options: CocktailGenerationOptions | None = None,
    ) -> list[GeneratedCocktail]:
        options = options or CocktailGenerationOptions()
        entries = self._request_entries(
            COCKTAIL_SYSTEM_PROMPT, build_cocktail_prompt(profile, options),
            "cocktails", COCKTAIL_TEMPERATURE, COCKTAIL_MAX_TOKENS,
        )
        cocktails = _validate_entries(entries, GeneratedCocktail)[:MAX_GENERATED_ITEMS]
        if not cocktails:
            raise GenerationError("model returned no usable cocktails")
        logger.info("Generated %d cocktails for %s", len(cocktails), profile.name)
        return cocktails

    def generate_pairings(
        self,
        profile: RestaurantProfile,
        dishes: list[PairingDish],
    ) -> list[MenuCocktailPairing]:
        if not dishes:
            return []
        system_prompt = "\n\n".join([PAIRING_SYSTEM_PROMPT, describe_profile(profile)])
        entries = self._request_entries(
            system_prompt, build_pairing_prompt(dishes),
            "pairings", PAIRING_TEMPERATURE, PAIRING_MAX_TOKENS,
        )
        pairings = _validate_entries(entries, MenuCocktailPairing)
        if not pairings:
            raise GenerationError("model returned no usable pairings")
        logger.info("Generated %d pairings for %s", len(pairings), profile.name)
        return pairings
