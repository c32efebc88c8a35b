"""
Best-effort structure from free-text chef replies.

Model output has no guaranteed format, so everything here is a total
function: any string yields a category and a (possibly empty) list of
recommendations, never an exception.

Fallback policy: when a reply contains no ``Recipe:``/``Recommendation:``
block but is longer than ``FALLBACK_MIN_LENGTH`` characters, exactly one
recommendation is synthesized from its first line and opening text.
"""
from __future__ import annotations

import re

from .models import ChefCategory, Recipe, Recommendation

DESCRIPTION_LIMIT = 200
FALLBACK_TITLE_LIMIT = 50
FALLBACK_MIN_LENGTH = 50
FALLBACK_TITLE = "Chef Recommendation"
ELLIPSIS = "..."

# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

# Checked in order; the first rule with a hit wins. A message about both
# cocktails and cost is a cocktail question.
_CATEGORY_RULES: list[tuple[ChefCategory, tuple[str, ...], tuple[str, ...]]] = [
    (
        ChefCategory.cocktails,
        ("cocktail", "drink", "beverage"),
        ("cocktail", "drink", "beverage"),
    ),
    (
        ChefCategory.efficiency,
        ("efficiency", "cost", "labor"),
        ("efficiency", "optimize", "cost", "labor"),
    ),
    (
        ChefCategory.flavor_pairing,
        ("flavor", "pairing", "ingredient"),
        ("flavor", "pair"),
    ),
]


def categorize_response(user_message: str, response: str) -> ChefCategory:
    message = user_message.lower()
    response_text = response.lower()

    for category, message_keywords, response_keywords in _CATEGORY_RULES:
        if any(k in message for k in message_keywords) or any(
            k in response_text for k in response_keywords
        ):
            return category
    return ChefCategory.menu


# ---------------------------------------------------------------------------
# Recommendation extraction
# ---------------------------------------------------------------------------

_MARKER = r"(?:Recipe|Recommendation):\s*\*\*"

_BLOCK_RE = re.compile(
    _MARKER + r"([^*]+)\*\*\s*(.*?)(?=" + _MARKER + r"|\Z)",
    re.IGNORECASE | re.DOTALL,
)

_INGREDIENTS_LABEL = r"Ingredients?:"
_INSTRUCTIONS_LABEL = r"(?:Instructions?|Method|Directions?):"

# A section ends only where the other label opens a line, so prose such as
# "mix the dry ingredients: flour" stays inside the step.
_INGREDIENTS_RE = re.compile(
    _INGREDIENTS_LABEL + r"(.*?)(?=^[ \t]*" + _INSTRUCTIONS_LABEL + r"|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
_INSTRUCTIONS_RE = re.compile(
    _INSTRUCTIONS_LABEL + r"(.*?)(?=^[ \t]*" + _INGREDIENTS_LABEL + r"|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)

# A single bullet, but not the start of **bold** text.
_BULLET_RE = re.compile(r"^(?:[-•]|\*(?!\*))\s*")
# Optional bullet, then an optional "1." / "2)" numeral followed by a space.
_STEP_RE = re.compile(r"^(?:[-•]\s*|\*(?!\*)\s*)?(?:\d+[.)](?=\s|$)\s*)?")

_EMPHASIS_RE = re.compile(r"[*#]")


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def _split_section(section: str, marker_re: re.Pattern[str]) -> list[str]:
    items: list[str] = []
    for line in section.splitlines():
        item = marker_re.sub("", line.strip(), count=1).strip()
        if item:
            items.append(item)
    return items


def parse_recipe(body: str) -> Recipe | None:
    """Pull ingredient and instruction lists out of a recommendation body."""
    ingredients_match = _INGREDIENTS_RE.search(body)
    instructions_match = _INSTRUCTIONS_RE.search(body)
    if not ingredients_match and not instructions_match:
        return None

    recipe = Recipe()
    if ingredients_match:
        recipe.ingredients = _split_section(ingredients_match.group(1), _BULLET_RE)
    if instructions_match:
        recipe.instructions = _split_section(instructions_match.group(1), _STEP_RE)
    return recipe


def _fallback_recommendation(content: str) -> Recommendation:
    first_line = content.split("\n", 1)[0]
    title = _EMPHASIS_RE.sub("", first_line).strip()[:FALLBACK_TITLE_LIMIT]
    return Recommendation(
        title=title or FALLBACK_TITLE,
        description=truncate(content),
    )


def extract_recommendations(content: str) -> list[Recommendation]:
    recommendations: list[Recommendation] = []

    for match in _BLOCK_RE.finditer(content):
        title = match.group(1).strip()
        body = match.group(2).strip()
        recommendations.append(Recommendation(
            title=title,
            description=truncate(body),
            recipe=parse_recipe(body),
        ))

    if not recommendations and len(content) > FALLBACK_MIN_LENGTH:
        recommendations.append(_fallback_recommendation(content))

    return recommendations
