from __future__ import annotations

from typing import Any, Callable

from .models import ResponseLength, RestaurantProfile

# ---------------------------------------------------------------------------
# System prompt
# ---------------------------------------------------------------------------

PERSONA = (
    "You are an expert chef consultant specializing in restaurant operations "
    "and culinary development. You have decades of experience in menu "
    "development, flavor pairing, kitchen efficiency, and restaurant management."
)

EXPERTISE_GUIDELINES = """\
EXPERTISE GUIDELINES:
Provide expert culinary advice that is:
1. **Highly Tailored**: Address the specific restaurant profile, constraints, and goals
2. **Financially Focused**: Consider profit margins, food costs, and pricing strategy
3. **Operationally Practical**: Match kitchen capabilities, staff skills, and prep limitations
4. **Market-Aware**: Reflect local ingredients, competition, and target demographic
5. **Challenge-Specific**: Address identified operational challenges and business priorities
6. **Scalable**: Suitable for the restaurant's size, capacity, and growth goals

Always provide specific, actionable recommendations with estimated costs, prep \
times, and implementation steps. Consider seasonal availability, dietary \
restrictions, and equipment limitations. Focus on maximizing profitability \
while maintaining quality and operational efficiency.

When you suggest a dish or drink, start it with a line of the form \
"Recipe: **<name>**" followed by "Ingredients:" and "Instructions:" sections."""


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _number(value: float) -> str:
    # Whole floats drop ".0"; everything else keeps its full precision.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _money(value: float) -> str:
    return f"${_number(value)}"


def _percent(value: float) -> str:
    return f"{_number(value)}%"


def _items(value: int) -> str:
    return f"{value} items"


# (heading, [(label, attribute, formatter)]). Formatters receive a present
# value; list attributes are comma-joined.
_OPTIONAL_SECTIONS: list[tuple[str, list[tuple[str, str, Callable[[Any], str] | None]]]] = [
    ("Business Context", [
        ("Type", "establishment_type", None),
        ("Service Style", "service_style", None),
        ("Target Customers", "target_demographic", None),
        ("Average Ticket", "average_ticket_price", _money),
        ("Seating Capacity", "dining_capacity", None),
        ("Hours", "operating_hours", None),
    ]),
    ("Location & Market", [
        ("Location", "location", None),
        ("Market Type", "market_type", None),
        ("Local Ingredients", "local_ingredients", None),
        ("Cultural Influences", "cultural_influences", None),
    ]),
    ("Kitchen & Operations", [
        ("Kitchen Size", "kitchen_size", None),
        ("Prep Space", "prep_space", None),
        ("Storage", "storage_capacity", None),
        ("Delivery Available", "delivery_capability", _yes_no),
        ("Equipment Available", "kitchen_equipment", None),
    ]),
    ("Staff & Skills", [
        ("Chef Experience", "chef_experience", None),
        ("Staff Skill Level", "staff_skill_level", None),
        ("Labor Budget", "labor_budget", None),
        ("Specialized Roles", "specialized_roles", None),
    ]),
    ("Business Goals & Constraints", [
        ("Current Menu Size", "current_menu_size", _items),
        ("Menu Changes", "menu_change_frequency", None),
        ("Target Profit Margin", "profit_margin_goals", _percent),
        ("Target Food Cost", "food_cost_goals", _percent),
        ("Price Position", "price_position", None),
        ("Dietary Accommodations", "special_dietary_needs", None),
    ]),
    ("Market Position", [
        ("Unique Selling Points", "unique_selling_points", None),
        ("Main Competitors", "primary_competitors", None),
    ]),
    ("Current Challenges & Priorities", [
        ("Operational Challenges", "current_challenges", None),
        ("Business Priorities", "business_priorities", None),
        ("Seasonal Factors", "seasonal_considerations", None),
    ]),
]


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return value != 0


def _format_value(value: Any, formatter: Callable[[Any], str] | None) -> str:
    if formatter is not None:
        return formatter(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def describe_profile(profile: RestaurantProfile) -> str:
    """
    Render a restaurant profile as the ``RESTAURANT PROFILE`` block.

    The five basic lines are always present. Every optional attribute adds
    one line only when it carries a value, and a section heading is written
    only when at least one of its lines is.
    """
    categories = ", ".join(profile.categories) if profile.categories else "not specified"

    lines = [
        "RESTAURANT PROFILE:",
        "## Basic Information",
        f"- Name: {profile.name}",
        f"- Theme & Concept: {profile.theme}",
        f"- Categories: {categories}",
        f"- Kitchen Capability: {profile.kitchen_capability}",
        f"- Staff Size: {profile.staff_size}",
    ]

    for heading, fields in _OPTIONAL_SECTIONS:
        section: list[str] = []
        for label, attr, formatter in fields:
            value = getattr(profile, attr)
            if _is_present(value):
                section.append(f"- {label}: {_format_value(value, formatter)}")
        if section:
            lines.append("")
            lines.append(f"## {heading}")
            lines.extend(section)

    if _is_present(profile.additional_context):
        lines.append("")
        lines.append("## Additional Notes")
        lines.append(profile.additional_context.strip())

    return "\n".join(lines)


def build_system_prompt(profile: RestaurantProfile) -> str:
    """Persona, profile block and expertise guidelines for free-text advice."""
    return "\n".join([PERSONA, "", describe_profile(profile), "", EXPERTISE_GUIDELINES])


# ---------------------------------------------------------------------------
# Response length
# ---------------------------------------------------------------------------

LENGTH_INSTRUCTIONS: dict[ResponseLength, str] = {
    ResponseLength.brief: (
        "IMPORTANT: Provide a brief, concise response. Keep it short and to "
        "the point with only the most essential information."
    ),
    ResponseLength.balanced: (
        "IMPORTANT: Provide a balanced response with moderate detail, covering "
        "key points without being overly brief or lengthy."
    ),
    ResponseLength.detailed: (
        "IMPORTANT: Provide a comprehensive, detailed response with thorough "
        "explanations, examples, and step-by-step guidance."
    ),
}


def apply_length_instruction(
    message: str,
    response_length: ResponseLength | str = ResponseLength.balanced,
) -> str:
    return f"{message}\n\n{LENGTH_INSTRUCTIONS[ResponseLength(response_length)]}"


# ---------------------------------------------------------------------------
# Quick-action prompts
# ---------------------------------------------------------------------------

MENU_SUGGESTIONS_PROMPT = """\
Generate 3-5 innovative menu items that would complement the existing menu \
categories. Focus on items that:
1. Match the restaurant's theme and atmosphere
2. Use produce and proteins the current kitchen staff can prepare efficiently
3. Offer good profit margins
4. Appeal to our target customers while maintaining sophistication
5. Can be easily executed during busy periods

For each suggestion, include the item name, description, key components, \
and brief preparation notes."""

FLAVOR_PAIRINGS_PROMPT = """\
Provide expert flavor pairing recommendations for {ingredient}. Include:
1. Complementary ingredients that work well together
2. Seasoning and herb combinations
3. Cooking techniques that enhance the flavors
4. Wine and non-alcoholic pairings
5. How these pairings can be incorporated into our existing menu categories

Consider our restaurant's style and customer preferences."""

EFFICIENCY_ANALYSIS_PROMPT = """\
Analyze our restaurant operations and provide specific recommendations to:
1. Reduce labor costs while maintaining quality
2. Streamline kitchen prep processes
3. Optimize inventory management
4. Improve food cost percentages
5. Enhance staff productivity and workflow

Provide concrete, implementable solutions with estimated cost savings where \
possible."""

SIGNATURE_COCKTAILS_PROMPT = """\
Create 2-3 signature cocktail recipes that:
1. Reflect our restaurant's {theme} theme and atmosphere
2. Pair well with the dishes in our menu categories
3. Use ingredients that are cost-effective and readily available
4. Can be prepared quickly by bartenders of varying skill levels
5. Appeal to our clientele while offering sophistication

Include full recipes with measurements, garnishes, and presentation suggestions."""
