from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResponseLength(str, Enum):
    brief = "brief"
    balanced = "balanced"
    detailed = "detailed"


class ChefCategory(str, Enum):
    menu = "menu"
    efficiency = "efficiency"
    cocktails = "cocktails"
    flavor_pairing = "flavor-pairing"


class RestaurantProfile(BaseModel):
    # Basic information
    name: str = Field(..., min_length=1)
    theme: str = Field(..., min_length=1)
    categories: list[str] = Field(default_factory=list)
    kitchen_capability: str = "intermediate"
    staff_size: int = Field(default=5, ge=0)
    additional_context: str | None = None

    # Business context
    establishment_type: str | None = None
    service_style: str | None = None
    target_demographic: str | None = None
    average_ticket_price: float | None = None
    dining_capacity: int | None = None
    operating_hours: str | None = None

    # Location & market
    location: str | None = None
    market_type: str | None = None
    local_ingredients: list[str] = Field(default_factory=list)
    cultural_influences: list[str] = Field(default_factory=list)

    # Kitchen & operations
    kitchen_size: str | None = None
    kitchen_equipment: list[str] = Field(default_factory=list)
    prep_space: str | None = None
    storage_capacity: str | None = None
    delivery_capability: bool | None = None

    # Staff & skills
    chef_experience: str | None = None
    staff_skill_level: str | None = None
    specialized_roles: list[str] = Field(default_factory=list)
    labor_budget: str | None = None

    # Menu & business goals
    current_menu_size: int | None = None
    menu_change_frequency: str | None = None
    profit_margin_goals: float | None = None
    food_cost_goals: float | None = None
    special_dietary_needs: list[str] = Field(default_factory=list)

    # Competition & positioning
    primary_competitors: list[str] = Field(default_factory=list)
    unique_selling_points: list[str] = Field(default_factory=list)
    price_position: str | None = None

    # Challenges & priorities
    current_challenges: list[str] = Field(default_factory=list)
    business_priorities: list[str] = Field(default_factory=list)
    seasonal_considerations: str | None = None


class ConversationTurn(BaseModel):
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class Recipe(BaseModel):
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    title: str
    description: str
    recipe: Recipe | None = None


class ChefResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    category: ChefCategory
    recommendations: list[Recommendation] = Field(default_factory=list)


# ── Structured generation ────────────────────────────────────────────────


class PricePoint(str, Enum):
    budget = "budget"
    mid_range = "mid-range"
    premium = "premium"


class CocktailComplexity(str, Enum):
    simple = "simple"
    moderate = "moderate"
    advanced = "advanced"


class MenuEntry(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = "Uncategorized"


class MenuGenerationOptions(BaseModel):
    specific_requests: str | None = None
    dietary_restrictions: list[str] = Field(default_factory=list)
    target_price_point: PricePoint | None = None
    seasonal_focus: str | None = None
    focus_category: str | None = None
    current_menu: list[MenuEntry] = Field(default_factory=list)


class CocktailGenerationOptions(BaseModel):
    theme: str | None = None
    base_spirits: list[str] = Field(default_factory=list)
    complexity: CocktailComplexity | None = None
    batchable: bool = False
    seasonality: str | None = None


class DetailedIngredient(BaseModel):
    ingredient: str
    amount: str = ""
    unit: str = ""
    cost: float = 0.0
    notes: str | None = None

    @field_validator("amount", "unit", mode="before")
    @classmethod
    def validate_text(cls, v):
        # Models often write amounts as bare numbers.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class MenuRecipe(BaseModel):
    serves: int = 1
    prep_instructions: list[str] = Field(default_factory=list)
    cooking_instructions: list[str] = Field(default_factory=list)
    plating_instructions: list[str] = Field(default_factory=list)
    techniques: list[str] = Field(default_factory=list)


class GeneratedMenuItem(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str = ""
    ingredients: list[DetailedIngredient] = Field(default_factory=list)
    preparation_time: int = 0  # minutes
    difficulty: str = "medium"
    estimated_cost: float = 0.0
    suggested_price: float = 0.0
    profit_margin: float = 0.0  # percent
    recipe: MenuRecipe | None = None
    allergens: list[str] = Field(default_factory=list)
    wine_pairings: list[str] = Field(default_factory=list)
    upsell_opportunities: list[str] = Field(default_factory=list)


class GeneratedCocktail(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str = "signature"
    ingredients: list[DetailedIngredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    garnish: str = ""
    glassware: str = ""
    estimated_cost: float = 0.0
    suggested_price: float = 0.0
    profit_margin: float = 0.0
    preparation_time: int = 0
    batch_instructions: list[str] = Field(default_factory=list)
    batch_yield: int | None = None


class PairingDish(BaseModel):
    """The part of a menu item a pairing needs; extra keys are ignored."""

    name: str = Field(..., min_length=1)
    description: str = ""


class MenuCocktailPairing(BaseModel):
    menu_item: str
    cocktail: GeneratedCocktail
