from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..chef.models import (
    ChefCategory,
    CocktailGenerationOptions,
    GeneratedCocktail,
    GeneratedMenuItem,
    MenuCocktailPairing,
    MenuGenerationOptions,
    PairingDish,
    Recipe,
    ResponseLength,
    RestaurantProfile,
)


class Restaurant(RestaurantProfile):
    id: int
    owner: str
    created_at: datetime


class RestaurantUpdate(BaseModel):
    """Partial update: only fields sent by the client are applied."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    theme: str | None = Field(default=None, min_length=1)
    categories: list[str] | None = None
    kitchen_capability: str | None = None
    staff_size: int | None = Field(default=None, ge=0)
    additional_context: str | None = None
    establishment_type: str | None = None
    service_style: str | None = None
    target_demographic: str | None = None
    average_ticket_price: float | None = None
    dining_capacity: int | None = None
    operating_hours: str | None = None
    location: str | None = None
    market_type: str | None = None
    local_ingredients: list[str] | None = None
    cultural_influences: list[str] | None = None
    kitchen_size: str | None = None
    kitchen_equipment: list[str] | None = None
    prep_space: str | None = None
    storage_capacity: str | None = None
    delivery_capability: bool | None = None
    chef_experience: str | None = None
    staff_skill_level: str | None = None
    specialized_roles: list[str] | None = None
    labor_budget: str | None = None
    current_menu_size: int | None = None
    menu_change_frequency: str | None = None
    profit_margin_goals: float | None = None
    food_cost_goals: float | None = None
    special_dietary_needs: list[str] | None = None
    primary_competitors: list[str] | None = None
    unique_selling_points: list[str] | None = None
    price_position: str | None = None
    current_challenges: list[str] | None = None
    business_priorities: list[str] | None = None
    seasonal_considerations: str | None = None


class ConversationCreate(BaseModel):
    restaurant_id: int
    title: str = Field(..., min_length=1, max_length=200)


class Conversation(ConversationCreate):
    id: int
    created_at: datetime


class Message(BaseModel):
    id: int
    conversation_id: int
    role: str
    content: str
    category: ChefCategory | None = None
    created_at: datetime


class SavedRecommendation(BaseModel):
    id: int
    restaurant_id: int
    message_id: int | None = None
    title: str
    description: str
    category: str
    recipe: Recipe | None = None
    implemented: bool = False
    created_at: datetime


class RecommendationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    recipe: Recipe | None = None
    implemented: bool | None = None


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    restaurant_id: int
    conversation_id: int | None = None
    response_length: ResponseLength = ResponseLength.balanced


class ChatResult(BaseModel):
    conversation_id: int
    user_message: Message
    assistant_message: Message
    recommendations: list[SavedRecommendation]


class QuickActionRequest(BaseModel):
    restaurant_id: int
    ingredient: str | None = None


class QuickActionResult(BaseModel):
    content: str
    category: ChefCategory
    saved_recommendations: list[SavedRecommendation]


class MenuGenerationRequest(MenuGenerationOptions):
    restaurant_id: int


class MenuGenerationResult(BaseModel):
    menu_items: list[GeneratedMenuItem]


class CocktailGenerationRequest(CocktailGenerationOptions):
    restaurant_id: int


class CocktailGenerationResult(BaseModel):
    cocktails: list[GeneratedCocktail]


class PairingRequest(BaseModel):
    restaurant_id: int
    menu_items: list[PairingDish] = Field(..., min_length=1)


class PairingResult(BaseModel):
    pairings: list[MenuCocktailPairing]
