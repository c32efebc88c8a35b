from __future__ import annotations

import logging
import os
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_user
from .auth.models import LoginRequest, RegisterRequest
from .auth.users import UsernameTakenError, authenticate, register
from .chef.errors import GenerationError
from .chef.generator import MenuGenerator
from .chef.models import ChefResponse, RestaurantProfile
from .chef.service import ChefService
from .restaurants import store
from .restaurants.models import (
    ChatRequest,
    ChatResult,
    CocktailGenerationRequest,
    CocktailGenerationResult,
    Conversation,
    ConversationCreate,
    Message,
    MenuGenerationRequest,
    MenuGenerationResult,
    PairingRequest,
    PairingResult,
    QuickActionRequest,
    QuickActionResult,
    Restaurant,
    RestaurantUpdate,
    RecommendationUpdate,
    SavedRecommendation,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="ChefDesk API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "chefdesk-secret-change-in-production"),
    max_age=60 * 60 * 24 * 7,  # 1 week
)


@lru_cache(maxsize=1)
def get_chef_service() -> ChefService:
    return ChefService.from_config()


@lru_cache(maxsize=1)
def get_menu_generator() -> MenuGenerator:
    return MenuGenerator.from_config()


@app.exception_handler(GenerationError)
def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    return JSONResponse(
        status_code=502,
        content={"detail": f"Failed to get chef advice: {exc}"},
    )


def _owned_restaurant(restaurant_id: int, user: dict) -> Restaurant:
    restaurant = store.get_restaurant(restaurant_id)
    if restaurant is None or restaurant.owner != user["username"]:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


def _owned_conversation(conversation_id: int, user: dict) -> Conversation:
    conversation = store.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    _owned_restaurant(conversation.restaurant_id, user)
    return conversation


def _profile(restaurant: Restaurant) -> RestaurantProfile:
    return RestaurantProfile.model_validate(
        restaurant.model_dump(exclude={"id", "owner", "created_at"})
    )


def _conversation_title(message: str) -> str:
    return message[:50] + ("..." if len(message) > 50 else "")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/register")
def register_user(body: RegisterRequest, request: Request) -> dict:
    try:
        user = register(body.username, body.password)
    except UsernameTakenError:
        raise HTTPException(status_code=409, detail="Username already exists")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Restaurants ──────────────────────────────────────────────────────────


@app.post("/api/restaurants", response_model=Restaurant)
def create_restaurant(
    body: RestaurantProfile,
    user: dict = Depends(require_user),
) -> Restaurant:
    return store.create_restaurant(body, owner=user["username"])


@app.get("/api/restaurants", response_model=list[Restaurant])
def list_restaurants(user: dict = Depends(require_user)) -> list[Restaurant]:
    return store.list_restaurants(user["username"])


@app.get("/api/restaurants/{restaurant_id}", response_model=Restaurant)
def get_restaurant(restaurant_id: int, user: dict = Depends(require_user)) -> Restaurant:
    return _owned_restaurant(restaurant_id, user)


@app.api_route("/api/restaurants/{restaurant_id}", methods=["PUT", "PATCH"], response_model=Restaurant)
def update_restaurant(
    restaurant_id: int,
    body: RestaurantUpdate,
    user: dict = Depends(require_user),
) -> Restaurant:
    _owned_restaurant(restaurant_id, user)
    try:
        return store.update_restaurant(restaurant_id, body.model_dump(exclude_unset=True))
    except ValidationError:
        raise HTTPException(status_code=422, detail="Invalid update data")


@app.delete("/api/restaurants/{restaurant_id}")
def delete_restaurant(restaurant_id: int, user: dict = Depends(require_user)) -> dict:
    _owned_restaurant(restaurant_id, user)
    store.delete_restaurant(restaurant_id)
    return {"success": True}


# ── Conversations ────────────────────────────────────────────────────────


@app.post("/api/conversations", response_model=Conversation)
def create_conversation(
    body: ConversationCreate,
    user: dict = Depends(require_user),
) -> Conversation:
    _owned_restaurant(body.restaurant_id, user)
    return store.create_conversation(body.restaurant_id, body.title)


@app.get("/api/restaurants/{restaurant_id}/conversations", response_model=list[Conversation])
def list_conversations(
    restaurant_id: int,
    user: dict = Depends(require_user),
) -> list[Conversation]:
    _owned_restaurant(restaurant_id, user)
    return store.list_conversations(restaurant_id)


@app.get("/api/conversations/{conversation_id}/messages", response_model=list[Message])
def list_messages(conversation_id: int, user: dict = Depends(require_user)) -> list[Message]:
    _owned_conversation(conversation_id, user)
    return store.list_messages(conversation_id)


@app.delete("/api/conversations/{conversation_id}")
def delete_conversation(conversation_id: int, user: dict = Depends(require_user)) -> dict:
    _owned_conversation(conversation_id, user)
    store.delete_conversation(conversation_id)
    return {"success": True}


# ── Chat endpoint ────────────────────────────────────────────────────────


@app.post("/api/chat", response_model=ChatResult)
def chat(
    body: ChatRequest,
    user: dict = Depends(require_user),
    chef: ChefService = Depends(get_chef_service),
) -> ChatResult:
    # 1. Resolve restaurant and conversation
    restaurant = _owned_restaurant(body.restaurant_id, user)
    if body.conversation_id is not None:
        conversation = _owned_conversation(body.conversation_id, user)
        if conversation.restaurant_id != restaurant.id:
            raise HTTPException(status_code=400, detail="Conversation belongs to another restaurant")
    else:
        conversation = store.create_conversation(restaurant.id, _conversation_title(body.message))

    # 2. History is read before the new user message is stored
    history = [
        {"role": m.role, "content": m.content}
        for m in store.list_messages(conversation.id)
    ]
    user_message = store.create_message(conversation.id, "user", body.message)

    # 3. Ask the chef; GenerationError becomes a 502
    advice = chef.get_advice(body.message, _profile(restaurant), history, body.response_length)

    # 4. Persist the reply and its recommendations
    assistant_message = store.create_message(
        conversation.id, "assistant", advice.content, advice.category,
    )
    saved = [
        store.save_recommendation(
            restaurant.id, rec, advice.category.value, message_id=assistant_message.id,
        )
        for rec in advice.recommendations
    ]
    logger.info(
        "Chat reply for restaurant %s: category=%s recommendations=%d",
        restaurant.id, advice.category.value, len(saved),
    )

    return ChatResult(
        conversation_id=conversation.id,
        user_message=user_message,
        assistant_message=assistant_message,
        recommendations=saved,
    )


# ── Quick actions ────────────────────────────────────────────────────────


def _save_quick_action(restaurant: Restaurant, response: ChefResponse) -> QuickActionResult:
    saved = [
        store.save_recommendation(restaurant.id, rec, response.category.value)
        for rec in response.recommendations
    ]
    logger.info(
        "Quick action for restaurant %s: category=%s recommendations=%d",
        restaurant.id, response.category.value, len(saved),
    )
    return QuickActionResult(
        content=response.content,
        category=response.category,
        saved_recommendations=saved,
    )


@app.post("/api/quick-actions/menu-suggestions", response_model=QuickActionResult)
def menu_suggestions(
    body: QuickActionRequest,
    user: dict = Depends(require_user),
    chef: ChefService = Depends(get_chef_service),
) -> QuickActionResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    return _save_quick_action(restaurant, chef.generate_menu_suggestions(_profile(restaurant)))


@app.post("/api/quick-actions/flavor-pairing", response_model=QuickActionResult)
def flavor_pairing(
    body: QuickActionRequest,
    user: dict = Depends(require_user),
    chef: ChefService = Depends(get_chef_service),
) -> QuickActionResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    ingredient = body.ingredient or "beef"
    return _save_quick_action(
        restaurant, chef.generate_flavor_pairings(ingredient, _profile(restaurant)),
    )


@app.post("/api/quick-actions/efficiency-analysis", response_model=QuickActionResult)
def efficiency_analysis(
    body: QuickActionRequest,
    user: dict = Depends(require_user),
    chef: ChefService = Depends(get_chef_service),
) -> QuickActionResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    return _save_quick_action(
        restaurant, chef.analyze_operational_efficiency(_profile(restaurant)),
    )


@app.post("/api/quick-actions/cocktail-creation", response_model=QuickActionResult)
def cocktail_creation(
    body: QuickActionRequest,
    user: dict = Depends(require_user),
    chef: ChefService = Depends(get_chef_service),
) -> QuickActionResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    return _save_quick_action(
        restaurant, chef.create_signature_cocktails(_profile(restaurant)),
    )


# ── Structured generation ────────────────────────────────────────────────


@app.post("/api/generate/menu-items", response_model=MenuGenerationResult)
def generate_menu_items(
    body: MenuGenerationRequest,
    user: dict = Depends(require_user),
    generator: MenuGenerator = Depends(get_menu_generator),
) -> MenuGenerationResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    try:
        items = generator.generate_menu_items(_profile(restaurant), body)
    except GenerationError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to generate menu items: {exc}")
    return MenuGenerationResult(menu_items=items)


@app.post("/api/generate/cocktails", response_model=CocktailGenerationResult)
def generate_cocktails(
    body: CocktailGenerationRequest,
    user: dict = Depends(require_user),
    generator: MenuGenerator = Depends(get_menu_generator),
) -> CocktailGenerationResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    try:
        cocktails = generator.generate_cocktails(_profile(restaurant), body)
    except GenerationError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to generate cocktails: {exc}")
    return CocktailGenerationResult(cocktails=cocktails)


@app.post("/api/generate/paired-menu-cocktails", response_model=PairingResult)
def generate_paired_cocktails(
    body: PairingRequest,
    user: dict = Depends(require_user),
    generator: MenuGenerator = Depends(get_menu_generator),
) -> PairingResult:
    restaurant = _owned_restaurant(body.restaurant_id, user)
    try:
        pairings = generator.generate_pairings(_profile(restaurant), body.menu_items)
    except GenerationError as exc:
        raise HTTPException(
            status_code=502, detail=f"Failed to generate menu-cocktail pairings: {exc}",
        )
    return PairingResult(pairings=pairings)


# ── Recommendations ──────────────────────────────────────────────────────


@app.get(
    "/api/restaurants/{restaurant_id}/recommendations",
    response_model=list[SavedRecommendation],
)
def list_recommendations(
    restaurant_id: int,
    user: dict = Depends(require_user),
) -> list[SavedRecommendation]:
    _owned_restaurant(restaurant_id, user)
    return store.list_recommendations(restaurant_id)


@app.put("/api/recommendations/{recommendation_id}", response_model=SavedRecommendation)
def update_recommendation(
    recommendation_id: int,
    body: RecommendationUpdate,
    user: dict = Depends(require_user),
) -> SavedRecommendation:
    current = store.get_recommendation(recommendation_id)
    if current is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    _owned_restaurant(current.restaurant_id, user)
    try:
        return store.update_recommendation(recommendation_id, body.model_dump(exclude_unset=True))
    except ValidationError:
        raise HTTPException(status_code=422, detail="Invalid update data")
