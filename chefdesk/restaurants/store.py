from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any

from ..chef.models import ChefCategory, Recommendation, RestaurantProfile
from .models import Conversation, Message, Restaurant, SavedRecommendation

_restaurants: dict[int, Restaurant] = {}
_conversations: dict[int, Conversation] = {}
_messages: dict[int, Message] = {}
_recommendations: dict[int, SavedRecommendation] = {}
_ids = itertools.count(1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ── Restaurants ──────────────────────────────────────────────────────────


def create_restaurant(profile: RestaurantProfile, owner: str) -> Restaurant:
    restaurant = Restaurant(
        **profile.model_dump(), id=next(_ids), owner=owner, created_at=_now(),
    )
    _restaurants[restaurant.id] = restaurant
    return restaurant


def get_restaurant(restaurant_id: int) -> Restaurant | None:
    return _restaurants.get(restaurant_id)


def list_restaurants(owner: str) -> list[Restaurant]:
    return sorted(
        (r for r in _restaurants.values() if r.owner == owner),
        key=lambda r: r.id,
    )


def update_restaurant(restaurant_id: int, changes: dict[str, Any]) -> Restaurant | None:
    """Apply a partial update. Raises ``pydantic.ValidationError`` on bad data."""
    current = _restaurants.get(restaurant_id)
    if current is None:
        return None
    updated = Restaurant.model_validate({**current.model_dump(), **changes})
    _restaurants[restaurant_id] = updated
    return updated


def delete_restaurant(restaurant_id: int) -> bool:
    if restaurant_id not in _restaurants:
        return False
    for conversation in list_conversations(restaurant_id):
        delete_conversation(conversation.id)
    for rec_id in [r.id for r in _recommendations.values() if r.restaurant_id == restaurant_id]:
        del _recommendations[rec_id]
    del _restaurants[restaurant_id]
    return True


# ── Conversations & messages ─────────────────────────────────────────────


def create_conversation(restaurant_id: int, title: str) -> Conversation:
    conversation = Conversation(
        id=next(_ids), restaurant_id=restaurant_id, title=title, created_at=_now(),
    )
    _conversations[conversation.id] = conversation
    return conversation


def get_conversation(conversation_id: int) -> Conversation | None:
    return _conversations.get(conversation_id)


def list_conversations(restaurant_id: int) -> list[Conversation]:
    return [c for c in _conversations.values() if c.restaurant_id == restaurant_id]


def delete_conversation(conversation_id: int) -> bool:
    if conversation_id not in _conversations:
        return False
    message_ids = {m.id for m in list_messages(conversation_id)}
    for rec_id in [r.id for r in _recommendations.values() if r.message_id in message_ids]:
        del _recommendations[rec_id]
    for message_id in message_ids:
        del _messages[message_id]
    del _conversations[conversation_id]
    return True


def create_message(
    conversation_id: int,
    role: str,
    content: str,
    category: ChefCategory | None = None,
) -> Message:
    message = Message(
        id=next(_ids),
        conversation_id=conversation_id,
        role=role,
        content=content,
        category=category,
        created_at=_now(),
    )
    _messages[message.id] = message
    return message


def list_messages(conversation_id: int) -> list[Message]:
    # ids are handed out in creation order
    return sorted(
        (m for m in _messages.values() if m.conversation_id == conversation_id),
        key=lambda m: m.id,
    )


# ── Recommendations ──────────────────────────────────────────────────────


def save_recommendation(
    restaurant_id: int,
    recommendation: Recommendation,
    category: str,
    message_id: int | None = None,
) -> SavedRecommendation:
    saved = SavedRecommendation(
        id=next(_ids),
        restaurant_id=restaurant_id,
        message_id=message_id,
        title=recommendation.title,
        description=recommendation.description,
        category=category,
        recipe=recommendation.recipe,
        created_at=_now(),
    )
    _recommendations[saved.id] = saved
    return saved


def get_recommendation(recommendation_id: int) -> SavedRecommendation | None:
    return _recommendations.get(recommendation_id)


def list_recommendations(restaurant_id: int) -> list[SavedRecommendation]:
    return sorted(
        (r for r in _recommendations.values() if r.restaurant_id == restaurant_id),
        key=lambda r: r.id,
    )


def update_recommendation(
    recommendation_id: int, changes: dict[str, Any]
) -> SavedRecommendation | None:
    current = _recommendations.get(recommendation_id)
    if current is None:
        return None
    updated = SavedRecommendation.model_validate({**current.model_dump(), **changes})
    _recommendations[recommendation_id] = updated
    return updated


def clear_store() -> None:
    global _ids
    _restaurants.clear()
    _conversations.clear()
    _messages.clear()
    _recommendations.clear()
    _ids = itertools.count(1)
