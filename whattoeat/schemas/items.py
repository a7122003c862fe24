"""Pydantic schemas describing meals, restaurants and their favorite state."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ItemType(str, Enum):
    """Kinds of items a user can favorite."""

    MEAL = "meal"
    RESTAURANT = "restaurant"


class ItemSummary(BaseModel):
    """Item payload annotated with the viewer's resolved favorite state.

    The raw ``is_favorite`` column is intentionally absent: it only means
    something to the owner, so clients always read ``resolved_favorite``.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_type: ItemType
    owner_id: int = Field(..., description="Identifier of the user who created the item")
    name: str
    cuisine_type: str | None = None
    created_at: datetime | None = None
    resolved_favorite: bool = Field(
        False,
        description="Whether the requesting viewer has this item favorited.",
    )


class FavoriteState(BaseModel):
    """Single-item response returned by toggles and favorite reads."""

    item_type: ItemType
    item_id: int
    resolved_favorite: bool


class FavoriteItemList(BaseModel):
    """Favorites of one item type for the requesting user."""

    item_type: ItemType
    total: int
    items: list[ItemSummary]


class FavoritesOverview(BaseModel):
    """Every favorite of the requesting user grouped by item type."""

    meals: list[ItemSummary] = Field(default_factory=list)
    restaurants: list[ItemSummary] = Field(default_factory=list)


class DiscoverResponse(BaseModel):
    """Paginated discovery listing across all owners."""

    item_type: ItemType
    total: int
    limit: int
    offset: int
    has_more: bool
    items: list[ItemSummary]
