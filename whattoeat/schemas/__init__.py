"""Pydantic models exposed by the HTTP layer."""

from .error import ErrorResponse, ErrorType, ValidationErrorDetail, ValidationErrorResponse
from .items import (
    DiscoverResponse,
    FavoriteItemList,
    FavoritesOverview,
    FavoriteState,
    ItemSummary,
    ItemType,
)

__all__ = [
    "DiscoverResponse",
    "ErrorResponse",
    "ErrorType",
    "FavoriteItemList",
    "FavoriteState",
    "FavoritesOverview",
    "ItemSummary",
    "ItemType",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
]
