"""FastAPI router exposing favorite toggles, reads and per-user listings.

Domain errors (unauthenticated, not found, storage failure) propagate to the
exception handlers in :mod:`whattoeat.main`, which translate them into
structured error payloads.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from whattoeat.schemas.items import (
    FavoriteItemList,
    FavoritesOverview,
    FavoriteState,
    ItemType,
)
from whattoeat.services.dependencies import get_favorites_service, get_viewer_id
from whattoeat.services.favorites_service import FavoritesService

router = APIRouter()


@router.get("", response_model=FavoritesOverview)
async def list_all_favorites(
    viewer_id: int | None = Depends(get_viewer_id),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoritesOverview:
    """Return the caller's favorite meals and restaurants."""

    return await service.list_all_favorites(user_id=viewer_id)


@router.get("/{item_type}", response_model=FavoriteItemList)
async def list_favorites(
    item_type: ItemType,
    viewer_id: int | None = Depends(get_viewer_id),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteItemList:
    """Return the caller's favorites of one item type, owned and bookmarked."""

    return await service.list_favorites(user_id=viewer_id, item_type=item_type)


@router.get("/{item_type}/{item_id}", response_model=FavoriteState)
async def get_favorite_state(
    item_type: ItemType,
    item_id: int = Path(..., ge=1),
    viewer_id: int | None = Depends(get_viewer_id),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteState:
    """Resolve whether the caller has the item favorited; anonymous is always false."""

    return await service.get_state(viewer_id=viewer_id, item_type=item_type, item_id=item_id)


@router.post("/{item_type}/{item_id}/toggle", response_model=FavoriteState)
async def toggle_favorite(
    item_type: ItemType,
    item_id: int = Path(..., ge=1),
    viewer_id: int | None = Depends(get_viewer_id),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteState:
    """Flip the caller's favorite state, whether or not they own the item."""

    return await service.toggle(viewer_id=viewer_id, item_type=item_type, item_id=item_id)
