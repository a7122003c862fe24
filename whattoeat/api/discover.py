"""Discovery listings of items from every owner, annotated for the viewer."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from whattoeat.schemas.items import DiscoverResponse, ItemType
from whattoeat.services.dependencies import get_favorites_service, get_viewer_id
from whattoeat.services.favorites_service import FavoritesService
from whattoeat.settings import get_settings

router = APIRouter()


@router.get("/{item_type}", response_model=DiscoverResponse)
async def discover_items(
    item_type: ItemType,
    limit: int = Query(20, ge=1, description="Page size, capped by DISCOVER_MAX_PAGE_SIZE"),
    offset: int = Query(0, ge=0),
    viewer_id: int | None = Depends(get_viewer_id),
    service: FavoritesService = Depends(get_favorites_service),
) -> DiscoverResponse:
    """Return a newest-first page with ``resolved_favorite`` set per item."""

    limit = min(limit, get_settings().discover_max_page_size)
    return await service.discover(
        viewer_id=viewer_id,
        item_type=item_type,
        limit=limit,
        offset=offset,
    )
