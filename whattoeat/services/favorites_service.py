"""Business logic powering the favorites and discovery API endpoints.

Collaborators:
* :class:`FavoriteToggleCoordinator` – the only writer of favorite state.
* :class:`FavoriteAggregator` – per-user favorites listings, single-item
  resolution and discovery annotation.
* :class:`ItemRepository` – item lookups and discovery pages.

:class:`FavoritesService` loads items, delegates the favorite semantics to
those collaborators and converts the results into response schemas.
"""

from __future__ import annotations

from collections.abc import Sequence

from whattoeat.db.repositories.items import Item, ItemRepository
from whattoeat.schemas.items import (
    DiscoverResponse,
    FavoriteItemList,
    FavoritesOverview,
    FavoriteState,
    ItemSummary,
    ItemType,
)
from whattoeat.services.favorites import (
    FavoriteAggregator,
    FavoriteToggleCoordinator,
    ItemNotFoundError,
    UnauthenticatedError,
)


def item_to_summary(item: Item, *, resolved_favorite: bool) -> ItemSummary:
    return ItemSummary(
        id=item.id,
        item_type=item.item_type,
        owner_id=item.owner_id,
        name=item.name,
        cuisine_type=item.cuisine_type,
        created_at=item.created_at,
        resolved_favorite=resolved_favorite,
    )


class FavoritesService:
    """Orchestrates the favorites core for the HTTP layer."""

    def __init__(
        self,
        *,
        items: ItemRepository,
        coordinator: FavoriteToggleCoordinator,
        aggregator: FavoriteAggregator,
    ) -> None:
        self._items = items
        self._coordinator = coordinator
        self._aggregator = aggregator

    async def toggle(
        self, *, viewer_id: int | None, item_type: ItemType, item_id: int
    ) -> FavoriteState:
        favorited = await self._coordinator.toggle(viewer_id, item_type, item_id)
        return FavoriteState(item_type=item_type, item_id=item_id, resolved_favorite=favorited)

    async def get_state(
        self, *, viewer_id: int | None, item_type: ItemType, item_id: int
    ) -> FavoriteState:
        item = await self._items.get_by_id(item_type, item_id)
        if item is None:
            raise ItemNotFoundError(item_type, item_id)
        resolved = await self._aggregator.resolve_item(viewer_id, item_type, item)
        return FavoriteState(item_type=item_type, item_id=item_id, resolved_favorite=resolved)

    async def list_favorites(
        self, *, user_id: int | None, item_type: ItemType
    ) -> FavoriteItemList:
        if user_id is None:
            raise UnauthenticatedError("Authentication is required to list favorites")
        favorites = await self._aggregator.list_favorites(user_id, item_type)
        summaries = self._favorite_summaries(favorites)
        return FavoriteItemList(item_type=item_type, total=len(summaries), items=summaries)

    async def list_all_favorites(self, *, user_id: int | None) -> FavoritesOverview:
        if user_id is None:
            raise UnauthenticatedError("Authentication is required to list favorites")
        grouped = await self._aggregator.list_all_favorites(user_id)
        return FavoritesOverview(
            meals=self._favorite_summaries(grouped[ItemType.MEAL]),
            restaurants=self._favorite_summaries(grouped[ItemType.RESTAURANT]),
        )

    async def discover(
        self,
        *,
        viewer_id: int | None,
        item_type: ItemType,
        limit: int,
        offset: int,
    ) -> DiscoverResponse:
        total = await self._items.count_items(item_type)
        page = await self._items.list_items(item_type, limit=limit, offset=offset)
        annotated = await self._aggregator.annotate_list(viewer_id, item_type, page)
        return DiscoverResponse(
            item_type=item_type,
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(page) < total,
            items=[
                item_to_summary(item, resolved_favorite=resolved)
                for item, resolved in annotated
            ],
        )

    @staticmethod
    def _favorite_summaries(items: Sequence[Item]) -> list[ItemSummary]:
        # Everything the aggregator returns is favorited by construction.
        return [item_to_summary(item, resolved_favorite=True) for item in items]
