"""Read-side favorites queries: per-user listings and list annotation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TypeVar

from whattoeat.schemas.items import ItemType

from .resolver import resolve_batch, resolve_single
from .state import Representation, representation_for
from .stores import FavoriteEdgeStore, FavoriteTarget, ItemStore

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=FavoriteTarget)


class FavoriteAggregator:
    """Merge owned flags and bookmarks into the views list screens need."""

    def __init__(self, *, items: ItemStore, edges: FavoriteEdgeStore) -> None:
        self._items = items
        self._edges = edges

    async def list_favorites(self, user_id: int, item_type: ItemType) -> list[FavoriteTarget]:
        """Return every item of ``item_type`` that ``user_id`` has favorited.

        Owned items flagged as favorite come first, then bookmarked items with
        the newest bookmark first. Items are de-duplicated by id; bookmarks
        pointing at deleted items are skipped.
        """

        owned = await self._items.list_owned_favorites(item_type, user_id)
        bookmarked_ids = list(await self._edges.list_item_ids(user_id, item_type))
        bookmarked = await self._items.get_by_ids(item_type, bookmarked_ids)
        by_id = {item.id: item for item in bookmarked}

        favorites: list[FavoriteTarget] = []
        seen: set[int] = set()
        for item in owned:
            if item.id not in seen:
                seen.add(item.id)
                favorites.append(item)

        for item_id in bookmarked_ids:
            item = by_id.get(item_id)
            if item is None or item_id in seen:
                continue
            if representation_for(user_id, item) is Representation.OWNED_FLAG:
                logger.warning(
                    "User %s holds a bookmark on their own %s %s; ignoring it",
                    user_id,
                    item_type.value,
                    item_id,
                )
                continue
            seen.add(item_id)
            favorites.append(item)

        return favorites

    async def list_all_favorites(self, user_id: int) -> dict[ItemType, list[FavoriteTarget]]:
        return {
            item_type: await self.list_favorites(user_id, item_type) for item_type in ItemType
        }

    async def resolve_item(
        self, viewer_id: int | None, item_type: ItemType, item: FavoriteTarget
    ) -> bool:
        """Resolve one item, querying the bookmark table only for non-owners."""

        if viewer_id is None:
            return False
        if representation_for(viewer_id, item) is Representation.OWNED_FLAG:
            return resolve_single(viewer_id, item)
        edge_exists = await self._edges.exists(viewer_id, item_type, item.id)
        return resolve_single(viewer_id, item, edge_exists=edge_exists)

    async def annotate_list(
        self,
        viewer_id: int | None,
        item_type: ItemType,
        items: Sequence[ItemT],
    ) -> list[tuple[ItemT, bool]]:
        """Pair each item with the viewer's resolved favorite state.

        Issues at most one bulk existence query, covering only the items the
        viewer does not own, and none at all for anonymous viewers.
        """

        if viewer_id is None or not items:
            return [(item, False) for item in items]

        foreign_ids = [
            item.id
            for item in items
            if representation_for(viewer_id, item) is Representation.EDGE
        ]
        edge_item_ids: set[int] = set()
        if foreign_ids:
            edge_item_ids = await self._edges.exists_bulk(viewer_id, item_type, foreign_ids)

        resolved = resolve_batch(viewer_id, items, edge_item_ids)
        return [(item, resolved[item.id]) for item in items]
