"""Storage contracts the favorites core depends on.

The SQLAlchemy repositories in :mod:`whattoeat.db.repositories` satisfy these
protocols; tests substitute in-memory doubles.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from whattoeat.schemas.items import ItemType


class FavoriteTarget(Protocol):
    """The three attributes of an item that decide its favorite state."""

    @property
    def id(self) -> int: ...

    @property
    def owner_id(self) -> int: ...

    @property
    def is_favorite(self) -> bool: ...


class ItemStore(Protocol):
    async def get_by_id(self, item_type: ItemType, item_id: int) -> FavoriteTarget | None: ...

    async def get_by_ids(
        self, item_type: ItemType, item_ids: Sequence[int]
    ) -> Sequence[FavoriteTarget]: ...

    async def set_favorite_field(self, item_type: ItemType, item_id: int, value: bool) -> int: ...

    async def list_owned_favorites(
        self, item_type: ItemType, owner_id: int
    ) -> Sequence[FavoriteTarget]: ...


class FavoriteEdgeStore(Protocol):
    async def exists(self, viewer_id: int, item_type: ItemType, item_id: int) -> bool: ...

    async def exists_bulk(
        self, viewer_id: int, item_type: ItemType, item_ids: Sequence[int]
    ) -> set[int]: ...

    async def insert(
        self, viewer_id: int, item_type: ItemType, item_id: int, created_at: datetime
    ) -> None:
        """Raise :class:`FavoriteEdgeExistsError` when the key already exists."""
        ...

    async def delete(self, viewer_id: int, item_type: ItemType, item_id: int) -> int: ...

    async def list_item_ids(self, viewer_id: int, item_type: ItemType) -> Sequence[int]: ...


class Transaction(Protocol):
    """Unit of work whose commit confirms a toggle; ``AsyncSession`` fits."""

    async def commit(self) -> None: ...
