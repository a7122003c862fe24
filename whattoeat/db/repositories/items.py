"""Repository encapsulating meal and restaurant queries."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from whattoeat.db.models import ITEM_MODELS, Meal, Restaurant
from whattoeat.schemas.items import ItemType

Item = Meal | Restaurant


class ItemRepository:
    """Point, bulk and owner-scoped lookups over ``meals`` and ``restaurants``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, item_type: ItemType, item_id: int) -> Item | None:
        model = ITEM_MODELS[item_type]
        stmt = select(model).where(model.id == item_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_ids(self, item_type: ItemType, item_ids: Sequence[int]) -> list[Item]:
        """Return the items that still exist; unknown ids are dropped silently."""

        if not item_ids:
            return []
        model = ITEM_MODELS[item_type]
        stmt = select(model).where(model.id.in_(set(item_ids)))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def set_favorite_field(self, item_type: ItemType, item_id: int, value: bool) -> int:
        """Write the owner's inline flag with a single-row update.

        Returns the number of rows affected so callers can tell a vanished
        item apart from a successful write.
        """

        model = ITEM_MODELS[item_type]
        stmt = (
            update(model)
            .where(model.id == item_id)
            .values(is_favorite=value)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)

    async def list_owned_favorites(self, item_type: ItemType, owner_id: int) -> list[Item]:
        model = ITEM_MODELS[item_type]
        stmt = (
            select(model)
            .where(model.user_id == owner_id, model.is_favorite.is_(True))
            .order_by(model.created_at.desc(), model.id.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_items(self, item_type: ItemType) -> int:
        model = ITEM_MODELS[item_type]
        stmt = select(func.count()).select_from(model)
        result = await self._session.execute(stmt)
        return int(result.scalar_one() or 0)

    async def list_items(
        self,
        item_type: ItemType,
        *,
        limit: int,
        offset: int = 0,
    ) -> list[Item]:
        """Return a newest-first page of items from every owner."""

        model = ITEM_MODELS[item_type]
        stmt = (
            select(model)
            .order_by(model.created_at.desc(), model.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
