"""Repository for cross-user favorite bookmarks (``user_favorites``)."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from sqlalchemy import delete, exists, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from whattoeat.db.models import UserFavorite
from whattoeat.schemas.items import ItemType
from whattoeat.services.favorites.errors import FavoriteEdgeExistsError

_CONFLICT_COLUMNS = ("user_id", "item_type", "item_id")


class FavoriteEdgeRepository:
    """Existence checks, inserts and deletes keyed by ``(viewer, type, item)``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, viewer_id: int, item_type: ItemType, item_id: int) -> bool:
        stmt = select(
            exists().where(
                UserFavorite.user_id == viewer_id,
                UserFavorite.item_type == item_type.value,
                UserFavorite.item_id == item_id,
            )
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def exists_bulk(
        self, viewer_id: int, item_type: ItemType, item_ids: Sequence[int]
    ) -> set[int]:
        """Return the subset of ``item_ids`` the viewer has bookmarked, in one query."""

        if not item_ids:
            return set()
        stmt = select(UserFavorite.item_id).where(
            UserFavorite.user_id == viewer_id,
            UserFavorite.item_type == item_type.value,
            UserFavorite.item_id.in_(set(item_ids)),
        )
        result = await self._session.execute(stmt)
        return set(result.scalars().all())

    async def insert(
        self,
        viewer_id: int,
        item_type: ItemType,
        item_id: int,
        created_at: datetime,
    ) -> None:
        """Insert a bookmark or raise :class:`FavoriteEdgeExistsError`.

        The statement uses ``ON CONFLICT DO NOTHING`` so a duplicate never
        poisons the surrounding transaction; a zero rowcount is the conflict
        signal.
        """

        insert = self._insert_construct()
        stmt = (
            insert(UserFavorite.__table__)
            .values(
                user_id=viewer_id,
                item_type=item_type.value,
                item_id=item_id,
                created_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=list(_CONFLICT_COLUMNS))
        )
        result = await self._session.execute(stmt)
        if not result.rowcount:
            raise FavoriteEdgeExistsError(viewer_id, item_type, item_id)

    async def delete(self, viewer_id: int, item_type: ItemType, item_id: int) -> int:
        stmt = delete(UserFavorite).where(
            UserFavorite.user_id == viewer_id,
            UserFavorite.item_type == item_type.value,
            UserFavorite.item_id == item_id,
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)

    async def list_item_ids(self, viewer_id: int, item_type: ItemType) -> list[int]:
        """Return bookmarked item ids, newest bookmark first."""

        stmt = (
            select(UserFavorite.item_id)
            .where(
                UserFavorite.user_id == viewer_id,
                UserFavorite.item_type == item_type.value,
            )
            .order_by(UserFavorite.created_at.desc(), UserFavorite.id.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    def _insert_construct(self) -> Callable[..., postgresql.Insert | sqlite.Insert]:
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise RuntimeError(f"Unsupported database dialect for favorites: {dialect}")
