"""The single write path for favorite state.

``toggle`` decides which representation applies with
:func:`representation_for`, performs exactly one mutating statement on it,
commits, and only then reports the new state and notifies listeners.

The non-owner branch is check-then-act and therefore racy: two identical
requests can both see "no bookmark". The store's uniqueness constraint rejects
the second insert and the coordinator reads that rejection as "already
favorited"; a delete that removes nothing is read as "already unfavorited".
Neither outcome is an error for the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from whattoeat.schemas.items import ItemType

from .errors import (
    FavoriteEdgeExistsError,
    FavoriteStorageError,
    ItemNotFoundError,
    UnauthenticatedError,
)
from .listeners import FavoriteChanged, FavoriteChangeNotifier
from .state import Representation, representation_for
from .stores import FavoriteEdgeStore, FavoriteTarget, ItemStore, Transaction

logger = logging.getLogger(__name__)


class FavoriteToggleCoordinator:
    """Flip one viewer's favorite state for one item."""

    def __init__(
        self,
        *,
        items: ItemStore,
        edges: FavoriteEdgeStore,
        transaction: Transaction,
        notifier: FavoriteChangeNotifier | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._items = items
        self._edges = edges
        self._transaction = transaction
        self._notifier = notifier or FavoriteChangeNotifier()
        self._clock = clock

    async def toggle(self, viewer_id: int | None, item_type: ItemType, item_id: int) -> bool:
        """Flip the state and return the new resolved value.

        Raises :class:`UnauthenticatedError` without a viewer,
        :class:`ItemNotFoundError` for unknown items and
        :class:`FavoriteStorageError` when the store fails; in the last case
        nothing is reported as persisted.
        """

        if viewer_id is None:
            raise UnauthenticatedError()

        try:
            item = await self._items.get_by_id(item_type, item_id)
            if item is None:
                raise ItemNotFoundError(item_type, item_id)

            representation = representation_for(viewer_id, item)
            if representation is Representation.OWNED_FLAG:
                favorited = await self._toggle_owned_flag(item_type, item)
            else:
                favorited = await self._toggle_edge(viewer_id, item_type, item.id)

            await self._transaction.commit()
        except SQLAlchemyError as exc:
            logger.error(
                "Favorite toggle failed for viewer %s on %s %s: %s",
                viewer_id,
                item_type.value,
                item_id,
                exc,
            )
            raise FavoriteStorageError(
                f"Could not persist favorite state for {item_type.value} {item_id}"
            ) from exc

        await self._notifier.notify(
            FavoriteChanged(
                viewer_id=viewer_id,
                item_type=item_type,
                item_id=item.id,
                favorited=favorited,
                representation=representation,
            )
        )
        return favorited

    async def _toggle_owned_flag(self, item_type: ItemType, item: FavoriteTarget) -> bool:
        next_value = not item.is_favorite
        affected = await self._items.set_favorite_field(item_type, item.id, next_value)
        if affected == 0:
            # Deleted between the read and the update.
            raise ItemNotFoundError(item_type, item.id)
        logger.debug("Owner flag for %s %s set to %s", item_type.value, item.id, next_value)
        return next_value

    async def _toggle_edge(self, viewer_id: int, item_type: ItemType, item_id: int) -> bool:
        if await self._edges.exists(viewer_id, item_type, item_id):
            removed = await self._edges.delete(viewer_id, item_type, item_id)
            if removed == 0:
                logger.warning(
                    "Bookmark for viewer %s on %s %s was already removed",
                    viewer_id,
                    item_type.value,
                    item_id,
                )
            return False

        try:
            await self._edges.insert(viewer_id, item_type, item_id, self._clock())
        except FavoriteEdgeExistsError:
            logger.warning(
                "Bookmark for viewer %s on %s %s was already created",
                viewer_id,
                item_type.value,
                item_id,
            )
        return True
