"""Observer hooks fired after a favorite toggle has been persisted."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from whattoeat.schemas.items import ItemType

from .state import Representation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FavoriteChanged:
    viewer_id: int
    item_type: ItemType
    item_id: int
    favorited: bool
    representation: Representation


class FavoriteChangeListener(Protocol):
    async def favorite_changed(self, event: FavoriteChanged) -> None: ...


class LoggingFavoriteListener:
    """Write one INFO line per confirmed toggle."""

    async def favorite_changed(self, event: FavoriteChanged) -> None:
        logger.info(
            "Viewer %s %s %s %s via %s",
            event.viewer_id,
            "favorited" if event.favorited else "unfavorited",
            event.item_type.value,
            event.item_id,
            event.representation.value,
        )


class FavoriteChangeNotifier:
    """Fan a :class:`FavoriteChanged` event out to every registered listener.

    The toggle is already committed when listeners run, so a failing listener
    is logged and skipped rather than reported to the caller as a failed
    toggle.
    """

    def __init__(self, listeners: Iterable[FavoriteChangeListener] = ()) -> None:
        self._listeners: list[FavoriteChangeListener] = list(listeners)

    def subscribe(self, listener: FavoriteChangeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: FavoriteChangeListener) -> None:
        self._listeners.remove(listener)

    async def notify(self, event: FavoriteChanged) -> None:
        for listener in list(self._listeners):
            try:
                await listener.favorite_changed(event)
            except Exception:
                logger.exception(
                    "Favorite listener %s failed for %s %s",
                    type(listener).__name__,
                    event.item_type.value,
                    event.item_id,
                )
