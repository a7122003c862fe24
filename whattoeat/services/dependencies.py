"""FastAPI dependency wiring for backend services.

Keeping the factories here leaves the service modules free of web-layer
concerns so tests and scripts can build them directly.
"""

from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from whattoeat.db.connection import get_db
from whattoeat.db.repositories.favorite_edges import FavoriteEdgeRepository
from whattoeat.db.repositories.items import ItemRepository
from whattoeat.services.favorites import (
    FavoriteAggregator,
    FavoriteChangeNotifier,
    FavoriteToggleCoordinator,
    LoggingFavoriteListener,
)
from whattoeat.services.favorites_service import FavoritesService

VIEWER_HEADER = "X-User-Id"

_notifier = FavoriteChangeNotifier([LoggingFavoriteListener()])


def get_viewer_id(
    viewer_id: int | None = Header(
        default=None,
        alias=VIEWER_HEADER,
        description=(
            "Identifier of the authenticated user, injected by the upstream"
            " authentication gateway. Absent for anonymous requests."
        ),
    ),
) -> int | None:
    return viewer_id


def get_favorite_change_notifier() -> FavoriteChangeNotifier:
    """Return the process-wide notifier so callers can subscribe listeners."""

    return _notifier


def get_favorites_service(
    session: AsyncSession = Depends(get_db),
    notifier: FavoriteChangeNotifier = Depends(get_favorite_change_notifier),
) -> FavoritesService:
    """Wire repositories, coordinator and aggregator around one session."""

    items = ItemRepository(session)
    edges = FavoriteEdgeRepository(session)
    coordinator = FavoriteToggleCoordinator(
        items=items,
        edges=edges,
        transaction=session,
        notifier=notifier,
    )
    aggregator = FavoriteAggregator(items=items, edges=edges)
    return FavoritesService(items=items, coordinator=coordinator, aggregator=aggregator)


__all__ = [
    "VIEWER_HEADER",
    "get_favorite_change_notifier",
    "get_favorites_service",
    "get_viewer_id",
]
