"""Repositories wrapping an ``AsyncSession`` for the favorites core."""

from .favorite_edges import FavoriteEdgeRepository
from .items import ItemRepository

__all__ = ["FavoriteEdgeRepository", "ItemRepository"]
