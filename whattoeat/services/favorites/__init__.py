"""Favorites domain components split by responsibility.

``resolver`` and ``state`` are pure; ``toggle`` is the only writer;
``aggregator`` answers the read-side list questions. Storage is reached only
through the protocols in ``stores``.
"""

from .aggregator import FavoriteAggregator
from .errors import (
    FavoriteEdgeExistsError,
    FavoriteError,
    FavoriteStorageError,
    ItemNotFoundError,
    UnauthenticatedError,
)
from .listeners import (
    FavoriteChanged,
    FavoriteChangeListener,
    FavoriteChangeNotifier,
    LoggingFavoriteListener,
)
from .resolver import resolve_batch, resolve_single
from .state import EdgeBookmark, FavoriteSource, OwnedFlag, Representation
from .toggle import FavoriteToggleCoordinator

__all__ = [
    "EdgeBookmark",
    "FavoriteAggregator",
    "FavoriteChangeListener",
    "FavoriteChangeNotifier",
    "FavoriteChanged",
    "FavoriteEdgeExistsError",
    "FavoriteError",
    "FavoriteSource",
    "FavoriteStorageError",
    "FavoriteToggleCoordinator",
    "ItemNotFoundError",
    "OwnedFlag",
    "Representation",
    "UnauthenticatedError",
    "resolve_batch",
    "resolve_single",
]
