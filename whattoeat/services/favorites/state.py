"""The two physical representations of "viewer V favorited item I".

An owner's favorite lives in the item's own ``is_favorite`` column; anybody
else's lives as a row in ``user_favorites``. Which one applies is decided by a
single ownership comparison in :func:`representation_for`, and every reader or
writer goes through it instead of repeating the comparison.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .stores import FavoriteTarget


class Representation(str, Enum):
    OWNED_FLAG = "owned_flag"
    EDGE = "edge"


@dataclass(frozen=True, slots=True)
class OwnedFlag:
    """Favorite state read from the owner's inline flag."""

    item_id: int
    favorited: bool

    representation = Representation.OWNED_FLAG


@dataclass(frozen=True, slots=True)
class EdgeBookmark:
    """Favorite state read from the presence of a bookmark row."""

    item_id: int
    favorited: bool

    representation = Representation.EDGE


FavoriteSource = OwnedFlag | EdgeBookmark


def representation_for(viewer_id: int, item: FavoriteTarget) -> Representation:
    if viewer_id == item.owner_id:
        return Representation.OWNED_FLAG
    return Representation.EDGE


def source_for(viewer_id: int, item: FavoriteTarget, *, edge_exists: bool) -> FavoriteSource:
    """Collapse the raw data for one pair into the applicable variant.

    ``edge_exists`` is ignored for owners: a bookmark row on an owned item
    would be an invariant violation and must never change what the owner sees.
    """

    if representation_for(viewer_id, item) is Representation.OWNED_FLAG:
        return OwnedFlag(item_id=item.id, favorited=bool(item.is_favorite))
    return EdgeBookmark(item_id=item.id, favorited=edge_exists)
