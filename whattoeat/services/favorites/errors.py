"""Exceptions raised by the favorites domain.

Each class also derives from the built-in exception a generic caller would
expect (``LookupError`` for a missing item, ``PermissionError`` for a missing
identity) so code outside the domain can handle them without importing this
module.
"""

from __future__ import annotations

from whattoeat.schemas.items import ItemType


class FavoriteError(Exception):
    """Base class for every favorites failure."""


class UnauthenticatedError(FavoriteError, PermissionError):
    """A write was attempted without a viewer identity."""

    def __init__(self, message: str = "Authentication is required to change favorites") -> None:
        super().__init__(message)


class ItemNotFoundError(FavoriteError, LookupError):
    """The referenced meal or restaurant does not exist."""

    def __init__(self, item_type: ItemType, item_id: int) -> None:
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"{item_type.value} {item_id} does not exist")


class FavoriteEdgeExistsError(FavoriteError):
    """Insert hit the ``(user_id, item_type, item_id)`` uniqueness constraint.

    Only the toggle coordinator should ever see this; it means a concurrent
    request already created the bookmark.
    """

    def __init__(self, viewer_id: int, item_type: ItemType, item_id: int) -> None:
        self.viewer_id = viewer_id
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(
            f"viewer {viewer_id} already bookmarked {item_type.value} {item_id}"
        )


class FavoriteStorageError(FavoriteError, RuntimeError):
    """The store failed, so the favorite state could not be confirmed."""
