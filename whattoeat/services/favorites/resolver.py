"""Pure functions that turn pre-fetched rows into resolved favorite booleans.

Nothing here touches storage. Callers fetch the item and, when needed, the
bookmark existence first; that split keeps the single-item and batched paths
provably consistent because both end in :func:`source_for`.
"""

from __future__ import annotations

from collections.abc import Iterable, Set

from .state import source_for
from .stores import FavoriteTarget


def resolve_single(
    viewer_id: int | None,
    item: FavoriteTarget,
    *,
    edge_exists: bool = False,
) -> bool:
    """Return what ``viewer_id`` should see for ``item``.

    Anonymous viewers always get ``False``. Owners get the inline flag.
    Everybody else gets ``edge_exists``, which the caller must have looked up.
    """

    if viewer_id is None:
        return False
    return source_for(viewer_id, item, edge_exists=edge_exists).favorited


def resolve_batch(
    viewer_id: int | None,
    items: Iterable[FavoriteTarget],
    edge_item_ids: Set[int],
) -> dict[int, bool]:
    """Resolve many items for one viewer in a single pass.

    ``edge_item_ids`` holds the ids the viewer has bookmarked, as returned by
    one bulk existence query. If an id repeats in ``items`` the later entry
    wins.
    """

    resolved: dict[int, bool] = {}
    for item in items:
        resolved[item.id] = resolve_single(
            viewer_id, item, edge_exists=item.id in edge_item_ids
        )
    return resolved
