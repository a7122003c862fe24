"""HTTP routers mounted by :mod:`whattoeat.main`."""

from . import discover, favorites

__all__ = ["discover", "favorites"]
