"""API routers."""

from . import icons

__all__ = ["icons"]
