"""HTTP routers for the admin screens."""

from .nav_menus import router as nav_menus_router

__all__ = [
    "nav_menus_router",
]
