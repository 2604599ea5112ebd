"""Route registration helpers."""

from .auth import register_auth_routes
from .generate import register_generate_routes
from .items import register_item_routes
from .series import register_series_routes
from .system import register_system_routes

__all__ = [
    "register_auth_routes",
    "register_generate_routes",
    "register_item_routes",
    "register_series_routes",
    "register_system_routes",
]
