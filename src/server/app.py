"""FastAPI application bootstrap."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .dependencies import (
    clear_caches,
    get_credential_store,
    get_entry_repository,
    get_series_repository,
    get_user_repository,
)
from .routes import (
    register_auth_routes,
    register_generate_routes,
    register_item_routes,
    register_series_routes,
    register_system_routes,
)

__all__ = [
    "app",
    "clear_caches",
    "create_app",
    "get_credential_store",
    "get_entry_repository",
    "get_series_repository",
    "get_user_repository",
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Worklog API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_auth_routes(app)
    register_item_routes(app)
    register_series_routes(app)
    register_generate_routes(app)
    register_system_routes(app)

    return app


app = create_app()
