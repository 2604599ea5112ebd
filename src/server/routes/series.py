"""Series endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException

from src.accounts import AuthenticatedUser

from ..dependencies import get_current_user, get_series_repository
from ..schemas import DeleteResponse, SeriesRequest, SeriesResponse

logger = logging.getLogger(__name__)


def register_series_routes(app: FastAPI) -> None:
    """Register series CRUD endpoints, scoped to the authenticated user."""

    @app.get("/api/series", response_model=List[SeriesResponse])
    async def list_series(user: AuthenticatedUser = Depends(get_current_user)) -> List[SeriesResponse]:
        """List the caller's series, newest first."""
        repo = get_series_repository()
        try:
            series = await asyncio.to_thread(repo.list, user.id)
            return [SeriesResponse.from_domain(s) for s in series]
        except Exception as exc:
            logger.exception("Failed to list series: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to list series") from exc

    @app.post("/api/series", response_model=SeriesResponse)
    async def upsert_series(
        request: SeriesRequest,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> SeriesResponse:
        """Create or overwrite a series keyed by its client id.

        Status changes are stored as sent, including completed -> active.
        """
        repo = get_series_repository()
        try:
            series = await asyncio.to_thread(repo.upsert, user.id, request.to_domain())
            return SeriesResponse.from_domain(series)
        except Exception as exc:
            logger.exception("Failed to save series: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to save series") from exc

    @app.delete("/api/series/{series_id:path}", response_model=DeleteResponse)
    async def delete_series(
        series_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> DeleteResponse:
        """Delete a series only; items pointing at it keep their seriesId."""
        repo = get_series_repository()
        try:
            deleted = await asyncio.to_thread(repo.delete, user.id, series_id)
            return DeleteResponse(deleted=deleted)
        except Exception as exc:
            logger.exception("Failed to delete series: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to delete series") from exc
