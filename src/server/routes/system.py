"""Health and statistics endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI, HTTPException

from src.accounts import AuthenticatedUser
from src.stats import activity_map, compute_stats

from ..dependencies import get_current_user, get_entry_repository
from ..schemas import HealthResponse, StatsResponse

logger = logging.getLogger(__name__)


def register_system_routes(app: FastAPI) -> None:
    """Register health check and dashboard statistics."""

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/api/stats", response_model=StatsResponse)
    async def stats(user: AuthenticatedUser = Depends(get_current_user)) -> StatsResponse:
        """Aggregates recomputed from the caller's full item list."""
        repo = get_entry_repository()
        try:
            items = await asyncio.to_thread(repo.list, user.id)
        except Exception as exc:
            logger.exception("Failed to load items for stats: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to compute stats") from exc

        result = compute_stats(items)
        return StatsResponse(
            total_minutes=result.total_minutes,
            category_distribution=result.category_distribution,
            daily_distribution=result.daily_distribution,
            activity=activity_map(items),
        )
