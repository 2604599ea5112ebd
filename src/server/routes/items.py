"""Work item endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException

from src.accounts import AuthenticatedUser

from ..dependencies import get_current_user, get_entry_repository
from ..schemas import DeleteResponse, WorkItemRequest, WorkItemResponse

logger = logging.getLogger(__name__)


def register_item_routes(app: FastAPI) -> None:
    """Register work item CRUD endpoints, scoped to the authenticated user."""

    @app.get("/api/items", response_model=List[WorkItemResponse])
    async def list_items(
        series_id: Optional[str] = None,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> List[WorkItemResponse]:
        """List the caller's items, newest first."""
        repo = get_entry_repository()
        try:
            if series_id:
                items = await asyncio.to_thread(repo.list_by_series, user.id, series_id)
            else:
                items = await asyncio.to_thread(repo.list, user.id)
            return [WorkItemResponse.from_domain(item) for item in items]
        except Exception as exc:
            logger.exception("Failed to list items: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to list items") from exc

    @app.post("/api/items", response_model=WorkItemResponse)
    async def upsert_item(
        request: WorkItemRequest,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> WorkItemResponse:
        """Create or overwrite an item keyed by its client id."""
        repo = get_entry_repository()
        try:
            item = await asyncio.to_thread(repo.upsert, user.id, request.to_domain())
            return WorkItemResponse.from_domain(item)
        except Exception as exc:
            logger.exception("Failed to save item: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to save item") from exc

    @app.delete("/api/items/{item_id:path}", response_model=DeleteResponse)
    async def delete_item(
        item_id: str,
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> DeleteResponse:
        """Delete an item. Missing ids are not an error."""
        repo = get_entry_repository()
        try:
            deleted = await asyncio.to_thread(repo.delete, user.id, item_id)
            return DeleteResponse(deleted=deleted)
        except Exception as exc:
            logger.exception("Failed to delete item: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to delete item") from exc
