"""Client-held copy of the user's entries and series.

Every mutation issues exactly one backend call and then re-fetches the
affected collection, so the cache always mirrors what the backend stores.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional, Union

from src.entries.models import Series, WorkItem, complete_series
from src.stats.aggregator import JournalStats, activity_map, compute_stats
from src.worklog.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class JournalSyncCache:
    """APIクライアントまたはローカルストアをバックエンドに持つキャッシュ。"""

    def __init__(self, backend: Any):
        """
        Args:
            backend: WorklogApiClient または LocalJournalStore
        """
        self.backend = backend
        self.items: List[WorkItem] = []
        self.series: List[Series] = []

    def refresh(self) -> None:
        self.refresh_items()
        self.refresh_series()

    def refresh_items(self) -> List[WorkItem]:
        self.items = self.backend.list_items()
        return self.items

    def refresh_series(self) -> List[Series]:
        self.series = self.backend.list_series()
        return self.series

    # --- Items ---

    def save_item(self, item: WorkItem) -> List[WorkItem]:
        self.backend.upsert_item(item)
        return self.refresh_items()

    def delete_item(self, item_id: str) -> List[WorkItem]:
        self.backend.delete_item(item_id)
        return self.refresh_items()

    def items_for_series(self, series_id: str) -> List[WorkItem]:
        """専題に属するアイテム（新しい順）"""
        return [item for item in self.items if item.series_id == series_id]

    # --- Series ---

    def save_series(self, series: Series) -> List[Series]:
        self.backend.upsert_series(series)
        return self.refresh_series()

    def delete_series(self, series_id: str) -> List[Series]:
        """専題のみ削除。参照しているアイテムはそのまま残る。"""
        self.backend.delete_series(series_id)
        return self.refresh_series()

    def get_series(self, series_id: str) -> Optional[Series]:
        return next((s for s in self.series if s.id == series_id), None)

    def complete_series(
        self, series_id: str, now: Optional[Union[str, datetime]] = None
    ) -> List[Series]:
        series = self.get_series(series_id)
        if series is None:
            raise NotFoundError(f"Series not found: {series_id}")
        return self.save_series(complete_series(series, now))

    def active_series(self) -> List[Series]:
        return [s for s in self.series if s.is_active]

    # --- Derived ---

    def stats(self) -> JournalStats:
        return compute_stats(self.items)

    def activity(self) -> dict[str, int]:
        return activity_map(self.items)

    def clear(self) -> None:
        """ログアウト時にメモリ上の状態を破棄する"""
        self.items = []
        self.series = []
