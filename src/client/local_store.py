"""Local fallback storage used when no backend is configured.

Entries and series live in one JSON blob under fixed keys.  There is no
user scoping: the file belongs to a single implicit user.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.entries.models import Series, WorkItem

logger = logging.getLogger(__name__)

ITEMS_KEY = "worklog_items"
SERIES_KEY = "worklog_series"


def default_store_path() -> Path:
    env_path = os.getenv("WORKLOG_LOCAL_STORE")
    if env_path:
        return Path(env_path)
    return Path.home() / ".worklog" / "local_store.json"


class LocalJournalStore:
    """JSONファイルによるローカル保存。APIクライアントと同じインターフェース。"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_store_path()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {ITEMS_KEY: [], SERIES_KEY: []}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data.setdefault(ITEMS_KEY, [])
        data.setdefault(SERIES_KEY, [])
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    @staticmethod
    def _upsert(records: List[Dict[str, Any]], record: Dict[str, Any]) -> List[Dict[str, Any]]:
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = record
                return records
        records.append(record)
        return records

    # --- Items ---

    def list_items(self, series_id: Optional[str] = None) -> List[WorkItem]:
        items = [WorkItem.from_dict(entry) for entry in self._load()[ITEMS_KEY]]
        if series_id:
            items = [item for item in items if item.series_id == series_id]
        return sorted(items, key=lambda item: item.date, reverse=True)

    def upsert_item(self, item: WorkItem) -> WorkItem:
        data = self._load()
        self._upsert(data[ITEMS_KEY], item.to_dict())
        self._save(data)
        return item

    def delete_item(self, item_id: str) -> bool:
        data = self._load()
        before = len(data[ITEMS_KEY])
        data[ITEMS_KEY] = [entry for entry in data[ITEMS_KEY] if entry.get("id") != item_id]
        if len(data[ITEMS_KEY]) == before:
            return False
        self._save(data)
        return True

    # --- Series ---

    def list_series(self) -> List[Series]:
        series = [Series.from_dict(entry) for entry in self._load()[SERIES_KEY]]
        return sorted(series, key=lambda s: s.created_at, reverse=True)

    def upsert_series(self, series: Series) -> Series:
        data = self._load()
        self._upsert(data[SERIES_KEY], series.to_dict())
        self._save(data)
        return series

    def delete_series(self, series_id: str) -> bool:
        data = self._load()
        before = len(data[SERIES_KEY])
        data[SERIES_KEY] = [entry for entry in data[SERIES_KEY] if entry.get("id") != series_id]
        if len(data[SERIES_KEY]) == before:
            return False
        self._save(data)
        return True

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Cleared local store {self.path}")
