from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from src.worklog.storage import SQLiteRepository

from .models import Category, Series, SeriesStatus, WorkItem


class EntryRepository(SQLiteRepository):
    """SQLiteベースのワークアイテム管理。ユーザー単位でスコープする。

    IDはクライアント採番で、(user_id, id) の組で一意。
    同じIDのアイテムを保存すると全フィールドを上書きする（upsert）。
    """

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS work_items (
                    user_id INTEGER NOT NULL,
                    id TEXT NOT NULL,
                    title TEXT,
                    content TEXT NOT NULL,
                    category TEXT NOT NULL,
                    date TEXT NOT NULL,
                    duration_minutes INTEGER NOT NULL DEFAULT 0 CHECK (duration_minutes >= 0),
                    series_id TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, id)
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_work_items_date ON work_items(user_id, date DESC)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_work_items_series ON work_items(user_id, series_id)"
            )
            conn.commit()

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> WorkItem:
        return WorkItem(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            category=Category(row["category"]),
            date=row["date"],
            duration_minutes=row["duration_minutes"],
            series_id=row["series_id"],
        )

    def list(self, user_id: int) -> list[WorkItem]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM work_items WHERE user_id = ? ORDER BY date DESC, id",
                (user_id,),
            ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def list_by_series(self, user_id: int, series_id: str) -> list[WorkItem]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM work_items
                WHERE user_id = ? AND series_id = ?
                ORDER BY date DESC, id
                """,
                (user_id, series_id),
            ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def get(self, user_id: int, item_id: str) -> Optional[WorkItem]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM work_items WHERE user_id = ? AND id = ?",
                (user_id, item_id),
            ).fetchone()
        return self._row_to_item(row) if row else None

    def upsert(self, user_id: int, item: WorkItem) -> WorkItem:
        """存在すれば上書き、無ければ作成。series_idの参照先は検証しない。"""
        now = self._now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO work_items (
                    user_id, id, title, content, category, date,
                    duration_minutes, series_id, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, id) DO UPDATE SET
                    title = excluded.title,
                    content = excluded.content,
                    category = excluded.category,
                    date = excluded.date,
                    duration_minutes = excluded.duration_minutes,
                    series_id = excluded.series_id,
                    updated_at = excluded.updated_at
                """,
                (
                    user_id,
                    item.id,
                    item.title,
                    item.content,
                    item.category.value,
                    item.date,
                    item.duration_minutes,
                    item.series_id,
                    now,
                    now,
                ),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM work_items WHERE user_id = ? AND id = ?",
                (user_id, item.id),
            ).fetchone()
        return self._row_to_item(row)

    def delete(self, user_id: int, item_id: str) -> bool:
        """削除。存在しない場合もエラーにしない（戻り値で区別のみ）。"""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM work_items WHERE user_id = ? AND id = ?",
                (user_id, item_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def bulk_upsert(self, user_id: int, items: Iterable[WorkItem]) -> list[WorkItem]:
        """テスト/初期データ投入用のヘルパー。"""
        return [self.upsert(user_id, item) for item in items]


class SeriesRepository(SQLiteRepository):
    """SQLiteベースの専題管理。

    削除しても参照しているワークアイテムには触れない（孤立した
    series_id はそのまま残る）。
    """

    def __init__(self, db_path: Optional[Path] = None):
        super().__init__(db_path)

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS series (
                    user_id INTEGER NOT NULL,
                    id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL CHECK (status IN ('active','completed')),
                    created_at TEXT NOT NULL,
                    completed_at TEXT,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, id)
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_series_created ON series(user_id, created_at DESC)"
            )
            conn.commit()

    @staticmethod
    def _row_to_series(row: sqlite3.Row) -> Series:
        return Series(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            status=SeriesStatus(row["status"]),
            created_at=row["created_at"],
            completed_at=row["completed_at"],
        )

    def list(self, user_id: int) -> List[Series]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM series WHERE user_id = ? ORDER BY created_at DESC, id",
                (user_id,),
            ).fetchall()
        return [self._row_to_series(row) for row in rows]

    def get(self, user_id: int, series_id: str) -> Optional[Series]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM series WHERE user_id = ? AND id = ?",
                (user_id, series_id),
            ).fetchone()
        return self._row_to_series(row) if row else None

    def upsert(self, user_id: int, series: Series) -> Series:
        now = self._now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO series (
                    user_id, id, title, description, status,
                    created_at, completed_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    status = excluded.status,
                    created_at = excluded.created_at,
                    completed_at = excluded.completed_at,
                    updated_at = excluded.updated_at
                """,
                (
                    user_id,
                    series.id,
                    series.title,
                    series.description,
                    series.status.value,
                    series.created_at,
                    series.completed_at,
                    now,
                ),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM series WHERE user_id = ? AND id = ?",
                (user_id, series.id),
            ).fetchone()
        return self._row_to_series(row)

    def delete(self, user_id: int, series_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM series WHERE user_id = ? AND id = ?",
                (user_id, series_id),
            )
            conn.commit()
            return cursor.rowcount > 0
