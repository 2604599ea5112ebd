from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union


class Category(str, Enum):
    """ワークアイテムの分類。固定の列挙値のみ。"""

    ARTICLE = "Article"
    NOTE = "Note"
    IDEA = "Idea"
    LIFE = "Life"
    WORK = "Work"
    LEARNING = "Learning"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """大文字小文字を無視して分類名を解釈する。未知の値はOTHER。"""
        if isinstance(value, Category):
            return value
        text = (value or "").strip().lower()
        for category in cls:
            if category.value.lower() == text:
                return category
        return cls.OTHER


CATEGORY_LABELS: Dict[Category, str] = {
    Category.ARTICLE: "📝 記事/執筆",
    Category.NOTE: "📒 メモ",
    Category.IDEA: "💡 ひらめき/アイデア",
    Category.LIFE: "🌿 生活/日常",
    Category.WORK: "💼 仕事/成果",
    Category.LEARNING: "📚 学習/読書",
    Category.OTHER: "📁 その他",
}


class SeriesStatus(str, Enum):
    """専題のステータス。active → completed のみを想定。"""

    ACTIVE = "active"
    COMPLETED = "completed"


def new_id() -> str:
    """クライアント側で採番するID（UUID4）。"""
    return str(uuid.uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_timestamp(value: Union[str, datetime]) -> str:
    """タイムスタンプをUTCのISO8601文字列に正規化する。

    文字列比較がそのまま時系列順になるよう、保存前に必ず通す。
    タイムゾーン無しの値はUTCとみなす。
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(normalize_timestamp(value))


@dataclass(slots=True)
class WorkItem:
    """日付付きのジャーナルエントリ。

    series_id は Series への弱い参照で、存在確認もカスケード削除も行わない。
    """

    id: str
    content: str
    category: Category
    date: str
    duration_minutes: int = 0
    title: Optional[str] = None
    series_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.category, Category):
            self.category = Category(self.category)
        if self.duration_minutes < 0:
            raise ValueError(f"duration_minutes must be >= 0: {self.duration_minutes}")
        self.date = normalize_timestamp(self.date)

    @classmethod
    def create(
        cls,
        content: str,
        category: Category = Category.OTHER,
        *,
        title: Optional[str] = None,
        duration_minutes: int = 0,
        series_id: Optional[str] = None,
        date: Optional[Union[str, datetime]] = None,
    ) -> "WorkItem":
        """新規アイテムを作成（IDと日時はここで確定する）。"""
        return cls(
            id=new_id(),
            content=content,
            category=category,
            date=normalize_timestamp(date) if date else utc_now(),
            duration_minutes=duration_minutes,
            title=title or None,
            series_id=series_id or None,
        )

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.date)

    def to_dict(self) -> Dict[str, Any]:
        """APIおよびローカル保存用の辞書（camelCase）。"""
        data: Dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "category": self.category.value,
            "date": self.date,
            "durationMinutes": self.duration_minutes,
        }
        if self.title:
            data["title"] = self.title
        if self.series_id:
            data["seriesId"] = self.series_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkItem":
        return cls(
            id=data["id"],
            content=data.get("content", ""),
            category=Category.parse(data.get("category")),
            date=data["date"],
            duration_minutes=int(data.get("durationMinutes", data.get("duration_minutes", 0)) or 0),
            title=data.get("title") or None,
            series_id=data.get("seriesId", data.get("series_id")) or None,
        )


@dataclass(slots=True)
class Series:
    """長期的な専題・目標。複数のWorkItemをまとめる。"""

    id: str
    title: str
    description: str
    status: SeriesStatus
    created_at: str
    completed_at: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.status, SeriesStatus):
            self.status = SeriesStatus(self.status)
        self.created_at = normalize_timestamp(self.created_at)
        if self.completed_at:
            self.completed_at = normalize_timestamp(self.completed_at)

    @classmethod
    def create(cls, title: str, description: str = "") -> "Series":
        return cls(
            id=new_id(),
            title=title,
            description=description,
            status=SeriesStatus.ACTIVE,
            created_at=utc_now(),
        )

    @property
    def is_active(self) -> bool:
        return self.status is SeriesStatus.ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at,
        }
        if self.completed_at:
            data["completedAt"] = self.completed_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Series":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            status=SeriesStatus(data.get("status", SeriesStatus.ACTIVE.value)),
            created_at=data.get("createdAt", data.get("created_at")),
            completed_at=data.get("completedAt", data.get("completed_at")) or None,
        )


def complete_series(series: Series, now: Optional[Union[str, datetime]] = None) -> Series:
    """完了状態にしたコピーを返す。保存は呼び出し側でupsertする。

    サーバー側は completed → active への遷移を拒否しない。
    """
    completed_at = normalize_timestamp(now) if now else utc_now()
    return replace(series, status=SeriesStatus.COMPLETED, completed_at=completed_at)
