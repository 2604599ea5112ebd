import pytest

from src.entries import Category, Series, SeriesStatus, WorkItem


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """テスト用の一時DBパス"""
    path = tmp_path / "worklog.db"
    monkeypatch.setenv("WORKLOG_DB_PATH", str(path))
    return path


@pytest.fixture
def make_item():
    def _make(item_id="item-1", category=Category.WORK, minutes=30, date="2025-11-10T09:00:00+00:00", **kwargs):
        return WorkItem(
            id=item_id,
            content=kwargs.pop("content", f"content of {item_id}"),
            category=category,
            date=date,
            duration_minutes=minutes,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_series():
    def _make(series_id="series-1", created_at="2025-11-01T00:00:00+00:00", **kwargs):
        return Series(
            id=series_id,
            title=kwargs.pop("title", f"Series {series_id}"),
            description=kwargs.pop("description", "long running topic"),
            status=kwargs.pop("status", SeriesStatus.ACTIVE),
            created_at=created_at,
            **kwargs,
        )

    return _make
