from unittest.mock import MagicMock

import pytest

from src.client import JournalSyncCache, LocalJournalStore
from src.entries import SeriesStatus
from src.worklog.exceptions import NotFoundError


@pytest.fixture
def cache(tmp_path):
    return JournalSyncCache(LocalJournalStore(tmp_path / "store.json"))


def test_mutations_refetch_collections(cache, make_item):
    cache.save_item(make_item("a", minutes=30))
    cache.save_item(make_item("b", minutes=15))
    assert {i.id for i in cache.items} == {"a", "b"}
    assert cache.stats().total_minutes == 45

    cache.delete_item("a")
    assert [i.id for i in cache.items] == ["b"]


def test_complete_series(cache, make_series, make_item):
    cache.save_series(make_series("s-1"))
    cache.save_series(make_series("s-2", created_at="2025-11-02T00:00:00+00:00"))
    cache.save_item(make_item("a", series_id="s-1"))

    cache.complete_series("s-1", now="2025-12-01T00:00:00Z")

    done = cache.get_series("s-1")
    assert done.status is SeriesStatus.COMPLETED
    assert done.completed_at == "2025-12-01T00:00:00+00:00"
    assert [s.id for s in cache.active_series()] == ["s-2"]
    assert [i.id for i in cache.items_for_series("s-1")] == ["a"]

    with pytest.raises(NotFoundError):
        cache.complete_series("missing")


def test_each_mutation_is_one_call_then_refetch(make_item):
    backend = MagicMock()
    backend.list_items.return_value = []
    cache = JournalSyncCache(backend)

    cache.save_item(make_item("a"))

    backend.upsert_item.assert_called_once()
    backend.list_items.assert_called_once_with()
    backend.list_series.assert_not_called()


def test_backend_errors_propagate(make_item):
    backend = MagicMock()
    backend.upsert_item.side_effect = RuntimeError("offline")
    cache = JournalSyncCache(backend)

    with pytest.raises(RuntimeError):
        cache.save_item(make_item("a"))
    backend.list_items.assert_not_called()


def test_clear(cache, make_item):
    cache.save_item(make_item("a"))
    cache.clear()
    assert cache.items == []
    cache.refresh()
    assert [i.id for i in cache.items] == ["a"]
