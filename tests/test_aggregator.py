from datetime import date, datetime, timezone

from src.entries import Category
from src.stats import (
    activity_level,
    activity_map,
    category_distribution,
    category_totals,
    compute_stats,
    filter_items,
    items_in_range,
    total_minutes,
    weekday_distribution,
)


def test_category_distribution_and_total(make_item):
    items = [
        make_item("a", category=Category.WORK, minutes=30),
        make_item("b", category=Category.WORK, minutes=10),
        make_item("c", category=Category.LIFE, minutes=5),
    ]

    assert category_totals(items) == {"Work": 40, "Life": 5}
    assert total_minutes(items) == 45
    assert [(b["name"], b["value"]) for b in category_distribution(items)] == [
        ("Life", 5),
        ("Work", 40),
    ]


def test_zero_minute_categories_are_excluded(make_item):
    items = [make_item("a", category=Category.IDEA, minutes=0)]
    assert category_totals(items) == {}
    assert category_distribution(items) == []


def test_weekday_buckets_always_complete():
    buckets = weekday_distribution([])
    assert [b["day"] for b in buckets] == list(range(7))
    assert all(b["minutes"] == 0 for b in buckets)
    assert buckets[0]["name"] == "日曜"


def test_weekday_distribution_uses_sunday_zero(make_item):
    items = [
        make_item("sun", minutes=20, date="2025-11-09T12:00:00+00:00"),  # Sunday
        make_item("mon", minutes=15, date="2025-11-10T12:00:00+00:00"),  # Monday
        make_item("sat", minutes=5, date="2025-11-15T12:00:00+00:00"),  # Saturday
    ]
    minutes = [b["minutes"] for b in weekday_distribution(items)]
    assert minutes == [20, 15, 0, 0, 0, 0, 5]


def test_activity_map_covers_padded_window(make_item):
    today = date(2025, 11, 12)  # Wednesday
    items = [
        make_item("a", date="2025-11-12T08:00:00+00:00"),
        make_item("b", date="2025-11-12T20:00:00+00:00"),
        make_item("c", date="2025-11-10T08:00:00+00:00"),
        make_item("ancient", date="2020-01-01T08:00:00+00:00"),
    ]

    activity = activity_map(items, today=today)
    days = list(activity)

    assert date.fromisoformat(days[0]).weekday() == 0  # Monday
    assert date.fromisoformat(days[-1]).weekday() == 6  # Sunday
    assert days[-1] == "2025-11-16"
    assert len(days) % 7 == 0
    assert activity["2025-11-12"] == 2
    assert activity["2025-11-10"] == 1
    assert activity["2025-11-11"] == 0
    assert sum(activity.values()) == 3


def test_activity_level_scale():
    assert [activity_level(n) for n in (0, 1, 2, 3, 4, 10)] == [0, 1, 2, 2, 3, 3]


def test_compute_stats_bundle(make_item):
    stats = compute_stats([make_item("a", minutes=25)])
    assert stats.total_minutes == 25
    assert stats.to_dict()["categoryDistribution"][0]["value"] == 25
    assert len(stats.daily_distribution) == 7


def test_filter_items_searches_content_title_and_label(make_item):
    items = [
        make_item("a", content="Read about Python typing"),
        make_item("b", content="walk", title="Evening PYTHON"),
        make_item("c", category=Category.LIFE, content="dinner"),
    ]
    assert [i.id for i in filter_items(items, "python")] == ["a", "b"]
    assert [i.id for i in filter_items(items, "生活")] == ["c"]
    assert len(filter_items(items, "")) == 3


def test_items_in_range(make_item):
    items = [
        make_item("in", date="2025-11-12T08:00:00+00:00"),
        make_item("out", date="2025-11-20T08:00:00+00:00"),
    ]
    start = datetime(2025, 11, 10, tzinfo=timezone.utc)
    end = datetime(2025, 11, 16, 23, 59)
    assert [i.id for i in items_in_range(items, start, end)] == ["in"]
