"""Display statistics derived from an in-memory list of work items.

Everything here is a pure function: no persistence, no caching.  The
dashboard recomputes from scratch on every change, which is fine for the
few thousand entries a personal journal accumulates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Iterable, Optional, Sequence

from src.entries.models import CATEGORY_LABELS, Category, WorkItem

ACTIVITY_WINDOW_DAYS = 112  # 16 weeks

# Index matches the 0=Sunday..6=Saturday convention.
WEEKDAY_LABELS = ("日曜", "月曜", "火曜", "水曜", "木曜", "金曜", "土曜")


def _local_date(item: WorkItem, tz: Optional[tzinfo]) -> date:
    return item.timestamp.astimezone(tz or timezone.utc).date()


def _sunday_index(day: date) -> int:
    # date.weekday() is Monday=0
    return (day.weekday() + 1) % 7


def total_minutes(items: Iterable[WorkItem]) -> int:
    return sum(item.duration_minutes for item in items)


def activity_window(today: date, window_days: int = ACTIVITY_WINDOW_DAYS) -> tuple[date, date]:
    """Heatmap bounds padded to whole Monday-start weeks."""
    start = today - timedelta(days=window_days)
    start -= timedelta(days=start.weekday())
    end = today + timedelta(days=6 - today.weekday())
    return start, end


def activity_map(
    items: Iterable[WorkItem],
    today: Optional[date] = None,
    window_days: int = ACTIVITY_WINDOW_DAYS,
    tz: Optional[tzinfo] = None,
) -> dict[str, int]:
    """Entry count per calendar day, every day of the window present."""
    today = today or datetime.now(tz or timezone.utc).date()
    start, end = activity_window(today, window_days)

    counts: dict[str, int] = {}
    day = start
    while day <= end:
        counts[day.isoformat()] = 0
        day += timedelta(days=1)

    for item in items:
        key = _local_date(item, tz).isoformat()
        if key in counts:
            counts[key] += 1
    return counts


def activity_level(count: int) -> int:
    """Heat level 0..3 used to shade a heatmap cell."""
    if count <= 0:
        return 0
    if count == 1:
        return 1
    if count <= 3:
        return 2
    return 3


def category_totals(items: Iterable[WorkItem]) -> dict[str, int]:
    """Minutes per category name; categories with no time are left out."""
    totals = {category.value: 0 for category in Category}
    for item in items:
        totals[item.category.value] += item.duration_minutes
    return {name: minutes for name, minutes in totals.items() if minutes > 0}


def category_distribution(items: Iterable[WorkItem]) -> list[dict[str, Any]]:
    totals = category_totals(items)
    return [
        {"name": category.value, "label": CATEGORY_LABELS[category], "value": totals[category.value]}
        for category in Category
        if category.value in totals
    ]


def weekday_distribution(items: Iterable[WorkItem], tz: Optional[tzinfo] = None) -> list[dict[str, Any]]:
    """Minutes per weekday.  All seven buckets are always returned."""
    minutes = [0] * 7
    for item in items:
        minutes[_sunday_index(_local_date(item, tz))] += item.duration_minutes
    return [
        {"day": index, "name": WEEKDAY_LABELS[index], "minutes": minutes[index]}
        for index in range(7)
    ]


def filter_items(items: Sequence[WorkItem], query: str) -> list[WorkItem]:
    """Case-insensitive search over content, title and category label."""
    if not query:
        return list(items)
    needle = query.lower()
    return [
        item
        for item in items
        if needle in item.content.lower()
        or (item.title and needle in item.title.lower())
        or query in item.category.label
        or needle == item.category.value.lower()
    ]


def items_in_range(items: Iterable[WorkItem], start: datetime, end: datetime) -> list[WorkItem]:
    """Items whose timestamp falls in [start, end]; naive bounds are UTC."""
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    return [item for item in items if start <= item.timestamp <= end]


@dataclass
class JournalStats:
    total_minutes: int = 0
    category_distribution: list[dict[str, Any]] = field(default_factory=list)
    daily_distribution: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalMinutes": self.total_minutes,
            "categoryDistribution": self.category_distribution,
            "dailyDistribution": self.daily_distribution,
        }


def compute_stats(items: Sequence[WorkItem], tz: Optional[tzinfo] = None) -> JournalStats:
    return JournalStats(
        total_minutes=total_minutes(items),
        category_distribution=category_distribution(items),
        daily_distribution=weekday_distribution(items, tz),
    )
