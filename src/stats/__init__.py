"""Dashboard statistics over work items."""

from .aggregator import (
    ACTIVITY_WINDOW_DAYS,
    WEEKDAY_LABELS,
    JournalStats,
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

__all__ = [
    "ACTIVITY_WINDOW_DAYS",
    "WEEKDAY_LABELS",
    "JournalStats",
    "activity_level",
    "activity_map",
    "category_distribution",
    "category_totals",
    "compute_stats",
    "filter_items",
    "items_in_range",
    "total_minutes",
    "weekday_distribution",
]
