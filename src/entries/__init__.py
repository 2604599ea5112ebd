"""Work items and series shared across server, client and CLI."""

from .models import (
    CATEGORY_LABELS,
    Category,
    Series,
    SeriesStatus,
    WorkItem,
    complete_series,
    new_id,
    normalize_timestamp,
)
from .repository import EntryRepository, SeriesRepository

__all__ = [
    "CATEGORY_LABELS",
    "Category",
    "EntryRepository",
    "Series",
    "SeriesRepository",
    "SeriesStatus",
    "WorkItem",
    "complete_series",
    "new_id",
    "normalize_timestamp",
]
