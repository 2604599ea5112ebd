"""Client-side access to the journal: API client, local store, sync cache, timer."""

from .api_client import Session, WorklogApiClient, login, register
from .local_store import LocalJournalStore
from .sync_cache import JournalSyncCache
from .timer import WorkTimer

__all__ = [
    "JournalSyncCache",
    "LocalJournalStore",
    "Session",
    "WorkTimer",
    "WorklogApiClient",
    "login",
    "register",
]
