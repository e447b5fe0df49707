"""Synchronization, filtering and caching services behind the view.

The store owns session state, the filter pipeline derives the visible list,
and the detail cache serves lazily fetched per-selection payloads.
"""

from .detail_cache import DetailCache
from .filter_pipeline import FilterCriteria, filter_catalog
from .sync_store import SyncState, SyncStatus, SyncStore, favorite_ids

__all__ = [
    "DetailCache",
    "FilterCriteria",
    "SyncState",
    "SyncStatus",
    "SyncStore",
    "favorite_ids",
    "filter_catalog",
]
