"""
Storage module.

Handles persistence and retrieval of subscribers via Supabase or other backends.
"""

from goodnews.storage.base import StorageError, SubscriberStore, UpsertResult
from goodnews.storage.supabase import SupabaseSubscriberStore
from goodnews.storage.memory import MockSubscriberStore

__all__ = [
    "StorageError",
    "SubscriberStore",
    "UpsertResult",
    "SupabaseSubscriberStore",
    "MockSubscriberStore",
]
