"""
In-memory subscriber store.

Use this when Supabase is not configured or for testing.
Data is stored in memory and lost when the process ends.
"""

import threading
from datetime import date
from typing import Dict, List, Optional

from goodnews.models.subscriber import Subscriber, utc_now
from goodnews.storage.base import StorageError, SubscriberStore


class MockSubscriberStore(SubscriberStore):
    """In-memory store keyed by email; insertion order is store order."""

    def __init__(self, subscribers: Optional[List[Subscriber]] = None):
        self._records: Dict[str, Subscriber] = {}
        self._lock = threading.Lock()
        for subscriber in subscribers or []:
            self._records[subscriber.email] = subscriber

    @property
    def name(self) -> str:
        return "mock"

    def get_all(self) -> List[Subscriber]:
        return list(self._records.values())

    def get_by_email(self, email: str) -> Optional[Subscriber]:
        return self._records.get(email)

    def create_subscriber(self, subscriber: Subscriber) -> None:
        with self._lock:
            if subscriber.email in self._records:
                raise StorageError(f"Subscriber {subscriber.email} already exists")
            self._records[subscriber.email] = subscriber

    def update_preferences(self, email: str, interests: List[str], timezone: str) -> None:
        with self._lock:
            subscriber = self._records.get(email)
            if subscriber is None:
                raise StorageError(f"Subscriber {email} not found")
            subscriber.interests = list(interests)
            subscriber.timezone = timezone
            subscriber.updated_at = utc_now()

    def claim_digest(self, email: str, digest_date: date) -> bool:
        with self._lock:
            subscriber = self._records.get(email)
            if subscriber is None or subscriber.last_digest_date == digest_date:
                return False
            subscriber.last_digest_date = digest_date
            return True

    def clear(self) -> None:
        """Clear all records (for testing)."""
        self._records.clear()

    def count(self) -> int:
        """Return number of stored records (for testing)."""
        return len(self._records)
