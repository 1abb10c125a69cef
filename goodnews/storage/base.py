"""
Base storage abstraction for GoodNews Digest.

Defines the abstract interface that all subscriber stores must implement.
This allows swapping between Supabase, an in-memory store, etc.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from goodnews.models.subscriber import Subscriber, utc_now


class StorageError(Exception):
    """Raised when the subscriber store cannot complete a request."""


@dataclass
class UpsertResult:
    """
    Result of an upsert operation.

    A failed write raises StorageError instead of being counted here.

    Attributes:
        inserted: Number of new records created.
        updated: Number of existing records updated.
    """
    inserted: int = 0
    updated: int = 0

    @property
    def created(self) -> bool:
        """True when the upsert created a new subscriber."""
        return self.inserted > 0

    def __str__(self) -> str:
        return f"UpsertResult(inserted={self.inserted}, updated={self.updated})"


class SubscriberStore(ABC):
    """
    Abstract base class for all subscriber stores.

    Implementations must provide methods for:
    - Listing all subscribers
    - Looking up one subscriber by email (case-sensitive)
    - Creating a subscriber and updating its preferences
    - Atomically claiming the daily digest for a subscriber

    Subscribers are keyed by email: there is never more than one row per
    email address.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.

        Used for logging and debugging.
        """
        pass

    @abstractmethod
    def get_all(self) -> List[Subscriber]:
        """
        Retrieve every subscriber, in store order.

        Raises:
            StorageError: If the store cannot be read.
        """
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Subscriber]:
        """
        Retrieve a single subscriber by exact email.

        Returns:
            Subscriber if found, None otherwise.

        Raises:
            StorageError: If the store cannot be read.
        """
        pass

    @abstractmethod
    def create_subscriber(self, subscriber: Subscriber) -> None:
        """
        Insert a new subscriber row.

        Raises:
            StorageError: If the insert fails (including duplicate email).
        """
        pass

    @abstractmethod
    def update_preferences(self, email: str, interests: List[str], timezone: str) -> None:
        """
        Update interests, timezone and updated_at of an existing subscriber.

        Raises:
            StorageError: If the update fails.
        """
        pass

    @abstractmethod
    def claim_digest(self, email: str, digest_date: date) -> bool:
        """
        Atomically record that today's digest is being sent.

        Sets last_digest_date to `digest_date` only if it is not already
        that date. Concurrent callers for the same email and date see
        exactly one True.

        Args:
            email: Subscriber email.
            digest_date: The subscriber's local calendar date.

        Returns:
            True if this call claimed the digest, False if it was already claimed.

        Raises:
            StorageError: If the store cannot be updated.
        """
        pass

    def upsert(self, email: str, interests: List[str], timezone: str) -> UpsertResult:
        """
        Create the subscriber, or update its preferences if the email exists.

        This operation is idempotent: repeating a signup with the same email
        updates the single existing row instead of adding a duplicate.

        Args:
            email: Subscriber email.
            interests: Sanitized interests.
            timezone: IANA timezone name.

        Returns:
            UpsertResult with inserted=1 or updated=1.

        Raises:
            StorageError: If the lookup or the write fails.
        """
        result = UpsertResult()

        if self.get_by_email(email) is not None:
            self.update_preferences(email, interests, timezone)
            result.updated += 1
        else:
            now = utc_now()
            self.create_subscriber(Subscriber(
                email=email,
                interests=list(interests),
                timezone=timezone,
                created_at=now,
                updated_at=now,
            ))
            result.inserted += 1

        return result

    def __str__(self) -> str:
        return f"SubscriberStore({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
