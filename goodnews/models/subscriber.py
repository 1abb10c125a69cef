"""
Subscriber model for GoodNews Digest.

One Subscriber per email address. Created on first signup and updated in
place (interests, timezone, updated_at) on every later signup with the
same email.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

DEFAULT_SUBSCRIBER_TIMEZONE = "America/New_York"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


@dataclass
class Subscriber:
    """
    A digest subscriber.

    Attributes:
        email: Unique identifier (case-sensitive).
        interests: Sanitized interest tags, in signup order.
        timezone: IANA timezone name used to find the local delivery time.
        created_at: When the subscriber first signed up.
        updated_at: When preferences were last changed.
        last_digest_date: Local date of the last claimed digest, if any.
    """

    email: str
    interests: list[str] = field(default_factory=list)
    timezone: str = DEFAULT_SUBSCRIBER_TIMEZONE
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    last_digest_date: Optional[date] = None

    def __post_init__(self) -> None:
        if not self.email or not self.email.strip():
            raise ValueError("Subscriber validation failed: email is required")
        if not self.timezone:
            self.timezone = DEFAULT_SUBSCRIBER_TIMEZONE

    def to_row(self) -> dict:
        """Convert to a store row (ISO strings for timestamps)."""
        return {
            "email": self.email,
            "interests": list(self.interests),
            "timezone": self.timezone,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "last_digest_date": self.last_digest_date.isoformat() if self.last_digest_date else None,
        }

    @classmethod
    def from_row(cls, row: dict) -> "Subscriber":
        """
        Create a Subscriber from a store row.

        Missing timestamps default to now; a missing timezone falls back to
        the default zone.
        """
        now = utc_now()
        return cls(
            email=row.get("email", ""),
            interests=list(row.get("interests") or []),
            timezone=row.get("timezone") or DEFAULT_SUBSCRIBER_TIMEZONE,
            created_at=_parse_timestamp(row.get("created_at")) or now,
            updated_at=_parse_timestamp(row.get("updated_at")) or now,
            last_digest_date=_parse_date(row.get("last_digest_date")),
        )

    def __str__(self) -> str:
        return f"{self.email} ({self.timezone}) interests={self.interests}"
