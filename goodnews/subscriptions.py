"""
Signup handling for GoodNews Digest.

Validates and sanitizes a signup request, then creates the subscriber or
updates the preferences of an existing one. New subscribers get a welcome
email; a failed welcome email never fails the signup.
"""

from dataclasses import dataclass
import re
from typing import Any, List

from goodnews.config import DEFAULT_TIMEZONE, EMAIL_FROM
from goodnews.mail.renderer import render_welcome_html
from goodnews.mail.sender import EmailSender
from goodnews.storage.base import SubscriberStore

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MAX_EMAIL_LENGTH = 254
MAX_INTERESTS = 10
MAX_INTEREST_LENGTH = 50
MAX_TIMEZONE_LENGTH = 50

_INTEREST_DISALLOWED = re.compile(r"[^a-z0-9\s-]")

MESSAGE_CREATED = "Successfully subscribed!"
MESSAGE_UPDATED = "Preferences updated successfully!"
WELCOME_SUBJECT = "Welcome to GoodNews!"


class ValidationError(ValueError):
    """Signup input rejected; the message is safe to show to the user."""


@dataclass
class SignupResult:
    """Outcome of a successful signup."""
    email: str
    interests: List[str]
    timezone: str
    created: bool

    @property
    def message(self) -> str:
        return MESSAGE_CREATED if self.created else MESSAGE_UPDATED


def is_valid_email(email: Any) -> bool:
    """Basic shape check: something@something.tld, at most 254 chars."""
    if not isinstance(email, str) or not email:
        return False
    return bool(EMAIL_PATTERN.fullmatch(email)) and len(email) <= MAX_EMAIL_LENGTH


def sanitize_interests(interests: Any) -> List[str]:
    """
    Normalize raw interests.

    - Non-list input yields no interests
    - Only the first 10 entries are considered
    - Lowercased, characters outside [a-z0-9 whitespace -] removed,
      truncated to 50 chars
    - Entries that end up empty are dropped
    """
    if not isinstance(interests, list):
        return []

    cleaned = []
    for raw in interests[:MAX_INTERESTS]:
        interest = _INTEREST_DISALLOWED.sub("", str(raw).lower())[:MAX_INTEREST_LENGTH]
        if interest:
            cleaned.append(interest)
    return cleaned


def sanitize_timezone(timezone: Any) -> str:
    """Default to DEFAULT_TIMEZONE; otherwise stringify and cap at 50 chars."""
    return str(timezone or DEFAULT_TIMEZONE)[:MAX_TIMEZONE_LENGTH]


def subscribe(
    store: SubscriberStore,
    sender: EmailSender,
    email: Any,
    interests: Any,
    timezone: Any = None,
) -> SignupResult:
    """
    Create or update a subscription.

    Validation happens before any store or email call.

    Args:
        store: Subscriber store.
        sender: Email transport for the welcome email.
        email: Raw email from the request.
        interests: Raw interests from the request.
        timezone: Raw timezone from the request.

    Returns:
        SignupResult (created=False when preferences were updated).

    Raises:
        ValidationError: Invalid email or no usable interests.
        StorageError: Propagated from the store.
    """
    if not is_valid_email(email):
        raise ValidationError("Valid email required")

    clean_interests = sanitize_interests(interests)
    if not clean_interests:
        raise ValidationError("At least one interest required")

    clean_timezone = sanitize_timezone(timezone)

    upsert_result = store.upsert(email, clean_interests, clean_timezone)
    created = upsert_result.created

    if created:
        print(f"[signup] New subscriber {email} ({', '.join(clean_interests)})")
        _send_welcome(sender, email, clean_interests)
    else:
        print(f"[signup] Updated preferences for {email}")

    return SignupResult(
        email=email,
        interests=clean_interests,
        timezone=clean_timezone,
        created=created,
    )


def _send_welcome(sender: EmailSender, email: str, interests: List[str]) -> None:
    try:
        sender.send(EMAIL_FROM, email, WELCOME_SUBJECT, render_welcome_html(interests))
        print(f"[signup] Welcome email sent to {email}")
    except Exception as e:
        print(f"[signup] Error sending welcome email to {email}: {type(e).__name__}: {e}")
