"""
Supabase storage backend for GoodNews Digest.

Implements the SubscriberStore interface on top of Supabase's PostgREST
API. Uses plain REST calls for all operations.

PostgREST Documentation: https://postgrest.org/en/stable/references/api.html

=============================================================================
SUBSCRIBERS TABLE
=============================================================================

See schema.sql at the project root.

| Column           | Type        | Description                           |
|------------------|-------------|---------------------------------------|
| email            | text unique | Subscriber identifier                 |
| interests        | text[]      | Sanitized interest tags               |
| timezone         | text        | IANA zone, default America/New_York   |
| created_at       | timestamptz | First signup                          |
| updated_at       | timestamptz | Last preference change                |
| last_digest_date | date        | Local date of the last claimed digest |

=============================================================================
"""

from datetime import date
from typing import Any, Dict, List, Optional
import requests

from goodnews.config import (
    REQUEST_TIMEOUT,
    SUPABASE_KEY,
    SUPABASE_TABLE,
    SUPABASE_URL,
)
from goodnews.models.subscriber import Subscriber, utc_now
from goodnews.storage.base import StorageError, SubscriberStore


class SupabaseSubscriberStore(SubscriberStore):
    """
    Supabase-backed subscriber store.

    Configuration is pulled from environment variables via goodnews.config:
    - SUPABASE_URL: Project URL (e.g., https://xyz.supabase.co)
    - SUPABASE_KEY: Service or anon key
    - SUPABASE_TABLE: Table name (default "subscribers")
    """

    def __init__(
        self,
        url: str = None,
        api_key: str = None,
        table_name: str = None,
    ):
        """
        Initialize SupabaseSubscriberStore.

        Args:
            url: Supabase project URL. Defaults to config.SUPABASE_URL.
            api_key: Supabase key. Defaults to config.SUPABASE_KEY.
            table_name: Table name. Defaults to config.SUPABASE_TABLE.
        """
        # Use provided values, or fall back to config if None (not empty string)
        self.url = url if url is not None else SUPABASE_URL
        self.api_key = api_key if api_key is not None else SUPABASE_KEY
        self.table_name = table_name if table_name is not None else SUPABASE_TABLE

    @property
    def name(self) -> str:
        return "supabase"

    @property
    def _base_url(self) -> str:
        """Construct the base URL for table requests."""
        return f"{self.url.rstrip('/')}/rest/v1/{self.table_name}"

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        """Construct headers for API requests."""
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.url:
            raise StorageError("SUPABASE_URL is not configured")
        if not self.api_key:
            raise StorageError("SUPABASE_KEY is not configured")
        if not self.table_name:
            raise StorageError("SUPABASE_TABLE is not configured")

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
        prefer: Optional[str] = None,
    ) -> Any:
        """
        Perform a request against the table endpoint.

        Returns:
            Decoded JSON body, or None for empty responses.

        Raises:
            StorageError: On transport or HTTP failure.
        """
        self._validate_config()

        try:
            response = requests.request(
                method,
                self._base_url,
                headers=self._headers(prefer),
                params=params,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StorageError(f"{method} {self.table_name} failed: {e}") from e

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise StorageError(f"Invalid JSON from {self.table_name}: {e}") from e

    # =========================================================================
    # Storage Interface Implementation
    # =========================================================================

    def get_all(self) -> List[Subscriber]:
        rows = self._request("GET", params={"select": "*"}) or []
        return [Subscriber.from_row(row) for row in rows if row.get("email")]

    def get_by_email(self, email: str) -> Optional[Subscriber]:
        rows = self._request(
            "GET",
            params={"select": "*", "email": f"eq.{email}", "limit": 1},
        ) or []
        if rows:
            return Subscriber.from_row(rows[0])
        return None

    def create_subscriber(self, subscriber: Subscriber) -> None:
        self._request("POST", payload=subscriber.to_row(), prefer="return=minimal")

    def update_preferences(self, email: str, interests: List[str], timezone: str) -> None:
        self._request(
            "PATCH",
            params={"email": f"eq.{email}"},
            payload={
                "interests": list(interests),
                "timezone": timezone,
                "updated_at": utc_now().isoformat(),
            },
            prefer="return=minimal",
        )

    def claim_digest(self, email: str, digest_date: date) -> bool:
        """
        Claim the digest with a single filtered PATCH.

        The row only matches while last_digest_date is null or a different
        date, so the check and the set happen in one UPDATE statement.
        """
        day = digest_date.isoformat()
        rows = self._request(
            "PATCH",
            params={
                "email": f"eq.{email}",
                "or": f"(last_digest_date.is.null,last_digest_date.neq.{day})",
            },
            payload={"last_digest_date": day},
            prefer="return=representation",
        ) or []
        return len(rows) > 0
