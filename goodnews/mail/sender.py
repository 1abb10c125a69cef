"""
Email senders for GoodNews Digest.

ResendEmailSender talks to the Resend REST API.
API Documentation: https://resend.com/docs/api-reference/emails/send-email
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import uuid
import requests

from goodnews.config import RESEND_API_KEY, REQUEST_TIMEOUT


class EmailSendError(Exception):
    """Raised when an email could not be handed to the transport."""


class EmailSender(ABC):
    """Abstract base class for outbound email transports."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def send(self, from_address: str, to_address: str, subject: str, html: str) -> Dict[str, str]:
        """
        Send one HTML email.

        Returns:
            Dict with the transport message "id".

        Raises:
            EmailSendError: If the transport rejects the message.
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class ResendEmailSender(EmailSender):
    """Sends email through Resend."""

    API_URL = "https://api.resend.com/emails"

    def __init__(self, api_key: Optional[str] = None):
        """
        Args:
            api_key: Resend API key. Defaults to config.RESEND_API_KEY.
        """
        self.api_key = api_key if api_key is not None else RESEND_API_KEY

    @property
    def name(self) -> str:
        return "resend"

    def send(self, from_address: str, to_address: str, subject: str, html: str) -> Dict[str, str]:
        if not self.api_key:
            raise EmailSendError("RESEND_API_KEY is not configured")

        try:
            response = requests.post(
                self.API_URL,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": from_address,
                    "to": [to_address],
                    "subject": subject,
                    "html": html,
                },
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise EmailSendError(f"Resend rejected email to {to_address}: {e}") from e
        except ValueError as e:
            raise EmailSendError(f"Invalid JSON from Resend: {e}") from e

        return {"id": data.get("id", "")}


class MockEmailSender(EmailSender):
    """
    In-memory sender for testing and development.

    Every message is recorded in `sent` instead of being delivered.
    """

    def __init__(self):
        self.sent: List[Dict[str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    def send(self, from_address: str, to_address: str, subject: str, html: str) -> Dict[str, str]:
        message_id = str(uuid.uuid4())
        self.sent.append({
            "id": message_id,
            "from": from_address,
            "to": to_address,
            "subject": subject,
            "html": html,
        })
        print(f"[{self.name}] Email to {to_address}: {subject}")
        return {"id": message_id}

    def clear(self) -> None:
        """Forget recorded messages (for testing)."""
        self.sent.clear()
