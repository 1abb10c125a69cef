"""
Tests for email rendering and senders.

Tests the digest/welcome templates, the subject line, the Resend client
request shape, and the in-memory sender.
"""

import pytest
import requests
from unittest.mock import Mock, patch
from datetime import date

from goodnews.mail.renderer import (
    UNSUBSCRIBE_URL,
    digest_subject,
    render_digest_html,
    render_welcome_html,
)
from goodnews.mail.sender import (
    EmailSender,
    EmailSendError,
    MockEmailSender,
    ResendEmailSender,
)
from goodnews.models.article import DigestItem


@pytest.fixture
def digest_items():
    return [
        DigestItem(
            title="Scientists discover breakthrough cure",
            description="research finds new treatment",
            url="https://example.com/cure",
            source_name="Reuters",
            category="health",
        ),
        DigestItem(
            title="New study shows coral reef recovery",
            description="Marine biologists report progress restoring reefs",
            url="https://example.com/reefs",
            source_name="Nature",
            category="science",
        ),
    ]


# =============================================================================
# Rendering Tests
# =============================================================================

class TestDigestSubject:
    """Tests for the digest subject line."""

    def test_format(self):
        assert digest_subject(date(2026, 10, 19)) == "Your Daily GoodNews - Oct 19"

    def test_day_not_zero_padded(self):
        assert digest_subject(date(2025, 1, 5)) == "Your Daily GoodNews - Jan 5"

    def test_defaults_to_today(self):
        assert digest_subject().startswith("Your Daily GoodNews - ")


class TestRenderDigest:
    """Tests for the digest email body."""

    def test_contains_items_in_order(self, digest_items):
        html = render_digest_html(digest_items, ["health", "science"], date(2025, 1, 15))

        first = html.index("Scientists discover breakthrough cure")
        second = html.index("New study shows coral reef recovery")
        assert first < second
        assert 'href="https://example.com/cure"' in html
        assert "Source: Reuters" in html

    def test_header_date(self, digest_items):
        html = render_digest_html(digest_items, ["health"], date(2025, 1, 15))
        assert "Wednesday, January 15, 2025" in html

    def test_footer_interests_and_unsubscribe(self, digest_items):
        html = render_digest_html(digest_items, ["health", "science"], date(2025, 1, 15))

        assert "Interests: health, science" in html
        assert UNSUBSCRIBE_URL in html

    def test_empty_items_placeholder(self):
        html = render_digest_html([], ["health"], date(2025, 1, 15))
        assert "No news available today" in html

    def test_escapes_provider_text(self):
        item = DigestItem(
            title="<script>alert(1)</script>",
            description="Tom & Jerry",
            url="https://example.com",
            source_name="NPR",
            category="health",
        )

        html = render_digest_html([item], ["health"], date(2025, 1, 15))

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Tom &amp; Jerry" in html


class TestRenderWelcome:
    """Tests for the welcome email body."""

    def test_lists_interests(self):
        html = render_welcome_html(["health", "science"])

        assert "Welcome to GoodNews!" in html
        assert ">health<" in html
        assert ">science<" in html


# =============================================================================
# Sender Tests
# =============================================================================

class TestSenderInterface:

    def test_sender_is_abstract(self):
        with pytest.raises(TypeError):
            EmailSender()


class TestResendEmailSender:
    """Tests for ResendEmailSender with requests mocked out."""

    def test_request_shape(self):
        sender = ResendEmailSender(api_key="re_test")
        with patch("goodnews.mail.sender.requests.post") as mock_post:
            response = Mock()
            response.raise_for_status.return_value = None
            response.json.return_value = {"id": "email_123"}
            mock_post.return_value = response

            result = sender.send("GoodNews <a@b.dev>", "x@example.com", "Hi", "<p>Hi</p>")

            args, kwargs = mock_post.call_args
            assert args[0] == "https://api.resend.com/emails"
            assert kwargs["headers"]["Authorization"] == "Bearer re_test"
            assert kwargs["json"] == {
                "from": "GoodNews <a@b.dev>",
                "to": ["x@example.com"],
                "subject": "Hi",
                "html": "<p>Hi</p>",
            }

        assert result == {"id": "email_123"}

    def test_http_error_raises(self):
        sender = ResendEmailSender(api_key="re_test")
        with patch("goodnews.mail.sender.requests.post") as mock_post:
            response = Mock()
            response.raise_for_status.side_effect = requests.HTTPError("422 Unprocessable")
            mock_post.return_value = response

            with pytest.raises(EmailSendError):
                sender.send("a@b.dev", "x@example.com", "Hi", "<p>Hi</p>")

    def test_missing_api_key_raises(self):
        sender = ResendEmailSender(api_key="")
        with patch("goodnews.mail.sender.requests.post") as mock_post:
            with pytest.raises(EmailSendError):
                sender.send("a@b.dev", "x@example.com", "Hi", "<p>Hi</p>")
            mock_post.assert_not_called()


class TestMockEmailSender:
    """Tests for the in-memory sender."""

    def test_records_messages(self, mock_sender):
        result = mock_sender.send("a@b.dev", "x@example.com", "Hi", "<p>Hi</p>")

        assert len(mock_sender.sent) == 1
        assert mock_sender.sent[0]["to"] == "x@example.com"
        assert mock_sender.sent[0]["id"] == result["id"]

    def test_ids_unique(self, mock_sender):
        first = mock_sender.send("a@b.dev", "x@example.com", "Hi", "")
        second = mock_sender.send("a@b.dev", "x@example.com", "Hi", "")
        assert first["id"] != second["id"]

    def test_clear(self, mock_sender):
        mock_sender.send("a@b.dev", "x@example.com", "Hi", "")
        mock_sender.clear()
        assert mock_sender.sent == []
