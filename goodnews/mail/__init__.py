"""
Mail module.

Renders digest and welcome emails and hands them to an email transport.
"""

from goodnews.mail.sender import (
    EmailSender,
    EmailSendError,
    ResendEmailSender,
    MockEmailSender,
)
from goodnews.mail.renderer import (
    digest_subject,
    render_digest_html,
    render_welcome_html,
)

__all__ = [
    "EmailSender",
    "EmailSendError",
    "ResendEmailSender",
    "MockEmailSender",
    "digest_subject",
    "render_digest_html",
    "render_welcome_html",
]
