"""
Email rendering for GoodNews Digest.

Renders the daily digest and the welcome email from Jinja2 templates in
goodnews/mail/templates/. Autoescaping is on, so article titles and
descriptions from the provider cannot inject markup.
"""

from datetime import date
from typing import List, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from goodnews.models.article import DigestItem

_env = Environment(
    loader=PackageLoader("goodnews.mail", "templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

UNSUBSCRIBE_URL = "https://goodnews.news/unsubscribe"


def _long_date(day: date) -> str:
    # e.g. "Monday, October 19, 2026"
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def digest_subject(day: Optional[date] = None) -> str:
    """Subject line for the daily digest, e.g. "Your Daily GoodNews - Oct 19"."""
    day = day or date.today()
    return f"Your Daily GoodNews - {day.strftime('%b')} {day.day}"


def render_digest_html(
    items: List[DigestItem],
    interests: List[str],
    day: Optional[date] = None,
) -> str:
    """
    Render the digest email body.

    Args:
        items: DigestItems in display order.
        interests: The subscriber's interests (shown in the footer).
        day: Date shown in the header. Defaults to today.

    Returns:
        Complete HTML document.
    """
    day = day or date.today()
    template = _env.get_template("digest.html")
    return template.render(
        items=items,
        interests=interests,
        date_label=_long_date(day),
        unsubscribe_url=UNSUBSCRIBE_URL,
    )


def render_welcome_html(interests: List[str]) -> str:
    """Render the welcome email sent after a new signup."""
    template = _env.get_template("welcome.html")
    return template.render(interests=interests)
