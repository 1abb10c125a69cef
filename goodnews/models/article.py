"""
Article models for GoodNews Digest.

ArticleCandidate is a raw article as returned by the news provider. It is
never persisted. DigestItem is a candidate that passed curation, annotated
with the interest tag it was matched under.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional


@dataclass
class ArticleCandidate:
    """
    A raw article fetched from the news provider, pre-filtering.

    Attributes:
        title: Headline (may be empty; such candidates are unusable).
        description: Short summary (may be empty; such candidates are unusable).
        url: Link to the article.
        source_name: Publisher name as reported by the provider.
        published_at: Publish time, if the provider reported one.
        image_url: Optional lead image.
    """

    title: str = ""
    description: str = ""
    url: str = ""
    source_name: str = ""
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None

    @classmethod
    def from_newsapi(cls, raw: dict) -> "ArticleCandidate":
        """
        Build a candidate from a NewsAPI article payload.

        NewsAPI article structure:
        {
            "source": {"id": "reuters", "name": "Reuters"},
            "title": "...",
            "description": "...",
            "url": "https://...",
            "urlToImage": "https://...",
            "publishedAt": "2025-01-01T07:00:00Z"
        }
        """
        source = raw.get("source") or {}

        published_at = None
        if raw.get("publishedAt"):
            try:
                published_at = datetime.fromisoformat(raw["publishedAt"].replace("Z", "+00:00"))
            except (ValueError, AttributeError):
                pass

        return cls(
            title=raw.get("title") or "",
            description=raw.get("description") or "",
            url=raw.get("url") or "",
            source_name=source.get("name") or "",
            published_at=published_at,
            image_url=raw.get("urlToImage"),
        )


@dataclass
class DigestItem:
    """A curated article ready to be rendered into a digest email."""

    title: str
    description: str
    url: str
    source_name: str
    category: str
    image_url: Optional[str] = None

    @classmethod
    def from_candidate(cls, candidate: ArticleCandidate, category: str) -> "DigestItem":
        return cls(
            title=candidate.title,
            description=candidate.description,
            url=candidate.url,
            source_name=candidate.source_name,
            category=category,
            image_url=candidate.image_url,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return f"[{self.category}] {self.title} ({self.source_name})"
