"""
Base news provider abstraction for GoodNews Digest.

Defines the abstract interface that all news providers must implement.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List

from goodnews.models.article import ArticleCandidate


class NewsProviderError(Exception):
    """Raised when a news provider request fails."""


class NewsProvider(ABC):
    """
    Abstract base class for news-search providers.

    A provider offers two ways of getting candidates:
    - Top headlines for a fixed category (breaking news)
    - Free-text search over recent articles

    Attributes:
        name: Unique identifier for this provider (e.g., "newsapi").
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the unique name identifier for this provider.

        Used as the log prefix. Should be lowercase, no spaces.
        """
        pass

    @abstractmethod
    def fetch_top_headlines(
        self,
        category: str,
        page_size: int,
        country: str = "us",
    ) -> List[ArticleCandidate]:
        """
        Fetch recent breaking articles in a category.

        Args:
            category: Provider category (e.g., "technology", "health").
            page_size: Maximum number of candidates to return.
            country: Two-letter country code.

        Returns:
            Candidates in provider order.

        Raises:
            NewsProviderError: If the request fails.
        """
        pass

    @abstractmethod
    def fetch_everything(
        self,
        query: str,
        since: date,
        page_size: int,
    ) -> List[ArticleCandidate]:
        """
        Search all articles matching a free-text query.

        Args:
            query: Search string.
            since: Earliest publish date to include.
            page_size: Maximum number of candidates to return.

        Returns:
            Candidates sorted by publish time, newest first.

        Raises:
            NewsProviderError: If the request fails.
        """
        pass

    def __str__(self) -> str:
        return f"NewsProvider({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
