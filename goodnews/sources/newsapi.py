"""
NewsAPI.org provider implementation.

Fetches candidates from the NewsAPI v2 REST API.
API Documentation: https://newsapi.org/docs
"""

from datetime import date
from typing import List, Optional
import requests

from goodnews.config import NEWS_API_BASE_URL, NEWS_API_KEY, REQUEST_TIMEOUT
from goodnews.models.article import ArticleCandidate
from goodnews.sources.base import NewsProvider, NewsProviderError


class NewsAPIProvider(NewsProvider):
    """
    Fetches candidates from NewsAPI.org.

    - /top-headlines for mapped categories (English, one country)
    - /everything for free-text queries (English, newest first)

    Any HTTP error, unparsable body, or a response with status != "ok"
    raises NewsProviderError. Articles are returned unfiltered; curation
    happens downstream.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        """
        Initialize NewsAPIProvider.

        Args:
            api_key: NewsAPI key. Defaults to config.NEWS_API_KEY.
            base_url: API base URL. Defaults to config.NEWS_API_BASE_URL.
        """
        self.api_key = api_key if api_key is not None else NEWS_API_KEY
        self.base_url = (base_url if base_url is not None else NEWS_API_BASE_URL).rstrip("/")

    @property
    def name(self) -> str:
        return "newsapi"

    @property
    def _headers(self) -> dict:
        return {"X-Api-Key": self.api_key}

    def fetch_top_headlines(
        self,
        category: str,
        page_size: int,
        country: str = "us",
    ) -> List[ArticleCandidate]:
        params = {
            "category": category,
            "language": "en",
            "pageSize": page_size,
            "country": country,
        }
        return self._get("top-headlines", params)

    def fetch_everything(
        self,
        query: str,
        since: date,
        page_size: int,
    ) -> List[ArticleCandidate]:
        params = {
            "q": query,
            "language": "en",
            "sortBy": "publishedAt",
            "from": since.isoformat(),
            "pageSize": page_size,
        }
        return self._get("everything", params)

    def _get(self, endpoint: str, params: dict) -> List[ArticleCandidate]:
        """
        Call a NewsAPI endpoint and normalize its articles.

        Args:
            endpoint: Path below the base URL (e.g., "everything").
            params: Query parameters.

        Returns:
            List of ArticleCandidate instances.

        Raises:
            NewsProviderError: On transport, HTTP or API-level failure.
        """
        if not self.api_key:
            raise NewsProviderError("NEWS_API_KEY is not configured")

        try:
            response = requests.get(
                f"{self.base_url}/{endpoint}",
                headers=self._headers,
                params=params,
                timeout=REQUEST_TIMEOUT,
            )
            data = response.json()
        except requests.RequestException as e:
            raise NewsProviderError(f"Request to {endpoint} failed: {e}") from e
        except ValueError as e:
            raise NewsProviderError(f"Invalid JSON from {endpoint}: {e}") from e

        if data.get("status") != "ok":
            message = data.get("message") or f"HTTP {response.status_code}"
            raise NewsProviderError(f"{endpoint} returned an error: {message}")

        articles = data.get("articles") or []
        return [ArticleCandidate.from_newsapi(raw) for raw in articles if isinstance(raw, dict)]


class MockNewsProvider(NewsProvider):
    """
    In-memory provider for testing and development.

    Returns canned candidates keyed by category or query and records every
    call made. A key mapped to an Exception instance raises it.
    """

    def __init__(
        self,
        headlines: Optional[dict] = None,
        searches: Optional[dict] = None,
    ):
        self.headlines = headlines or {}
        self.searches = searches or {}
        self.calls: list[tuple] = []

    @property
    def name(self) -> str:
        return "mock"

    def fetch_top_headlines(self, category, page_size, country="us"):
        self.calls.append(("top-headlines", category, page_size, country))
        return self._lookup(self.headlines, category, page_size)

    def fetch_everything(self, query, since, page_size):
        self.calls.append(("everything", query, since, page_size))
        return self._lookup(self.searches, query, page_size)

    @staticmethod
    def _lookup(table: dict, key: str, page_size: int) -> List[ArticleCandidate]:
        value = table.get(key, [])
        if isinstance(value, Exception):
            raise value
        return list(value)[:page_size]
