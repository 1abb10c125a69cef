"""
News sources module.

News provider clients and the per-interest source selection strategy.
"""

from goodnews.sources.base import NewsProvider, NewsProviderError
from goodnews.sources.newsapi import NewsAPIProvider, MockNewsProvider
from goodnews.sources.selection import fetch_candidates, fetch_good_news

__all__ = [
    "NewsProvider",
    "NewsProviderError",
    "NewsAPIProvider",
    "MockNewsProvider",
    "fetch_candidates",
    "fetch_good_news",
]
