"""
Data models module.

Defines data structures for subscribers, article candidates and digest items.
"""

from goodnews.models.subscriber import Subscriber
from goodnews.models.article import ArticleCandidate, DigestItem

__all__ = [
    "Subscriber",
    "ArticleCandidate",
    "DigestItem",
]
