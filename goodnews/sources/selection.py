"""
Source selection for GoodNews Digest.

Decides which provider call to make for an interest tag and turns the
resulting candidates into DigestItems:

    interest -> category?  yes -> top headlines (country "us")
                           no  -> free-text search, last 24 hours, newest first

At most MAX_INTERESTS_PER_DIGEST interests are consulted per digest build,
and a provider failure for one interest never affects the others.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from goodnews.config import MAX_INTERESTS_PER_DIGEST, NEWS_PAGE_SIZE
from goodnews.curation.classifier import select_good_news
from goodnews.curation.keywords import KeywordSets, get_category
from goodnews.models.article import ArticleCandidate, DigestItem
from goodnews.sources.base import NewsProvider

HEADLINES_COUNTRY = "us"
SEARCH_LOOKBACK = timedelta(hours=24)


def fetch_candidates(
    provider: NewsProvider,
    interest: str,
    now: Optional[datetime] = None,
    page_size: int = NEWS_PAGE_SIZE,
) -> List[ArticleCandidate]:
    """
    Fetch raw candidates for one interest tag.

    Args:
        provider: News provider to query.
        interest: Interest tag.
        now: Current time (for testing). Defaults to now in UTC.
        page_size: Candidates per request (default 20).

    Returns:
        Candidates in provider order.

    Raises:
        NewsProviderError: Propagated from the provider.
    """
    category = get_category(interest)
    if category:
        return provider.fetch_top_headlines(category, page_size, HEADLINES_COUNTRY)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    since = (now.astimezone(timezone.utc) - SEARCH_LOOKBACK).date()
    return provider.fetch_everything(interest, since, page_size)


def fetch_good_news(
    provider: NewsProvider,
    interests: List[str],
    keywords: Optional[KeywordSets] = None,
    now: Optional[datetime] = None,
    max_interests: int = MAX_INTERESTS_PER_DIGEST,
) -> List[DigestItem]:
    """
    Build the digest items for a list of interests.

    Only the first `max_interests` interests are consulted. Errors for a
    single interest are logged and that interest contributes nothing.

    Args:
        provider: News provider to query.
        interests: Subscriber interests, in preference order.
        keywords: Keyword sets (default: built-in lists).
        now: Current time (for testing).
        max_interests: Interest cap (default 3).

    Returns:
        DigestItems concatenated in interest order (may be empty).
    """
    items: List[DigestItem] = []

    for interest in interests[:max_interests]:
        try:
            candidates = fetch_candidates(provider, interest, now=now)
            selected = select_good_news(interest, candidates, keywords)
        except Exception as e:
            print(f"[{provider.name}] Error fetching news for {interest!r}: {type(e).__name__}: {e}")
            continue

        print(f"[{provider.name}] {interest!r}: {len(selected)} of {len(candidates)} candidates selected")
        items.extend(selected)

    return items
