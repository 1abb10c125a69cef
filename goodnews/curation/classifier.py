"""
Good-news classification and ranking for GoodNews Digest.

Provides pure, side-effect-free functions to:
1. Decide whether an ArticleCandidate is usable, positive, excluded, trusted
2. Select the top good-news DigestItems for one interest tag

All functions are deterministic and do not mutate input data.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from goodnews.config import MAX_ITEMS_PER_INTEREST
from goodnews.curation.keywords import KeywordSets, default_keyword_sets
from goodnews.models.article import ArticleCandidate, DigestItem


# =============================================================================
# Result Data Structures
# =============================================================================

@dataclass
class Classification:
    """
    Per-candidate classification breakdown.

    Useful for debugging why an article did or did not make the digest.

    Attributes:
        usable: Title and description are both present.
        positive: Text mentions at least one positive keyword.
        excluded: Text or source mentions an exclusion keyword.
        trusted: Source is on the trusted list.
    """
    usable: bool
    positive: bool
    excluded: bool
    trusted: bool

    @property
    def eligible(self) -> bool:
        """Whether the candidate may become a DigestItem."""
        return self.usable and self.positive and not self.excluded


# =============================================================================
# Predicates
# =============================================================================

def _matches_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def is_usable(candidate: ArticleCandidate) -> bool:
    """Candidates without both a title and a description are dropped outright."""
    return bool((candidate.title or "").strip()) and bool((candidate.description or "").strip())


def article_text(candidate: ArticleCandidate) -> str:
    """Lowercased "title description" used for keyword matching."""
    return f"{candidate.title or ''} {candidate.description or ''}".lower()


def has_positive_signal(text: str, keywords: Optional[KeywordSets] = None) -> bool:
    """
    Check whether text contains at least one positive keyword.

    Args:
        text: Lowercased article text.
        keywords: Keyword sets (default: built-in lists).
    """
    keywords = keywords or default_keyword_sets()
    return _matches_any(text, keywords.positive)


def is_excluded(text: str, source_name: str = "", keywords: Optional[KeywordSets] = None) -> bool:
    """
    Check whether text or source name contains any exclusion keyword.

    Args:
        text: Lowercased article text.
        source_name: Publisher name (any case).
        keywords: Keyword sets (default: built-in lists).
    """
    keywords = keywords or default_keyword_sets()
    source = (source_name or "").lower()
    return any(keyword in text or keyword in source for keyword in keywords.exclude)


def is_trusted_source(source_name: str, keywords: Optional[KeywordSets] = None) -> bool:
    """Check whether the source name contains a trusted source name."""
    keywords = keywords or default_keyword_sets()
    return _matches_any((source_name or "").lower(), keywords.trusted)


def classify(candidate: ArticleCandidate, keywords: Optional[KeywordSets] = None) -> Classification:
    """
    Classify a single candidate.

    Args:
        candidate: The article to classify.
        keywords: Keyword sets (default: built-in lists).

    Returns:
        Classification breakdown.
    """
    keywords = keywords or default_keyword_sets()
    text = article_text(candidate)

    return Classification(
        usable=is_usable(candidate),
        positive=has_positive_signal(text, keywords),
        excluded=is_excluded(text, candidate.source_name, keywords),
        trusted=is_trusted_source(candidate.source_name, keywords),
    )


# =============================================================================
# Selection
# =============================================================================

def select_good_news(
    interest: str,
    candidates: list[ArticleCandidate],
    keywords: Optional[KeywordSets] = None,
    limit: int = MAX_ITEMS_PER_INTEREST,
) -> list[DigestItem]:
    """
    Select the good-news DigestItems for one interest tag.

    Steps:
    1. Drop candidates missing a title or description
    2. Keep candidates with a positive keyword and no exclusion keyword
    3. Stable sort: trusted sources first, fetch order otherwise
    4. Keep the first `limit` items, tagged with `interest` as category

    An empty list is a valid outcome (nothing to send for this interest).

    Args:
        interest: Interest tag the candidates were fetched for.
        candidates: Raw candidates in fetch order.
        keywords: Keyword sets (default: built-in lists).
        limit: Maximum items to return (default 2).

    Returns:
        List of at most `limit` DigestItems.

    Example:
        >>> c = ArticleCandidate(title="Scientists discover breakthrough cure",
        ...                      description="research finds new treatment",
        ...                      source_name="Reuters")
        >>> [i.category for i in select_good_news("health", [c])]
        ['health']
    """
    keywords = keywords or default_keyword_sets()

    eligible: list[tuple[ArticleCandidate, bool]] = []
    for candidate in candidates:
        result = classify(candidate, keywords)
        if result.eligible:
            eligible.append((candidate, result.trusted))

    # sorted() is stable, so equally-trusted items keep fetch order
    eligible = sorted(eligible, key=lambda pair: not pair[1])

    return [
        DigestItem.from_candidate(candidate, category=interest)
        for candidate, _ in eligible[:max(limit, 0)]
    ]
