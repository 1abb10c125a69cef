"""
Curation module.

Classifies news articles as good news and ranks them per interest.
"""

from goodnews.curation.keywords import (
    POSITIVE_KEYWORDS,
    EXCLUDE_KEYWORDS,
    TRUSTED_SOURCES,
    CATEGORY_MAP,
    KeywordSets,
    default_keyword_sets,
    load_keyword_sets,
    get_category,
)

from goodnews.curation.classifier import (
    Classification,
    is_usable,
    article_text,
    has_positive_signal,
    is_excluded,
    is_trusted_source,
    classify,
    select_good_news,
)

__all__ = [
    # Keyword configuration
    "POSITIVE_KEYWORDS",
    "EXCLUDE_KEYWORDS",
    "TRUSTED_SOURCES",
    "CATEGORY_MAP",
    "KeywordSets",
    "default_keyword_sets",
    "load_keyword_sets",
    "get_category",
    # Classification functions
    "Classification",
    "is_usable",
    "article_text",
    "has_positive_signal",
    "is_excluded",
    "is_trusted_source",
    "classify",
    "select_good_news",
]
