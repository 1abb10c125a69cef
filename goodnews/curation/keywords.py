"""
Keyword configuration for GoodNews Digest.

This file is the single source of truth for what counts as "good news".
The lists are used for three purposes:
1. Positivity: an article must mention at least one POSITIVE_KEYWORDS entry
2. Exclusion: an article is rejected if its text or source name mentions
   any EXCLUDE_KEYWORDS entry (exclusion wins over positivity)
3. Ranking: articles from TRUSTED_SOURCES sort first (never a filter)

CUSTOMIZATION:

The built-in lists can be replaced without touching code by pointing
KEYWORDS_FILE at a JSON file:

    {
        "positive": ["breakthrough", "rescued"],
        "exclude": ["casino"],
        "trusted": ["reuters"]
    }

Any key left out keeps its built-in list. Keywords are lowercase and
matched as substrings (e.g., "bet" matches "alphabet" - be specific!).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional


# =============================================================================
# Built-in Keyword Lists
# =============================================================================

# Phrases that indicate genuinely positive news
POSITIVE_KEYWORDS: tuple[str, ...] = (
    "breakthrough",
    "success",
    "achieve",
    "discover",
    "innovate",
    "cure",
    "saves",
    "helped",
    "donate",
    "volunteer",
    "milestone",
    "renewable",
    "sustainable",
    "recovery",
    "celebrates",
    "award",
    "research finds",
    "scientists discover",
    "new study",
    "progress",
)

# Spam and negative phrases; matched against article text AND source name
EXCLUDE_KEYWORDS: tuple[str, ...] = (
    # Gambling
    "casino",
    "gambling",
    "bet",
    "poker",
    "slots",
    "free spins",
    # Violence and death
    "death",
    "dead",
    "kill",
    "murder",
    "crash",
    "disaster",
    "tragedy",
    "war",
    "attack",
    "terror",
    "bomb",
    "shooting",
    "violence",
    # Crime and fraud
    "scandal",
    "fraud",
    "scam",
    "accused",
    "arrest",
    "prison",
    # Speculative finance
    "crypto",
    "bitcoin",
    "nft",
    "forex",
    "trading signals",
    # Health supplement spam
    "weight loss",
    "diet pill",
    "supplement",
    "cbd",
    "thc",
    # Marketing and clickbait
    "click here",
    "limited time",
    "act now",
    "buy now",
    "discount",
    "sponsored",
    "advertisement",
    "promoted",
    "partner content",
    # Press-release wires
    "globenewswire",
    "prnewswire",
    "businesswire",
    "accesswire",
)

# Sources ranked ahead of everyone else
TRUSTED_SOURCES: tuple[str, ...] = (
    "bbc",
    "npr",
    "reuters",
    "associated press",
    "the guardian",
    "new york times",
    "washington post",
    "wired",
    "ars technica",
    "the verge",
    "techcrunch",
    "nature",
    "science",
    "national geographic",
    "smithsonian",
    "cnn",
    "abc news",
    "cbs news",
    "nbc news",
    "time",
    "forbes",
    "bloomberg",
    "espn",
    "sports illustrated",
)

# Interest tag -> provider headline category. Unmapped interests fall back
# to a free-text search.
CATEGORY_MAP: dict[str, str] = {
    "tech": "technology",
    "technology": "technology",
    "science": "science",
    "health": "health",
    "sports": "sports",
    "business": "business",
    "entertainment": "entertainment",
    "arts": "entertainment",
}


# =============================================================================
# Keyword Sets
# =============================================================================

def _normalize(keywords: Iterable[str]) -> tuple[str, ...]:
    cleaned = []
    for keyword in keywords:
        keyword = str(keyword).strip().lower()
        if keyword and keyword not in cleaned:
            cleaned.append(keyword)
    return tuple(cleaned)


@dataclass(frozen=True)
class KeywordSets:
    """
    The three keyword lists used by the classifier.

    Attributes:
        positive: At least one must appear for an article to be eligible.
        exclude: Any match rejects the article.
        trusted: Source names sorted ahead of the rest.
    """
    positive: tuple[str, ...] = field(default=POSITIVE_KEYWORDS)
    exclude: tuple[str, ...] = field(default=EXCLUDE_KEYWORDS)
    trusted: tuple[str, ...] = field(default=TRUSTED_SOURCES)

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "positive", _normalize(self.positive))
        object.__setattr__(self, "exclude", _normalize(self.exclude))
        object.__setattr__(self, "trusted", _normalize(self.trusted))


def default_keyword_sets() -> KeywordSets:
    """Get the built-in keyword sets."""
    return KeywordSets()


def load_keyword_sets(path: Optional[str | Path] = None) -> KeywordSets:
    """
    Load keyword sets from a JSON file.

    Args:
        path: JSON file with optional "positive", "exclude", "trusted" lists.
            If None or empty, the built-in lists are returned.

    Returns:
        KeywordSets with file values overriding the defaults.

    Raises:
        ValueError: If the file is not a JSON object or a list is malformed.
        OSError: If the file cannot be read.
    """
    if not path:
        return default_keyword_sets()

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Keyword file {path} must contain a JSON object")

    overrides = {}
    for key in ("positive", "exclude", "trusted"):
        if key in data:
            if not isinstance(data[key], list):
                raise ValueError(f"Keyword file {path}: '{key}' must be a list of strings")
            overrides[key] = data[key]

    return KeywordSets(**overrides)


def get_category(interest: str) -> Optional[str]:
    """
    Get the provider category for an interest tag.

    Args:
        interest: Interest tag (any case).

    Returns:
        Category name, or None when the interest has no mapping.
    """
    return CATEGORY_MAP.get(interest.strip().lower())
