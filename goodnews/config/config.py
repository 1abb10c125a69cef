"""
Configuration module for GoodNews Digest.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of goodnews/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
# Default: "development" for safe local testing
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Port for the web server
PORT: int = int(os.getenv("PORT", "3001"))


# =============================================================================
# News Provider (NewsAPI.org)
# =============================================================================

NEWS_API_KEY: str = os.getenv("NEWS_API_KEY", "")

NEWS_API_BASE_URL: str = os.getenv("NEWS_API_BASE_URL", "https://newsapi.org/v2")

# Raw candidates requested per provider call, regardless of endpoint
NEWS_PAGE_SIZE: int = int(os.getenv("NEWS_PAGE_SIZE", "20"))

# HTTP request timeout in seconds
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))


# =============================================================================
# Subscriber Store (Supabase / PostgREST)
# =============================================================================

SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

SUPABASE_TABLE: str = os.getenv("SUPABASE_TABLE", "subscribers")


# =============================================================================
# Email (Resend)
# =============================================================================

RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")

EMAIL_FROM: str = os.getenv("EMAIL_FROM", "GoodNews <onboarding@resend.dev>")


# =============================================================================
# Digest Curation
# =============================================================================

# Only the first N interests of a subscriber are consulted per digest
MAX_INTERESTS_PER_DIGEST: int = int(os.getenv("MAX_INTERESTS_PER_DIGEST", "3"))

# Digest items kept per interest after filtering and ranking
MAX_ITEMS_PER_INTEREST: int = int(os.getenv("MAX_ITEMS_PER_INTEREST", "2"))

# Optional JSON file overriding the positive/exclude/trusted keyword lists
KEYWORDS_FILE: str = os.getenv("KEYWORDS_FILE", "")


# =============================================================================
# Scheduling
# =============================================================================

# Local delivery window: DELIVERY_HOUR:DELIVERY_WINDOW_START up to (not including)
# DELIVERY_HOUR:DELIVERY_WINDOW_END. Must be as wide as the poll interval.
DELIVERY_HOUR: int = int(os.getenv("DELIVERY_HOUR", "7"))
DELIVERY_WINDOW_START: int = int(os.getenv("DELIVERY_WINDOW_START", "30"))
DELIVERY_WINDOW_END: int = int(os.getenv("DELIVERY_WINDOW_END", "45"))

POLL_INTERVAL_MINUTES: int = int(os.getenv("POLL_INTERVAL_MINUTES", "15"))

DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "America/New_York")

# Shared secret for the manual digest trigger endpoint
CRON_SECRET: str = os.getenv("CRON_SECRET", "")


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate that required configuration is present for production.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if is_production():
        if not NEWS_API_KEY:
            errors.append("NEWS_API_KEY is required in production")
        if not SUPABASE_URL:
            errors.append("SUPABASE_URL is required in production")
        if not SUPABASE_KEY:
            errors.append("SUPABASE_KEY is required in production")
        if not RESEND_API_KEY:
            errors.append("RESEND_API_KEY is required in production")
        if not CRON_SECRET:
            errors.append("CRON_SECRET is required in production")

    if NEWS_PAGE_SIZE < 1:
        errors.append("NEWS_PAGE_SIZE must be at least 1")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if not (0 <= DELIVERY_HOUR <= 23):
        errors.append("DELIVERY_HOUR must be between 0 and 23")

    if not (0 <= DELIVERY_WINDOW_START < DELIVERY_WINDOW_END <= 60):
        errors.append("DELIVERY_WINDOW_START must be before DELIVERY_WINDOW_END (minutes 0-60)")

    if POLL_INTERVAL_MINUTES < 1:
        errors.append("POLL_INTERVAL_MINUTES must be at least 1")
    elif POLL_INTERVAL_MINUTES > DELIVERY_WINDOW_END - DELIVERY_WINDOW_START:
        errors.append("POLL_INTERVAL_MINUTES must not exceed the delivery window width")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  NEWS_API_KEY: {'***' if NEWS_API_KEY else '(not set)'}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_KEY: {'***' if SUPABASE_KEY else '(not set)'}")
    print(f"  SUPABASE_TABLE: {SUPABASE_TABLE}")
    print(f"  RESEND_API_KEY: {'***' if RESEND_API_KEY else '(not set)'}")
    print(f"  CRON_SECRET: {'***' if CRON_SECRET else '(not set)'}")
    print(f"  EMAIL_FROM: {EMAIL_FROM}")
    print(f"  NEWS_PAGE_SIZE: {NEWS_PAGE_SIZE}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  DELIVERY_WINDOW: {DELIVERY_HOUR:02d}:{DELIVERY_WINDOW_START:02d}-{DELIVERY_HOUR:02d}:{DELIVERY_WINDOW_END:02d} local")
    print(f"  POLL_INTERVAL_MINUTES: {POLL_INTERVAL_MINUTES}")
    print(f"  KEYWORDS_FILE: {KEYWORDS_FILE or '(built-in lists)'}")
