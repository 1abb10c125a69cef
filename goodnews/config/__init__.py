"""
Configuration module.

Handles environment variables, API keys, and application settings.
"""

from goodnews.config.config import (
    APP_ENV,
    DEBUG,
    PORT,
    NEWS_API_KEY,
    NEWS_API_BASE_URL,
    NEWS_PAGE_SIZE,
    REQUEST_TIMEOUT,
    SUPABASE_URL,
    SUPABASE_KEY,
    SUPABASE_TABLE,
    RESEND_API_KEY,
    EMAIL_FROM,
    MAX_INTERESTS_PER_DIGEST,
    MAX_ITEMS_PER_INTEREST,
    KEYWORDS_FILE,
    DELIVERY_HOUR,
    DELIVERY_WINDOW_START,
    DELIVERY_WINDOW_END,
    POLL_INTERVAL_MINUTES,
    DEFAULT_TIMEZONE,
    CRON_SECRET,
    is_production,
    is_development,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "PORT",
    "NEWS_API_KEY",
    "NEWS_API_BASE_URL",
    "NEWS_PAGE_SIZE",
    "REQUEST_TIMEOUT",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_TABLE",
    "RESEND_API_KEY",
    "EMAIL_FROM",
    "MAX_INTERESTS_PER_DIGEST",
    "MAX_ITEMS_PER_INTEREST",
    "KEYWORDS_FILE",
    "DELIVERY_HOUR",
    "DELIVERY_WINDOW_START",
    "DELIVERY_WINDOW_END",
    "POLL_INTERVAL_MINUTES",
    "DEFAULT_TIMEZONE",
    "CRON_SECRET",
    "is_production",
    "is_development",
    "validate_config",
    "print_config_summary",
]
