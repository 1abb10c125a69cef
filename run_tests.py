#!/usr/bin/env python3
"""
Test Runner Script for GoodNews Digest

Runs the pytest suite by category with a short header. The per-run
report file is written by tests/conftest.py into test_results/.

Usage:
    python run_tests.py                    # Run all tests
    python run_tests.py --category config  # Run specific category
    python run_tests.py --quick            # Stop on first failure
    python run_tests.py --verbose          # Verbose output
    python run_tests.py --list             # List available categories
"""

import argparse
import subprocess
import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).parent

# Test categories mapping
TEST_CATEGORIES = {
    "config": "tests/test_system_config_validation.py",
    "resilience": "tests/test_system_source_resilience.py",
    "idempotency": "tests/test_system_idempotency.py",
    "cli": "tests/test_system_cli_behavior.py",
    "unit_models": "tests/test_models.py",
    "unit_curation": "tests/test_classifier.py",
    "unit_sources": "tests/test_sources.py",
    "unit_storage": "tests/test_storage.py",
    "unit_mail": "tests/test_mail.py",
    "unit_signup": "tests/test_subscriptions.py",
    "unit_scheduler": "tests/test_scheduler.py",
    "unit_web": "tests/test_web_app.py",
}

CATEGORY_DESCRIPTIONS = {
    "config": "Configuration validation - env vars, defaults, error messages",
    "resilience": "Error isolation - failing interests, sends, store outage",
    "idempotency": "Idempotency - one row per email, one digest per local day",
    "cli": "CLI behavior - argument parsing, help text, exit codes",
    "unit_models": "Unit tests - subscriber and article models",
    "unit_curation": "Unit tests - keywords and good-news classifier",
    "unit_sources": "Unit tests - NewsAPI client and source selection",
    "unit_storage": "Unit tests - in-memory and Supabase stores",
    "unit_mail": "Unit tests - email rendering and senders",
    "unit_signup": "Unit tests - signup validation and upsert",
    "unit_scheduler": "Unit tests - delivery window, cycle, timer",
    "unit_web": "Unit tests - Flask API routes",
}


def list_categories():
    """Print available test categories."""
    print("\n" + "=" * 60)
    print("AVAILABLE TEST CATEGORIES")
    print("=" * 60)

    print("\n📋 System Tests (Verification):")
    for key, desc in CATEGORY_DESCRIPTIONS.items():
        if not key.startswith("unit_"):
            print(f"  {key:15} - {desc}")

    print("\n📋 Unit Tests:")
    for key, desc in CATEGORY_DESCRIPTIONS.items():
        if key.startswith("unit_"):
            print(f"  {key:15} - {desc}")

    print("\n" + "=" * 60)
    print("Usage examples:")
    print("  python run_tests.py --category config")
    print("  python run_tests.py --category idempotency,cli")
    print("  python run_tests.py  # Run all")
    print("=" * 60)


def run_tests(categories=None, verbose=False, quick=False):
    """Run tests with specified options."""
    cmd = [sys.executable, "-m", "pytest"]

    paths = []
    for cat in categories or []:
        if cat in TEST_CATEGORIES:
            paths.append(TEST_CATEGORIES[cat])
        else:
            print(f"Unknown category: {cat} (see --list)")
    cmd.extend(paths or ["tests/"])

    if verbose:
        cmd.append("-v")
    else:
        cmd.append("--tb=short")

    if quick:
        cmd.extend(["-x", "--ff"])  # Stop on first failure, failed first

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print("\n" + "=" * 60)
    print("GOODNEWS DIGEST TEST RUNNER")
    print("=" * 60)
    print(f"Started:    {timestamp}")
    print(f"Categories: {', '.join(categories) if categories else 'ALL'}")
    print(f"Options:    {'verbose' if verbose else 'standard'}{', quick' if quick else ''}")
    print("=" * 60 + "\n")

    result = subprocess.run(cmd, cwd=ROOT)

    return result.returncode


def main():
    parser = argparse.ArgumentParser(
        description="Run GoodNews Digest tests with formatted output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py                     # Run all tests
  python run_tests.py --category config   # Run config tests only
  python run_tests.py --category cli,idempotency  # Run multiple categories
  python run_tests.py --quick             # Stop on first failure
  python run_tests.py --verbose           # Detailed output
  python run_tests.py --list              # Show available categories
        """
    )

    parser.add_argument(
        "--category", "-c",
        type=str,
        help="Test category to run (comma-separated for multiple)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show verbose output",
    )

    parser.add_argument(
        "--quick", "-q",
        action="store_true",
        help="Quick mode - stop on first failure",
    )

    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List available test categories",
    )

    args = parser.parse_args()

    if args.list:
        list_categories()
        return 0

    categories = None
    if args.category:
        categories = [c.strip() for c in args.category.split(",")]

    return run_tests(
        categories=categories,
        verbose=args.verbose,
        quick=args.quick,
    )


if __name__ == "__main__":
    sys.exit(main())
