#!/usr/bin/env python3
"""
GoodNews Digest - Daily positive news digest scheduler.

Command-line entry point for running digest cycles:
  - Load subscribers from the store (Supabase, or in-memory in dev)
  - Find subscribers whose local time is 07:30-07:45
  - Curate positive news for their first 3 interests
  - Email the digest (Resend, or in-memory in dev)
  - Print execution summary

Usage:
    python main.py                      # Run one digest cycle (for cron)
    python main.py --dry-run            # Find due subscribers and curate, no sends
    python main.py --now 2025-01-01T12:30:00Z  # Evaluate as if at this instant
    python main.py --loop               # Keep running, one cycle every 15 minutes

Examples:
    # See who would get a digest at 12:30 UTC
    python main.py --dry-run --now 2025-01-01T12:30:00Z --verbose

    # Production cron job
    python main.py --quiet
"""

import argparse
import sys
import time
from datetime import datetime, timezone

from goodnews.scheduler import (
    DigestTimer,
    SchedulerConfig,
    SchedulerResult,
    create_scheduler,
)
from goodnews.config import (
    POLL_INTERVAL_MINUTES,
    print_config_summary,
    validate_config,
)


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant for --now (naive values are UTC)."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 datetime: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="goodnews-digest",
        description="Send the daily GoodNews digest to subscribers who are due.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                Run one digest cycle now
  %(prog)s --dry-run                      Curate only, send nothing
  %(prog)s --now 2025-01-01T12:30:00Z     Evaluate as if at that instant
  %(prog)s --loop                         Run a cycle every 15 minutes
  %(prog)s -v --dry-run                   Verbose dry-run
        """,
    )

    # Core options
    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        help="Find due subscribers and build digests but skip sending",
    )

    parser.add_argument(
        "--now",
        type=parse_instant,
        default=None,
        metavar="ISO",
        help="Evaluate the delivery window at this instant (default: current time)",
    )

    parser.add_argument(
        "--loop",
        action="store_true",
        help=f"Keep running and start a cycle every {POLL_INTERVAL_MINUTES} minutes",
    )

    # Output options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress and debug info",
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Hide the header and cycle summary (log lines and errors still print)",
    )

    # Info options
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration and exit",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0",
    )

    return parser


def show_config() -> None:
    """Display current configuration."""
    print("=" * 60)
    print("GoodNews Digest Configuration")
    print("=" * 60)
    print_config_summary()

    errors = validate_config()
    if errors:
        print("\nConfiguration warnings:")
        for error in errors:
            print(f"  ⚠️  {error}")
    else:
        print("\n✓ Configuration valid")
    print("=" * 60)


def print_result_summary(result: SchedulerResult, verbose: bool = False) -> None:
    """Print the cycle result summary."""
    print(result.to_summary())

    if verbose and result.due == 0:
        print("\nNo subscriber is inside the 07:30-07:45 local window right now.")


def run_loop(config: SchedulerConfig) -> int:
    """Run the in-process timer until interrupted."""
    timer = DigestTimer(create_scheduler(config))
    timer.start()
    try:
        while timer.running:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    finally:
        timer.stop(timeout=5)
    return 0


def main(argv: list = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle --show-config
    if args.show_config:
        show_config()
        return 0

    # Print header (unless quiet)
    if not args.quiet:
        print("=" * 60)
        print("GoodNews Digest")
        print("=" * 60)

        if args.dry_run:
            print("Mode: DRY RUN (no emails sent)")

        if args.verbose:
            print("\nConfiguration:")
            print_config_summary()
            print()

    config = SchedulerConfig.from_args(args)

    if args.loop:
        return run_loop(config)

    try:
        scheduler = create_scheduler(config)
        result = scheduler.run(now=args.now, trigger="cli")

        if not args.quiet:
            print_result_summary(result, args.verbose)

        # Store outage or any failed delivery
        if result.failed > 0 or (result.errors and result.due == 0):
            return 1

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Digest error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
