"""
Digest Scheduler - Core delivery logic.

This module decides who gets a digest right now and delivers it:

    Store → Due check → Curation → Sent-today claim → Render → Send

Steps (one cycle):
1. Load all subscribers from the store
2. Project "now" into each subscriber's timezone
3. Keep subscribers whose local time is inside the delivery window (07:30-07:45)
4. Build each due subscriber's digest from their first 3 interests
5. Skip empty digests (no placeholder email)
6. Claim the subscriber's local date, render and send

Design principles:
- Error isolation: one interest, subscriber, or send failure doesn't stop others
- One algorithm, many triggers: timer, HTTP and CLI all call DigestScheduler.run
- At most one digest per subscriber per local day (atomic claim in the store)
- No retries: a failure is final for the unit of work it happened in
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
import threading
import traceback
from zoneinfo import ZoneInfo

from goodnews.config import (
    DELIVERY_HOUR,
    DELIVERY_WINDOW_END,
    DELIVERY_WINDOW_START,
    EMAIL_FROM,
    KEYWORDS_FILE,
    MAX_INTERESTS_PER_DIGEST,
    POLL_INTERVAL_MINUTES,
    RESEND_API_KEY,
    SUPABASE_KEY,
    SUPABASE_URL,
)
from goodnews.curation.keywords import KeywordSets, load_keyword_sets
from goodnews.mail.renderer import digest_subject, render_digest_html
from goodnews.mail.sender import EmailSender, MockEmailSender, ResendEmailSender
from goodnews.models.article import DigestItem
from goodnews.models.subscriber import Subscriber
from goodnews.sources.base import NewsProvider
from goodnews.sources.newsapi import NewsAPIProvider
from goodnews.sources.selection import fetch_good_news
from goodnews.storage.base import SubscriberStore
from goodnews.storage.memory import MockSubscriberStore
from goodnews.storage.supabase import SupabaseSubscriberStore


class SchedulerBusyError(RuntimeError):
    """Raised when a digest cycle is requested while another is running."""


# =============================================================================
# Result Data Structures
# =============================================================================

# Delivery statuses
STATUS_SENT = "sent"
STATUS_EMPTY = "skipped_empty"
STATUS_ALREADY_SENT = "skipped_already_sent"
STATUS_DRY_RUN = "dry_run"
STATUS_FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of processing a single due subscriber."""
    email: str
    status: str
    items: int = 0
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SchedulerResult:
    """Complete result of one digest cycle."""
    trigger: str
    started_at: datetime
    finished_at: Optional[datetime] = None
    dry_run: bool = False

    subscribers_total: int = 0
    deliveries: List[DeliveryResult] = field(default_factory=list)

    # Running counter of successful sends
    sent_count: int = 0

    errors: List[str] = field(default_factory=list)

    @property
    def due(self) -> int:
        """Number of subscribers inside their delivery window."""
        return len(self.deliveries)

    def _count(self, status: str) -> int:
        return sum(1 for d in self.deliveries if d.status == status)

    @property
    def skipped_empty(self) -> int:
        return self._count(STATUS_EMPTY)

    @property
    def skipped_already_sent(self) -> int:
        return self._count(STATUS_ALREADY_SENT)

    @property
    def failed(self) -> int:
        return self._count(STATUS_FAILED)

    @property
    def duration_seconds(self) -> float:
        """Total cycle duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation for the HTTP trigger."""
        return {
            "trigger": self.trigger,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "dry_run": self.dry_run,
            "subscribers_total": self.subscribers_total,
            "due": self.due,
            "sent": self.sent_count,
            "skipped_empty": self.skipped_empty,
            "skipped_already_sent": self.skipped_already_sent,
            "failed": self.failed,
            "errors": self.errors[:5],
        }

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "=" * 60,
            "DIGEST CYCLE SUMMARY",
            "=" * 60,
            f"Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S %Z')}",
            f"Duration: {self.duration_seconds:.2f}s",
            f"Trigger:  {self.trigger}",
            f"Mode:     {'DRY RUN' if self.dry_run else 'LIVE'}",
            "",
            f"Subscribers: {self.subscribers_total}",
            f"Due now:     {self.due}",
            "",
            "Deliveries:",
        ]

        for d in self.deliveries:
            status = "✓" if d.status in (STATUS_SENT, STATUS_DRY_RUN) else "✗" if d.status == STATUS_FAILED else "○"
            lines.append(f"  {status} {d.email}: {d.status} ({d.items} items)")
            if d.error:
                lines.append(f"      Error: {d.error}")

        lines.extend([
            "",
            f"Sent:                 {self.sent_count}",
            f"Skipped (empty):      {self.skipped_empty}",
            f"Skipped (sent today): {self.skipped_already_sent}",
            f"Failed:               {self.failed}",
        ])

        if self.errors:
            lines.extend([
                "",
                "Errors:",
            ])
            for error in self.errors[:5]:  # Show first 5
                lines.append(f"  - {error}")

        lines.append("=" * 60)
        return "\n".join(lines)


@dataclass
class ManualDigestResult:
    """Result of a manual test digest."""
    items: List[DigestItem]
    message_id: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.message_id is not None


# =============================================================================
# Scheduler Configuration
# =============================================================================

@dataclass
class SchedulerConfig:
    """
    Configuration for digest cycles.

    CLI arguments override config file defaults.
    """
    dry_run: bool = False
    verbose: bool = False
    from_address: str = EMAIL_FROM

    # Delivery window in subscriber-local time: [hour:start, hour:end)
    delivery_hour: int = DELIVERY_HOUR
    window_start: int = DELIVERY_WINDOW_START
    window_end: int = DELIVERY_WINDOW_END

    max_interests: int = MAX_INTERESTS_PER_DIGEST

    # None = built-in keyword lists
    keywords: Optional[KeywordSets] = None

    @classmethod
    def from_args(cls, args) -> "SchedulerConfig":
        """Create config from argparse namespace."""
        return cls(
            dry_run=args.dry_run if hasattr(args, 'dry_run') else False,
            verbose=args.verbose if hasattr(args, 'verbose') else False,
        )


# =============================================================================
# Time Helpers
# =============================================================================

def local_time(timezone_name: str, now: Optional[datetime] = None) -> datetime:
    """
    Project `now` into an IANA timezone.

    Args:
        timezone_name: IANA name (e.g., "Europe/Paris").
        now: Reference instant. Naive values are taken as UTC. Defaults to now.

    Returns:
        Aware datetime in the subscriber's zone.

    Raises:
        ZoneInfoNotFoundError / ValueError: If the zone name is unknown or invalid.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(timezone_name))


def in_delivery_window(
    local: datetime,
    hour: int = DELIVERY_HOUR,
    start: int = DELIVERY_WINDOW_START,
    end: int = DELIVERY_WINDOW_END,
) -> bool:
    """True iff local hour == `hour` and `start` <= minute < `end`."""
    return local.hour == hour and start <= local.minute < end


def seconds_until_next_tick(now: datetime, interval_minutes: int = POLL_INTERVAL_MINUTES) -> float:
    """
    Seconds until the next wall-clock multiple of `interval_minutes`.

    With a 15 minute interval the ticks land on :00, :15, :30 and :45,
    the same cadence as the cron expression "*/15 * * * *".
    """
    interval = timedelta(minutes=interval_minutes)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = now - midnight
    ticks = elapsed // interval + 1
    return ((midnight + ticks * interval) - now).total_seconds()


# =============================================================================
# Scheduler Class
# =============================================================================

class DigestScheduler:
    """
    Finds due subscribers and sends them their digest.

    Usage:
        scheduler = DigestScheduler(store, provider, sender)
        result = scheduler.run(trigger="cli")
        print(result.to_summary())

    All collaborators are injected, so tests can pass in-memory doubles.
    Only one cycle runs at a time per scheduler instance.
    """

    def __init__(
        self,
        store: SubscriberStore,
        provider: NewsProvider,
        sender: EmailSender,
        config: SchedulerConfig = None,
    ):
        """
        Initialize the scheduler.

        Args:
            store: Subscriber store.
            provider: News provider used for curation.
            sender: Email transport.
            config: Scheduler configuration. Defaults to SchedulerConfig().
        """
        self.store = store
        self.provider = provider
        self.sender = sender
        self.config = config or SchedulerConfig()
        self._cycle_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._cycle_lock.locked()

    def _log(self, message: str) -> None:
        print(f"[scheduler] {message}")

    def is_due(self, subscriber: Subscriber, now: Optional[datetime] = None) -> bool:
        """
        Check whether a subscriber is inside their delivery window.

        Invalid timezones are logged and treated as not due; they never raise.
        """
        try:
            local = local_time(subscriber.timezone, now)
        except Exception as e:
            self._log(f"Invalid timezone {subscriber.timezone!r} for {subscriber.email}: {type(e).__name__}: {e}")
            return False

        return in_delivery_window(
            local,
            self.config.delivery_hour,
            self.config.window_start,
            self.config.window_end,
        )

    def due_subscribers(self, subscribers: List[Subscriber], now: Optional[datetime] = None) -> List[Subscriber]:
        """Filter subscribers to those due now, preserving store order."""
        return [s for s in subscribers if self.is_due(s, now)]

    def build_digest(self, subscriber: Subscriber, now: Optional[datetime] = None) -> List[DigestItem]:
        """Curate the digest for one subscriber (first N interests)."""
        return fetch_good_news(
            self.provider,
            subscriber.interests,
            keywords=self.config.keywords,
            now=now,
            max_interests=self.config.max_interests,
        )

    def _load_subscribers(self, result: SchedulerResult) -> List[Subscriber]:
        try:
            return self.store.get_all()
        except Exception as e:
            # Store outage: nothing to do this cycle, but the process stays up
            message = f"Error fetching subscribers from {self.store.name}: {type(e).__name__}: {e}"
            self._log(message)
            result.errors.append(message)
            return []

    def _deliver(self, subscriber: Subscriber, now: datetime) -> DeliveryResult:
        """
        Build and send one subscriber's digest.

        Raises:
            Exception: Anything raised by the store or sender; the caller
                records it against this subscriber only.
        """
        local = local_time(subscriber.timezone, now)
        items = self.build_digest(subscriber, now)

        if not items:
            self._log(f"No news found for {subscriber.email}, skipping...")
            return DeliveryResult(email=subscriber.email, status=STATUS_EMPTY)

        if self.config.dry_run:
            return DeliveryResult(email=subscriber.email, status=STATUS_DRY_RUN, items=len(items))

        local_day = local.date()
        if not self.store.claim_digest(subscriber.email, local_day):
            self._log(f"Digest already sent to {subscriber.email} for {local_day}, skipping...")
            return DeliveryResult(email=subscriber.email, status=STATUS_ALREADY_SENT, items=len(items))

        response = self.sender.send(
            self.config.from_address,
            subscriber.email,
            digest_subject(local_day),
            render_digest_html(items, subscriber.interests, local_day),
        )
        self._log(f"Daily digest sent to {subscriber.email}")
        return DeliveryResult(
            email=subscriber.email,
            status=STATUS_SENT,
            items=len(items),
            message_id=(response or {}).get("id"),
        )

    def run(self, now: Optional[datetime] = None, trigger: str = "timer") -> SchedulerResult:
        """
        Execute one digest cycle.

        Args:
            now: Reference instant (for testing). Defaults to now in UTC.
            trigger: What started this cycle ("timer", "http", "cli").

        Returns:
            SchedulerResult with per-subscriber outcomes.

        Raises:
            SchedulerBusyError: If another cycle is already running.
        """
        if not self._cycle_lock.acquire(blocking=False):
            raise SchedulerBusyError("A digest cycle is already running")

        try:
            if now is None:
                now = datetime.now(timezone.utc)
            elif now.tzinfo is None:
                now = now.replace(tzinfo=timezone.utc)

            result = SchedulerResult(trigger=trigger, started_at=now, dry_run=self.config.dry_run)
            self._log(f"Checking for subscribers to send daily digest (trigger={trigger})...")

            subscribers = self._load_subscribers(result)
            result.subscribers_total = len(subscribers)

            for subscriber in self.due_subscribers(subscribers, now):
                try:
                    delivery = self._deliver(subscriber, now)
                except Exception as e:
                    error_msg = f"{type(e).__name__}: {e}"
                    self._log(f"Error sending digest to {subscriber.email}: {error_msg}")
                    if self.config.verbose:
                        error_msg += f"\n{traceback.format_exc()}"
                    delivery = DeliveryResult(email=subscriber.email, status=STATUS_FAILED, error=error_msg)
                    result.errors.append(f"{subscriber.email}: {error_msg}")

                if delivery.status == STATUS_SENT:
                    result.sent_count += 1
                result.deliveries.append(delivery)

            result.finished_at = datetime.now(timezone.utc)
            self._log(f"Daily digest complete. Sent {result.sent_count} emails.")
            return result
        finally:
            self._cycle_lock.release()

    def send_test_digest(
        self,
        email: str,
        interests: List[str],
        now: Optional[datetime] = None,
    ) -> ManualDigestResult:
        """
        Build a digest for arbitrary interests and send it right away.

        Ignores the delivery window and the sent-today marker. Nothing is
        sent when no articles match.

        Raises:
            Exception: Anything raised by the sender.
        """
        items = fetch_good_news(
            self.provider,
            interests,
            keywords=self.config.keywords,
            now=now,
            max_interests=self.config.max_interests,
        )
        self._log(f"Test digest for {email}: {len(items)} articles")

        if not items:
            return ManualDigestResult(items=[])

        response = self.sender.send(
            self.config.from_address,
            email,
            f"Test {digest_subject()}",
            render_digest_html(items, interests),
        )
        return ManualDigestResult(items=items, message_id=(response or {}).get("id"))


# =============================================================================
# Timer Adapter
# =============================================================================

class DigestTimer:
    """
    Runs DigestScheduler.run on a fixed wall-clock cadence in a background thread.

    A failing cycle is logged and the timer keeps going.
    """

    def __init__(self, scheduler: DigestScheduler, interval_minutes: int = POLL_INTERVAL_MINUTES):
        self.scheduler = scheduler
        self.interval_minutes = interval_minutes
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="digest-timer")
        self._thread.daemon = True
        self._thread.start()
        print(f"[timer] Digest timer started (every {self.interval_minutes} minutes)")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        self._thread = None

    def tick(self) -> Optional[SchedulerResult]:
        """Run one cycle, swallowing and logging any failure."""
        try:
            return self.scheduler.run(trigger="timer")
        except SchedulerBusyError:
            print("[timer] Previous digest cycle still running, skipping this tick")
        except Exception as e:
            print(f"[timer] Digest cycle failed: {type(e).__name__}: {e}")
        return None

    def _loop(self) -> None:
        while not self._stop.wait(seconds_until_next_tick(datetime.now(timezone.utc), self.interval_minutes)):
            self.tick()


# =============================================================================
# Convenience Functions
# =============================================================================

def run_digest(
    store: SubscriberStore,
    provider: NewsProvider,
    sender: EmailSender,
    now: Optional[datetime] = None,
    trigger: str = "cli",
    dry_run: bool = False,
    verbose: bool = False,
) -> SchedulerResult:
    """
    Run one digest cycle with specified options.

    Convenience function for programmatic use.
    """
    config = SchedulerConfig(dry_run=dry_run, verbose=verbose)
    scheduler = DigestScheduler(store, provider, sender, config)
    return scheduler.run(now=now, trigger=trigger)


# =============================================================================
# Component Wiring
# =============================================================================

def get_store() -> SubscriberStore:
    """Get the configured subscriber store (in-memory when Supabase is not set up)."""
    if SUPABASE_URL and SUPABASE_KEY:
        return SupabaseSubscriberStore()
    return MockSubscriberStore()


def get_provider() -> NewsProvider:
    """Get the configured news provider."""
    return NewsAPIProvider()


def get_sender() -> EmailSender:
    """Get the configured email transport (in-memory when Resend is not set up)."""
    if RESEND_API_KEY:
        return ResendEmailSender()
    return MockEmailSender()


def create_scheduler(config: SchedulerConfig = None, store: SubscriberStore = None) -> DigestScheduler:
    """
    Build a DigestScheduler from environment configuration.

    Keyword lists come from KEYWORDS_FILE when set.
    """
    config = config or SchedulerConfig()
    if config.keywords is None:
        config.keywords = load_keyword_sets(KEYWORDS_FILE or None)
    return DigestScheduler(store or get_store(), get_provider(), get_sender(), config)
