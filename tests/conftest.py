"""
Pytest Configuration and Fixtures

This module provides:
- Timestamped result file generation
- Shared fixtures for all tests
- Test category organization
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import test configuration
from tests.test_config import TEST_CATEGORIES, get_article, get_subscriber, get_instant


# =============================================================================
# TEST RESULT FILE CONFIGURATION
# =============================================================================

RESULTS_DIR = PROJECT_ROOT / "test_results"


def get_result_filename() -> str:
    """Generate timestamped result filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"test_results_{timestamp}.txt"


def ensure_results_dir():
    """Create results directory if it doesn't exist."""
    RESULTS_DIR.mkdir(exist_ok=True)


# =============================================================================
# PYTEST HOOKS FOR CUSTOM OUTPUT
# =============================================================================

class ResultCollector:
    """Collects test results for formatted output."""

    def __init__(self):
        self.results: List[Dict[str, Any]] = []
        self.start_time: datetime = None
        self.end_time: datetime = None
        self.categories: Dict[str, List[Dict]] = {}

    def add_result(self, nodeid: str, outcome: str, duration: float, message: str = ""):
        """Add a test result."""
        category = self._extract_category(nodeid)

        result = {
            "nodeid": nodeid,
            "name": nodeid.split("::")[-1].replace("test_", "").replace("_", " ").title(),
            "category": category,
            "outcome": outcome,
            "duration": duration,
            "message": message,
        }

        self.results.append(result)
        self.categories.setdefault(category, []).append(result)

    def _extract_category(self, nodeid: str) -> str:
        """Extract test category from nodeid (file name without test_/.py)."""
        filename = nodeid.split("::")[0].split("/")[-1]
        return filename.replace("test_system_", "").replace("test_", "").replace(".py", "")

    def get_summary(self) -> Dict[str, int]:
        """Get test result summary."""
        return {
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r["outcome"] == "passed"),
            "failed": sum(1 for r in self.results if r["outcome"] == "failed"),
            "skipped": sum(1 for r in self.results if r["outcome"] == "skipped"),
        }


# Global collector instance
_collector = ResultCollector()


def pytest_configure(config):
    """Register custom markers and start the collector."""
    config.addinivalue_line(
        "markers", "config_validation: Configuration validation tests"
    )
    config.addinivalue_line(
        "markers", "source_resilience: Error isolation tests"
    )
    config.addinivalue_line(
        "markers", "idempotency: Duplicate prevention tests"
    )
    config.addinivalue_line(
        "markers", "cli_behavior: CLI interface tests"
    )

    _collector.start_time = datetime.now()


def pytest_runtest_logreport(report):
    """Called after each test phase."""
    if report.when == "call":  # Only record the actual test call
        _collector.add_result(
            nodeid=report.nodeid,
            outcome=report.outcome,
            duration=report.duration,
            message=str(report.longrepr) if report.longrepr else "",
        )


def pytest_sessionfinish(session, exitstatus):
    """Called after all tests complete."""
    _collector.end_time = datetime.now()
    if not _collector.results:
        return

    ensure_results_dir()
    filepath = RESULTS_DIR / get_result_filename()
    with open(filepath, "w") as f:
        f.write(generate_formatted_report(_collector))


def generate_formatted_report(collector: ResultCollector) -> str:
    """Generate a formatted test report."""
    lines = []

    lines.append("=" * 80)
    lines.append("GOODNEWS DIGEST - TEST RESULTS REPORT")
    lines.append("=" * 80)
    lines.append("")

    lines.append(f"Run Date:     {collector.start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    if collector.end_time:
        duration = (collector.end_time - collector.start_time).total_seconds()
        lines.append(f"Duration:     {duration:.2f} seconds")
    lines.append("")

    summary = collector.get_summary()
    lines.append("-" * 40)
    lines.append("SUMMARY")
    lines.append("-" * 40)
    lines.append(f"Total Tests:  {summary['total']}")
    lines.append(f"Passed:       {summary['passed']} ✓")
    lines.append(f"Failed:       {summary['failed']} ✗")
    lines.append(f"Skipped:      {summary['skipped']} ○")
    lines.append("")

    for category, results in sorted(collector.categories.items()):
        cat_info = TEST_CATEGORIES.get(category, {
            "name": category.replace("_", " ").title(),
            "protects_against": [],
        })

        lines.append(f"[{cat_info['name']}]")
        for protection in cat_info.get("protects_against", []):
            lines.append(f"  protects against: {protection}")

        for result in results:
            status = "✓" if result["outcome"] == "passed" else "✗" if result["outcome"] == "failed" else "○"
            lines.append(f"    {status} {result['name']:<60} ({result['duration']*1000:.0f}ms)")
            if result["outcome"] == "failed" and result["message"]:
                for msg_line in result["message"].split("\n")[:3]:
                    if msg_line.strip():
                        lines.append(f"      └─ {msg_line[:70]}")
        lines.append("")

    lines.append("=" * 80)
    lines.append("END OF REPORT")
    lines.append("=" * 80)

    return "\n".join(lines)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def make_candidate():
    """Factory: ArticleCandidate from a sample article role."""
    from goodnews.models.article import ArticleCandidate

    def _make(role: str, **overrides) -> ArticleCandidate:
        data = get_article(role)
        data.update(overrides)
        return ArticleCandidate(**data)

    return _make


@pytest.fixture
def make_subscriber():
    """Factory: Subscriber from a sample subscriber role."""
    from goodnews.models.subscriber import Subscriber

    def _make(role: str, **overrides) -> Subscriber:
        data = get_subscriber(role)
        data.update(overrides)
        return Subscriber(**data)

    return _make


@pytest.fixture
def instant():
    """Factory: aware datetime from a named UTC instant."""
    def _instant(name: str) -> datetime:
        return datetime.fromisoformat(get_instant(name))

    return _instant


@pytest.fixture
def memory_store():
    """An empty in-memory subscriber store."""
    from goodnews.storage.memory import MockSubscriberStore
    return MockSubscriberStore()


@pytest.fixture
def mock_sender():
    """An in-memory email sender."""
    from goodnews.mail.sender import MockEmailSender
    return MockEmailSender()


@pytest.fixture
def mock_provider(make_candidate):
    """A provider with good news for health and science headlines."""
    from goodnews.sources.newsapi import MockNewsProvider
    return MockNewsProvider(
        headlines={
            "health": [make_candidate("untrusted_positive"), make_candidate("trusted_positive")],
            "science": [make_candidate("trusted_positive_2")],
        },
    )
