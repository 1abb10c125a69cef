"""
GoodNews Digest - Web API

A small Flask app exposing signup, health check and digest trigger
endpoints. When run directly it also starts the in-process digest timer.

Run with: python -m web.app
Or: cd web && python app.py
"""

import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify
from datetime import datetime, timezone
from goodnews.config import CRON_SECRET, PORT, is_production
from goodnews.scheduler import (
    DigestScheduler,
    DigestTimer,
    SchedulerBusyError,
    create_scheduler,
)
from goodnews.subscriptions import ValidationError, is_valid_email, sanitize_interests, subscribe

app = Flask(__name__)

DEFAULT_TEST_INTERESTS = ["technology", "science"]

# Shared scheduler (store, provider, sender); created on first use
_scheduler: Optional[DigestScheduler] = None


def get_scheduler() -> DigestScheduler:
    """Get the process-wide scheduler, creating it from config on first use."""
    global _scheduler
    if _scheduler is None:
        _scheduler = create_scheduler()
    return _scheduler


def _is_authorized() -> bool:
    """Manual trigger requires "Authorization: Bearer <CRON_SECRET>"."""
    if not CRON_SECRET:
        return False
    return request.headers.get("Authorization", "") == f"Bearer {CRON_SECRET}"


def _json_object() -> dict:
    """Request body as a dict; missing, malformed or non-object JSON gives {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# =============================================================================
# Signup
# =============================================================================

@app.route("/api/signup", methods=["POST"])
def api_signup():
    """Create a subscription or update an existing subscriber's preferences."""
    data = _json_object()
    scheduler = get_scheduler()

    try:
        result = subscribe(
            scheduler.store,
            scheduler.sender,
            data.get("email"),
            data.get("interests"),
            data.get("timezone"),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        print(f"[signup] Signup error: {type(e).__name__}: {e}")
        return jsonify({"error": "Failed to subscribe. Please try again."}), 500

    return jsonify({"message": result.message})


# =============================================================================
# Health
# =============================================================================

@app.route("/api/health")
def api_health():
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


# =============================================================================
# Digest Trigger API Endpoints
# =============================================================================

@app.route("/api/digest/run", methods=["POST"])
def api_digest_run():
    """Run one digest cycle now (authenticated external trigger)."""
    if not _is_authorized():
        return jsonify({"error": "Unauthorized"}), 401

    print("[web] Running daily digest cycle...")

    try:
        result = get_scheduler().run(trigger="http")
    except SchedulerBusyError as e:
        return jsonify({"error": str(e)}), 409
    except Exception as e:
        print(f"[web] Digest cycle error: {type(e).__name__}: {e}")
        return jsonify({"error": str(e)}), 500

    return jsonify({
        "message": f"Daily digest complete. Sent {result.sent_count} emails.",
        "result": result.to_dict(),
    })


@app.route("/api/test-digest", methods=["POST"])
def api_test_digest():
    """Send a digest to any address right away (development only)."""
    if is_production():
        return jsonify({"error": "Test endpoint disabled in production"}), 403

    data = _json_object()
    email = data.get("email")

    if not is_valid_email(email):
        return jsonify({"error": "Valid email required"}), 400

    interests = sanitize_interests(data.get("interests")) or DEFAULT_TEST_INTERESTS
    print(f"[web] Fetching news for interests: {', '.join(interests)}")

    try:
        result = get_scheduler().send_test_digest(email, interests)
    except Exception as e:
        print(f"[web] Test digest error: {type(e).__name__}: {e}")
        return jsonify({"error": str(e)}), 500

    if not result.items:
        return jsonify({
            "message": "No articles found",
            "newsCount": 0,
            "articles": [],
            "note": "The news provider may have rate limited or no positive news matched",
        })

    return jsonify({
        "message": "Test email sent!",
        "newsCount": len(result.items),
        "articles": [
            {"title": i.title, "source": i.source_name, "category": i.category}
            for i in result.items
        ],
        "emailId": result.message_id,
    })


if __name__ == "__main__":
    print("=" * 50)
    print("GoodNews Digest API")
    print("=" * 50)
    timer = DigestTimer(get_scheduler())
    timer.start()
    print(f"Listening on http://localhost:{PORT}")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    try:
        app.run(port=PORT)
    finally:
        timer.stop(timeout=5)
