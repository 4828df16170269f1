"""Aggregate activity statistics over a set of logged events."""
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List
from ..event_models import LoggedEvent, utcnow

RECENT_PING_WINDOW = timedelta(minutes=1)
ACTIVE_SENDER_WINDOW = timedelta(minutes=5)
RECENT_RECIPIENT_WINDOW = timedelta(hours=1)

ANONYMOUS_SENDER_ID = "anonymous"
ANONYMOUS_SENDER_NAME = "Anonymous User"
NO_RECIPIENT_ID = "no-recipient"
UNKNOWN_RECIPIENT_NAME = "Unknown Recipient"
NO_RECIPIENT_EMAIL = "No email"


def sender_activity(events: Iterable[LoggedEvent], now: datetime | None = None) -> List[Dict[str, Any]]:
    """
    Group events by sender.

    Events without a sender id are pooled under ``anonymous``. The display
    name comes from the first (newest) event seen for each sender.

    Returns:
        Per-sender dicts sorted by request count, busiest first
    """
    now = now or utcnow()
    groups: Dict[str, Dict[str, Any]] = {}
    sessions: Dict[str, set] = {}

    for evt in events:
        sender_id = str(evt.sender_id) if evt.sender_id else ANONYMOUS_SENDER_ID
        group = groups.get(sender_id)
        if group is None:
            group = groups[sender_id] = {
                "senderId": sender_id,
                "senderName": str(evt.sender_name) if evt.sender_name else ANONYMOUS_SENDER_NAME,
                "count": 0,
                "lastActive": evt.received_at,
            }
            sessions[sender_id] = set()
        group["count"] += 1
        if evt.session_id:
            sessions[sender_id].add(str(evt.session_id))
        if evt.received_at > group["lastActive"]:
            group["lastActive"] = evt.received_at

    result = []
    for sender_id, group in groups.items():
        group["sessions"] = len(sessions[sender_id])
        group["active"] = now - group["lastActive"] < ACTIVE_SENDER_WINDOW
        result.append(group)
    result.sort(key=lambda g: g["count"], reverse=True)
    return result


def recipient_activity(events: Iterable[LoggedEvent], now: datetime | None = None) -> List[Dict[str, Any]]:
    """Group events by recipient id, falling back to the recipient email."""
    now = now or utcnow()
    groups: Dict[str, Dict[str, Any]] = {}

    for evt in events:
        recipient_id = evt.recipient_id or evt.recipient_email or NO_RECIPIENT_ID
        recipient_id = str(recipient_id)
        group = groups.get(recipient_id)
        if group is None:
            group = groups[recipient_id] = {
                "recipientId": recipient_id,
                "recipientName": str(evt.recipient_name or evt.recipient_email or UNKNOWN_RECIPIENT_NAME),
                "recipientEmail": str(evt.recipient_email or NO_RECIPIENT_EMAIL),
                "count": 0,
                "lastReceived": evt.received_at,
            }
        group["count"] += 1
        if evt.received_at > group["lastReceived"]:
            group["lastReceived"] = evt.received_at

    result = list(groups.values())
    for group in result:
        group["recent"] = now - group["lastReceived"] < RECENT_RECIPIENT_WINDOW
    result.sort(key=lambda g: g["count"], reverse=True)
    return result


def source_metrics(events: Iterable[LoggedEvent]) -> List[Dict[str, Any]]:
    """Per-source scrape counts, in first-seen order."""
    metrics: Dict[str, Dict[str, Any]] = {}
    for evt in events:
        if not evt.source:
            continue
        source = str(evt.source)
        entry = metrics.setdefault(source, {"source": source, "count": 0, "success": 0, "errors": 0})
        entry["count"] += 1
        if evt.scraper_status == "success":
            entry["success"] += 1
        elif evt.scraper_status == "error":
            entry["errors"] += 1
    return list(metrics.values())


def summarize(events: Iterable[LoggedEvent], now: datetime | None = None) -> Dict[str, Any]:
    """
    Build the full statistics document.

    Returns:
        Dictionary with:
        - total, emails, scraped: shape counters
        - success, errors: scrape outcomes across all sources
        - recentPings: events received within the last minute
        - senders, recipients, sources: grouped activity
    """
    now = now or utcnow()
    events = list(events)
    return {
        "total": len(events),
        "emails": sum(1 for e in events if e.is_email),
        "scraped": sum(1 for e in events if e.is_scraper),
        "success": sum(1 for e in events if e.scraper_status == "success"),
        "errors": sum(1 for e in events if e.scraper_status == "error"),
        "recentPings": sum(1 for e in events if now - e.received_at < RECENT_PING_WINDOW),
        "senders": sender_activity(events, now),
        "recipients": recipient_activity(events, now),
        "sources": source_metrics(events),
    }
