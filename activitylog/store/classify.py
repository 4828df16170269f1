"""Payload classification: turns a raw submission into a LoggedEvent."""
import copy
from typing import Any, Mapping
from ..event_models import LoggedEvent, new_event_id, utcnow

# Payload key -> LoggedEvent attribute
EMAIL_FIELDS = {
    "emailSubject": "email_subject",
    "emailBody": "email_body",
    "emailFrom": "email_from",
    "emailTo": "email_to",
    "emailType": "email_type",
}

SCRAPER_FIELDS = {
    "source": "source",
    "scraperStatus": "scraper_status",
    "articleUrl": "article_url",
    "scrapedAt": "scraped_at",
    "contentType": "content_type",
}

IDENTITY_FIELDS = {
    "senderName": "sender_name",
    "senderId": "sender_id",
    "sessionId": "session_id",
    "deviceInfo": "device_info",
    "recipientName": "recipient_name",
    "recipientId": "recipient_id",
    "recipientEmail": "recipient_email",
}

DEFAULT_EMAIL_TYPE = "unknown"
DEFAULT_SCRAPER_STATUS = "success"
DEFAULT_CONTENT_TYPE = "article"


def is_email_shaped(body: Any) -> bool:
    """True when a dict body carries any email key, whatever its value."""
    return isinstance(body, dict) and any(key in body for key in EMAIL_FIELDS)


def is_scraper_shaped(body: Any) -> bool:
    """True when a dict body carries any scraper key, whatever its value."""
    return isinstance(body, dict) and any(key in body for key in SCRAPER_FIELDS)


def _copy_present(body: dict, mapping: Mapping[str, str], into: dict[str, Any]) -> None:
    for key, attr in mapping.items():
        if key in body:
            into[attr] = body[key]


def build_event(
    raw_body: Any,
    method: str,
    headers: Mapping[str, str] | None = None,
    client_address: str = "unknown",
    request_url: str = "",
) -> LoggedEvent:
    """
    Classify a payload and construct the immutable event for it.

    Never raises on account of the payload: anything that is not a dict
    simply matches neither shape.
    """
    # Private copy: later edits to the submitted object must not reach the event
    raw_body = copy.deepcopy(raw_body)
    received_at = utcnow()
    is_email = is_email_shaped(raw_body)
    is_scraper = is_scraper_shaped(raw_body)

    fields: dict[str, Any] = {
        "id": new_event_id(),
        "received_at": received_at,
        "method": method,
        "client_address": client_address,
        "request_url": request_url,
        "raw_body": raw_body,
        "headers": {str(k): str(v) for k, v in (headers or {}).items()},
        "is_email": is_email,
        "is_scraper": is_scraper,
    }

    if is_email:
        _copy_present(raw_body, EMAIL_FIELDS, fields)
        if fields.get("email_type") is None:
            fields["email_type"] = DEFAULT_EMAIL_TYPE

    if is_scraper:
        _copy_present(raw_body, SCRAPER_FIELDS, fields)
        if fields.get("scraper_status") is None:
            fields["scraper_status"] = DEFAULT_SCRAPER_STATUS
        if fields.get("scraped_at") is None:
            fields["scraped_at"] = received_at
        if fields.get("content_type") is None:
            fields["content_type"] = DEFAULT_CONTENT_TYPE

    if isinstance(raw_body, dict):
        _copy_present(raw_body, IDENTITY_FIELDS, fields)

    return LoggedEvent(**fields)
