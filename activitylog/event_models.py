from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from functools import cached_property
from datetime import datetime, timezone
from typing import Any, Dict
import orjson
import time
import uuid


def new_event_id() -> str:
    """Millisecond prefix keeps ids sortable by arrival; the suffix keeps them unique."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LoggedEvent(BaseModel):
    """
    One captured submission to the log endpoint.

    Optional shape and identity fields are only set when the payload
    carried them; dump with ``exclude_unset=True`` to keep them off the wire.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=new_event_id)
    received_at: datetime = Field(default_factory=utcnow, alias="timestamp")
    method: str
    client_address: str = Field("unknown", alias="ip")
    request_url: str = Field("", alias="url")
    raw_body: Any = Field(None, alias="body")
    headers: Dict[str, str] = Field(default_factory=dict)

    # Email shape
    email_subject: Any = None
    email_body: Any = None
    email_from: Any = None
    email_to: Any = None
    email_type: Any = None
    is_email: bool = False

    # Scraper shape
    source: Any = None
    scraper_status: Any = None
    article_url: Any = None
    scraped_at: Any = None
    content_type: Any = None
    is_scraper: bool = False

    # Sender identity
    sender_name: Any = None
    sender_id: Any = None
    session_id: Any = None
    device_info: Any = None

    # Recipient identity
    recipient_name: Any = None
    recipient_id: Any = None
    recipient_email: Any = None

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the public field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @cached_property
    def search_text(self) -> str:
        """Lower-cased JSON dump of the whole record, used by free-text search."""
        wire = self.to_wire()
        try:
            return orjson.dumps(wire, default=str).decode().lower()
        except orjson.JSONEncodeError:
            # orjson rejects integers wider than 64 bits
            return repr(wire).lower()


class LogFilter(BaseModel):
    """Query constraints; every populated field must match (logical AND)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    method: str | None = None
    email_type: str | None = None
    is_email: bool | None = None
    is_scraper: bool | None = None
    source: str | None = None
    status: str | None = None
    content_type: str | None = None
    sender_id: str | None = None
    session_id: str | None = None
    recipient_id: str | None = None
    recipient_email: str | None = None
    sender_name: str | None = None
    recipient_name: str | None = None
    search: str | None = None
