from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List
from ..event_models import LoggedEvent


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LogReceipt(CamelModel):
    success: bool = True
    id: str
    timestamp: datetime
    is_email: bool
    is_scraper: bool

    @classmethod
    def for_event(cls, event: LoggedEvent) -> "LogReceipt":
        return cls(
            id=event.id,
            timestamp=event.received_at,
            is_email=event.is_email,
            is_scraper=event.is_scraper,
        )


class LogListResponse(BaseModel):
    requests: List[LoggedEvent]
    total: int


class ClearResponse(BaseModel):
    success: bool = True
    cleared: int


class SenderStats(CamelModel):
    sender_id: str
    sender_name: str
    count: int
    sessions: int
    last_active: datetime
    active: bool


class RecipientStats(CamelModel):
    recipient_id: str
    recipient_name: str
    recipient_email: str
    count: int
    last_received: datetime
    recent: bool


class SourceStats(CamelModel):
    source: str
    count: int
    success: int
    errors: int


class LogStatsResponse(CamelModel):
    total: int
    emails: int
    scraped: int
    success: int
    errors: int
    recent_pings: int
    senders: List[SenderStats]
    recipients: List[RecipientStats]
    sources: List[SourceStats]
