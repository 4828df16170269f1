"""In-memory, capacity-bounded activity log."""
import threading
from typing import Any, Mapping
import structlog
from .classify import build_event
from .filters import apply_filter
from ..event_models import LoggedEvent, LogFilter

log = structlog.get_logger()

CAPACITY = 300


class ActivityLogStore:
    """
    Thread-safe, newest-first store of logged events.

    Appending past ``capacity`` drops the oldest entries. Insert and
    eviction happen under one lock, and queries filter a snapshot copied
    under that lock, so readers never observe a half-applied mutation.
    """

    def __init__(self, capacity: int = CAPACITY):
        self._capacity = capacity
        self._events: list[LoggedEvent] = []
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(
        self,
        raw_body: Any,
        method: str,
        headers: Mapping[str, str] | None = None,
        client_address: str = "unknown",
        request_url: str = "",
    ) -> LoggedEvent:
        """
        Classify and record a submission.

        Args:
            raw_body: Decoded payload, or None when it could not be decoded
            method: HTTP verb the submission arrived with
            headers: Request headers
            client_address: Best-effort originating address
            request_url: URL the submission was sent to

        Returns:
            A copy of the stored event
        """
        event = build_event(raw_body, method, headers, client_address, request_url)

        with self._lock:
            self._events.insert(0, event)
            evicted = len(self._events) - self._capacity
            if evicted > 0:
                del self._events[self._capacity:]

        log.info(
            "log.appended",
            id=event.id,
            method=event.method,
            is_email=event.is_email,
            is_scraper=event.is_scraper,
        )
        if evicted > 0:
            log.debug("log.evicted", count=evicted, capacity=self._capacity)
        return event.model_copy(deep=True)

    def query(self, flt: LogFilter | None = None) -> list[LoggedEvent]:
        """
        Return matching events, newest first.

        Results are deep copies, so callers may modify them freely.
        """
        return [evt.model_copy(deep=True) for evt in apply_filter(self._snapshot(), flt)]

    def _snapshot(self) -> list[LoggedEvent]:
        """List copy of the stored events, newest first; the events themselves are shared."""
        with self._lock:
            return list(self._events)

    def clear(self) -> int:
        """
        Remove every event.

        Returns:
            Number of events removed
        """
        with self._lock:
            count = len(self._events)
            self._events.clear()
        log.info("log.cleared", count=count)
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
