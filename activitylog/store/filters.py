"""Query predicates for the activity log."""
from typing import Callable, Iterable
from ..event_models import LoggedEvent, LogFilter

Predicate = Callable[[LoggedEvent], bool]

# LogFilter field -> LoggedEvent attribute, compared with ==
EXACT_MATCH_FIELDS = {
    "email_type": "email_type",
    "source": "source",
    "status": "scraper_status",
    "content_type": "content_type",
    "sender_id": "sender_id",
    "session_id": "session_id",
    "recipient_id": "recipient_id",
    "recipient_email": "recipient_email",
}

# LogFilter field -> LoggedEvent attribute, case-insensitive substring
PARTIAL_MATCH_FIELDS = {
    "sender_name": "sender_name",
    "recipient_name": "recipient_name",
}


def _equals(attr: str, expected) -> Predicate:
    return lambda evt: getattr(evt, attr) == expected


def _contains(attr: str, needle: str) -> Predicate:
    needle = needle.lower()

    def check(evt: LoggedEvent) -> bool:
        value = getattr(evt, attr)
        return value is not None and needle in str(value).lower()

    return check


def build_predicates(flt: LogFilter) -> list[Predicate]:
    """
    Translate a filter into an ordered list of predicates.

    Cheap comparisons come first; the full-record text search is always last.
    """
    predicates: list[Predicate] = []

    if flt.method:
        predicates.append(_equals("method", flt.method.upper()))
    if flt.is_email is not None:
        predicates.append(_equals("is_email", flt.is_email))
    if flt.is_scraper is not None:
        predicates.append(_equals("is_scraper", flt.is_scraper))

    for name, attr in EXACT_MATCH_FIELDS.items():
        expected = getattr(flt, name)
        if expected:
            predicates.append(_equals(attr, expected))

    for name, attr in PARTIAL_MATCH_FIELDS.items():
        needle = getattr(flt, name)
        if needle:
            predicates.append(_contains(attr, needle))

    if flt.search:
        query = flt.search.lower()
        predicates.append(lambda evt: query in evt.search_text)

    return predicates


def apply_filter(events: Iterable[LoggedEvent], flt: LogFilter | None) -> list[LoggedEvent]:
    """Keep the events that satisfy every predicate, preserving their order."""
    if flt is None:
        return list(events)
    predicates = build_predicates(flt)
    return [evt for evt in events if all(p(evt) for p in predicates)]
