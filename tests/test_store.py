"""Tests for the in-memory activity log store."""
import pytest
from concurrent.futures import ThreadPoolExecutor
from activitylog.event_models import LogFilter
from activitylog.store import ActivityLogStore, CAPACITY


@pytest.fixture
def store():
    return ActivityLogStore()


def test_append_returns_stored_event(store):
    """Test append assigns id and timestamp and keeps request metadata."""
    event = store.append(
        {"hello": "world"},
        method="POST",
        headers={"content-type": "application/json"},
        client_address="10.0.0.1",
        request_url="http://test/log",
    )

    assert event.id
    assert event.received_at is not None
    assert event.method == "POST"
    assert event.client_address == "10.0.0.1"
    assert event.request_url == "http://test/log"
    assert event.raw_body == {"hello": "world"}
    assert event.headers == {"content-type": "application/json"}
    assert len(store) == 1


def test_ids_are_unique(store):
    """Test every appended event gets a distinct id."""
    ids = {store.append({"i": i}, method="POST").id for i in range(200)}
    assert len(ids) == 200


def test_newest_first_ordering(store):
    """Test unfiltered query returns events newest first."""
    for name in ("A", "B", "C"):
        store.append({"name": name}, method="POST")

    names = [e.raw_body["name"] for e in store.query()]
    assert names == ["C", "B", "A"]


def test_capacity_evicts_oldest(store):
    """Test the store keeps only the most recent CAPACITY events."""
    for i in range(CAPACITY + 5):
        store.append({"index": i}, method="POST")

    events = store.query()
    assert len(store) == CAPACITY
    assert len(events) == CAPACITY
    assert events[0].raw_body["index"] == CAPACITY + 4
    assert events[-1].raw_body["index"] == 5


def test_custom_capacity():
    """Test a smaller capacity is honoured."""
    small = ActivityLogStore(capacity=3)
    for i in range(10):
        small.append({"index": i}, method="POST")

    assert [e.raw_body["index"] for e in small.query()] == [9, 8, 7]
    assert small.capacity == 3


def test_concurrent_appends_respect_capacity(store):
    """Test appends from many threads never overfill the store."""
    def worker(n):
        for i in range(100):
            store.append({"worker": n, "i": i}, method="POST")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(worker, range(8)))

    events = store.query()
    assert len(events) == CAPACITY
    assert len({e.id for e in events}) == CAPACITY


def test_clear_returns_count(store):
    """Test clear empties the store and reports how many were removed."""
    for i in range(4):
        store.append({"i": i}, method="POST")

    assert store.clear() == 4
    assert len(store) == 0
    assert store.query() == []


def test_clear_on_empty_store_is_safe(store):
    """Test clearing twice in a row reports zero the second time."""
    assert store.clear() == 0
    assert store.clear() == 0
    assert len(store) == 0


def test_query_returns_snapshot(store):
    """Test mutating a query result does not touch the store."""
    store.append({"i": 1}, method="POST")
    result = store.query()
    result.clear()

    assert len(store) == 1


def test_stored_events_cannot_be_edited_from_outside(store):
    """Test edits to the submitted body or to returned events leave the store untouched."""
    body = {"source": "NYT", "emailTo": ["a@example.com"]}
    appended = store.append(body, method="POST")

    body["source"] = "EDITED"
    body["injected"] = 1
    body["emailTo"].append("intruder@example.com")
    appended.raw_body["source"] = "EDITED-TOO"

    queried = store.query()[0]
    queried.raw_body["source"] = "EDITED-AGAIN"
    queried.email_to.append("another@example.com")

    stored = store.query()[0]
    assert stored.raw_body == {"source": "NYT", "emailTo": ["a@example.com"]}
    assert stored.source == "NYT"
    assert stored.email_to == ["a@example.com"]
    assert store.query(LogFilter(search="intruder")) == []
    assert store.query(LogFilter(search="edited")) == []


def test_query_no_match_is_empty(store):
    """Test a filter matching nothing yields an empty list."""
    store.append({"source": "NYT"}, method="POST")
    assert store.query(LogFilter(source="Guardian")) == []


def test_undecodable_body_is_still_stored(store):
    """Test a null body is accepted with both shape flags off."""
    event = store.append(None, method="POST")

    assert event.raw_body is None
    assert event.is_email is False
    assert event.is_scraper is False
    assert len(store) == 1
