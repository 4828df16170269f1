"""Tests for log query filtering."""
import pytest
from activitylog.event_models import LogFilter
from activitylog.store import ActivityLogStore, build_predicates


@pytest.fixture
def store():
    store = ActivityLogStore()
    store.append({"plain": True}, method="GET")
    store.append(
        {"emailSubject": "Weekly Digest", "emailType": "received", "senderId": "u1", "senderName": "Ada Lovelace"},
        method="POST",
    )
    store.append(
        {"source": "NYT", "scraperStatus": "error", "contentType": "newsletter", "recipientId": "r1"},
        method="POST",
    )
    store.append(
        {"source": "NYT", "emailSubject": "Morning Briefing", "recipientName": "Bob Smith",
         "recipientEmail": "bob@example.com", "sessionId": "s9"},
        method="PUT",
        headers={"x-trace": "needle-in-header"},
    )
    return store


def test_no_filter_returns_everything(store):
    """Test an empty filter imposes no constraint."""
    assert len(store.query(LogFilter())) == 4


def test_method_filter_is_case_insensitive(store):
    """Test method filter upper-cases the requested verb."""
    results = store.query(LogFilter(method="put"))
    assert [e.method for e in results] == ["PUT"]


def test_shape_flag_filters(store):
    """Test isEmail/isScraper filters match the frozen flags."""
    assert len(store.query(LogFilter(is_email=True))) == 2
    assert len(store.query(LogFilter(is_email=False))) == 2
    assert len(store.query(LogFilter(is_scraper=True))) == 2


def test_filters_are_anded(store):
    """Test combined filters return only events matching all of them."""
    results = store.query(LogFilter(source="NYT", is_email=True))

    assert len(results) == 1
    assert results[0].email_subject == "Morning Briefing"


def test_exact_match_filters(store):
    """Test exact-match fields."""
    assert len(store.query(LogFilter(status="error"))) == 1
    assert len(store.query(LogFilter(status="success"))) == 1
    assert len(store.query(LogFilter(content_type="newsletter"))) == 1
    assert len(store.query(LogFilter(email_type="received"))) == 1
    assert len(store.query(LogFilter(sender_id="u1"))) == 1
    assert len(store.query(LogFilter(session_id="s9"))) == 1
    assert len(store.query(LogFilter(recipient_id="r1"))) == 1
    assert len(store.query(LogFilter(recipient_email="bob@example.com"))) == 1
    assert store.query(LogFilter(source="nyt")) == []


def test_name_filters_are_partial(store):
    """Test sender/recipient name filters are case-insensitive substrings."""
    assert len(store.query(LogFilter(sender_name="love"))) == 1
    assert len(store.query(LogFilter(recipient_name="SMITH"))) == 1
    assert store.query(LogFilter(sender_name="grace")) == []


def test_search_matches_any_field(store):
    """Test free-text search looks across the whole record."""
    results = store.query(LogFilter(search="digest"))
    assert len(results) == 1
    assert results[0].email_subject == "Weekly Digest"

    assert store.query(LogFilter(search="zebra-unrelated")) == []


def test_search_includes_raw_body_and_headers(store):
    """Test search covers the raw body dump and request headers."""
    assert len(store.query(LogFilter(search='"plain":true'))) == 1
    assert len(store.query(LogFilter(search="NEEDLE-IN-HEADER"))) == 1


def test_filtering_preserves_order(store):
    """Test filtering narrows without reordering."""
    results = store.query(LogFilter(method="POST"))
    assert [e.source for e in results] == ["NYT", None]


def test_empty_strings_are_ignored():
    """Test empty string filters impose no constraint."""
    assert build_predicates(LogFilter(method="", source="", search="")) == []
