"""
Tests for health check endpoints.
"""
from fastapi.testclient import TestClient
from activitylog.main import create_app
from activitylog.store import ActivityLogStore

store = ActivityLogStore()
client = TestClient(create_app(store=store))


def test_health_liveness():
    """Test liveness health check."""
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "activitylog"
    assert data["version"] == "0.1.0"
    assert data["timestamp"].endswith("Z")


def test_health_readiness():
    """Test readiness health check."""
    store.append({"source": "NYT"}, method="POST")
    r = client.get("/health/ready")
    # Should be 200 (ready) or 503 (not ready)
    assert r.status_code in [200, 503]
    data = r.json()
    assert data["service"] == "activitylog"
    assert "timestamp" in data
    assert "status" in data
    assert data["checks"]["store"]["status"] == "ok"
    assert data["checks"]["store"]["capacity"] == 300
    assert data["checks"]["store"]["events"] >= 1
    assert "disk_space" in data["checks"]
    assert "memory" in data["checks"]


def test_metrics_endpoint():
    """Test Prometheus metrics endpoint."""
    client.post("/log", json={"emailSubject": "Hi", "source": "NYT"})
    r = client.get("/metrics")
    assert r.status_code == 200
    content = r.text
    assert "http_requests_total" in content
    assert "http_request_duration_seconds" in content
    assert "app_up" in content
    assert 'activitylog_events_logged_total{shape="scraped_email"} 1.0' in content
    assert "activitylog_events_stored" in content


def test_correlation_id_in_response():
    """Test that correlation ID is added to response headers."""
    r = client.get("/health")
    assert "x-correlation-id" in r.headers


def test_correlation_id_propagation():
    """Test that provided correlation ID is propagated."""
    correlation_id = "test-correlation-id-123"
    r = client.get("/health", headers={"x-correlation-id": correlation_id})
    assert r.headers["x-correlation-id"] == correlation_id
