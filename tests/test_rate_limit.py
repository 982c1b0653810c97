"""
Tests for rate limiting on the public intake endpoints.
"""

import pytest

from app.core.config import settings
from app.middleware import rate_limit


@pytest.fixture
def rate_limited(monkeypatch):
    """Enable a small limit and start from an empty window store."""
    monkeypatch.setattr(settings, "rate_limit_enabled", True)
    monkeypatch.setattr(settings, "rate_limit_requests", 3)
    monkeypatch.setattr(settings, "rate_limit_window_seconds", 60)
    monkeypatch.setattr(settings, "rate_limit_trust_proxy_headers", True)
    monkeypatch.setattr(rate_limit, "_last_sweep", 0.0)
    rate_limit._rate_limit_store.clear()
    yield
    rate_limit._rate_limit_store.clear()


def _quote(client, ip="203.0.113.7"):
    return client.post(
        "/api/elevate/quote",
        json={"answers": {"services": ["website"]}},
        headers={"X-Forwarded-For": ip},
    )


def test_requests_over_limit_get_429(client, rate_limited):
    for _ in range(3):
        assert _quote(client).status_code == 200

    response = _quote(client)

    assert response.status_code == 429
    data = response.json()
    assert data["error"] == "Rate limit exceeded"
    assert data["retry_after"] == 60
    assert response.headers["Retry-After"] == "60"


def test_limit_is_per_client_ip(client, rate_limited):
    for _ in range(3):
        _quote(client, ip="203.0.113.7")

    assert _quote(client, ip="203.0.113.7").status_code == 429
    assert _quote(client, ip="198.51.100.1").status_code == 200


def test_submit_and_quote_share_the_intake_window(client, db, rate_limited):
    for _ in range(3):
        _quote(client)

    response = client.post(
        "/api/elevate/submit",
        json={"contact_email": "lead@example.com"},
        headers={"X-Forwarded-For": "203.0.113.7"},
    )
    assert response.status_code == 429


def test_health_is_not_rate_limited(client, rate_limited):
    for _ in range(5):
        assert client.get("/health").status_code == 200


def test_disabled_rate_limit_allows_everything(client, monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_enabled", False)
    rate_limit._rate_limit_store.clear()

    for _ in range(15):
        assert _quote(client).status_code == 200


def test_expired_hits_leave_the_window(rate_limited, monkeypatch):
    key = ("203.0.113.7", "/api/elevate")
    monkeypatch.setattr(rate_limit.time, "time", lambda: 1000.0)
    for _ in range(3):
        assert rate_limit._is_rate_limited(key) is False
    assert rate_limit._is_rate_limited(key) is True

    monkeypatch.setattr(rate_limit.time, "time", lambda: 1061.0)
    assert rate_limit._is_rate_limited(key) is False


def test_client_ip_prefers_first_forwarded_address(rate_limited):
    class _Req:
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        client = None

    assert rate_limit.get_client_ip(_Req()) == "203.0.113.7"


def test_forwarded_headers_ignored_unless_trusted(client, rate_limited, monkeypatch):
    """Without a trusted proxy, spoofed X-Forwarded-For values share the peer's window."""
    monkeypatch.setattr(settings, "rate_limit_trust_proxy_headers", False)

    for i in range(3):
        assert _quote(client, ip=f"198.51.100.{i}").status_code == 200

    assert _quote(client, ip="198.51.100.99").status_code == 429
    assert all(key[0] == "testclient" for key in rate_limit._rate_limit_store)


def test_client_ip_uses_socket_peer_when_untrusted(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_trust_proxy_headers", False)

    class _Client:
        host = "10.1.2.3"

    class _Req:
        headers = {"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "203.0.113.8"}
        client = _Client()

    assert rate_limit.get_client_ip(_Req()) == "10.1.2.3"


def test_idle_clients_are_swept_from_the_store(rate_limited, monkeypatch):
    first = ("203.0.113.7", "/api/elevate")
    second = ("198.51.100.1", "/api/elevate")

    monkeypatch.setattr(rate_limit.time, "time", lambda: 1000.0)
    rate_limit._is_rate_limited(first)
    assert first in rate_limit._rate_limit_store

    monkeypatch.setattr(rate_limit.time, "time", lambda: 1061.0)
    rate_limit._is_rate_limited(second)

    assert first not in rate_limit._rate_limit_store
    assert second in rate_limit._rate_limit_store
