"""Tests for client IP resolution and vote rate limiting."""

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from venue_votes.core import rate_limit
from venue_votes.core.config import get_settings
from venue_votes.core.rate_limit import get_client_ip, limiter


def _make_request(client_ip: str, headers: dict[str, str] | None = None) -> Request:
    raw_headers = [
        (name.lower().encode(), value.encode()) for name, value in (headers or {}).items()
    ]
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/api/vote",
            "headers": raw_headers,
            "client": (client_ip, 12345),
        }
    )


@pytest.fixture
def trusted_proxies(monkeypatch):
    """Set TRUSTED_PROXIES for a test, clearing the parsed cache around it."""

    def _set(value: str) -> None:
        monkeypatch.setattr(get_settings(), "trusted_proxies", value)
        rate_limit._get_trusted_proxies.cache_clear()

    yield _set
    rate_limit._get_trusted_proxies.cache_clear()


class TestGetClientIp:
    def test_direct_connection(self, trusted_proxies):
        trusted_proxies("127.0.0.1")
        assert get_client_ip(_make_request("198.51.100.7")) == "198.51.100.7"

    def test_real_ip_from_trusted_proxy(self, trusted_proxies):
        trusted_proxies("127.0.0.1")
        request = _make_request("127.0.0.1", {"X-Real-IP": "203.0.113.9"})
        assert get_client_ip(request) == "203.0.113.9"

    def test_forwarded_for_from_trusted_proxy(self, trusted_proxies):
        trusted_proxies("127.0.0.1")
        request = _make_request("127.0.0.1", {"X-Forwarded-For": "203.0.113.9, 10.0.0.2"})
        assert get_client_ip(request) == "203.0.113.9"

    def test_spoofed_headers_from_untrusted_peer_ignored(self, trusted_proxies):
        trusted_proxies("127.0.0.1")
        request = _make_request(
            "198.51.100.7",
            {"X-Real-IP": "203.0.113.9", "X-Forwarded-For": "203.0.113.10"},
        )
        assert get_client_ip(request) == "198.51.100.7"

    def test_cidr_trusted_proxy(self, trusted_proxies):
        trusted_proxies("10.0.0.0/8")
        request = _make_request("10.1.2.3", {"X-Real-IP": "203.0.113.9"})
        assert get_client_ip(request) == "203.0.113.9"

    def test_empty_trusted_proxies_trusts_nobody(self, trusted_proxies):
        trusted_proxies("")
        request = _make_request("127.0.0.1", {"X-Real-IP": "203.0.113.9"})
        assert get_client_ip(request) == "127.0.0.1"


class TestVoteRateLimitByClient:
    def test_rotating_real_ip_header_does_not_bypass_limit(
        self, client: TestClient, monkeypatch, trusted_proxies
    ):
        """Test a client cannot dodge the limit by varying X-Real-IP."""
        trusted_proxies("127.0.0.1")
        monkeypatch.setattr(limiter, "enabled", True)
        monkeypatch.setattr(get_settings(), "vote_rate_limit_per_minute", 2)
        limiter.reset()
        body = {"voterName": "alice", "venueName": "RoofBar", "category": "Nightlife"}
        try:
            codes = [
                client.post("/api/vote", json=body, headers={"X-Real-IP": f"203.0.113.{n}"})
                .status_code
                for n in range(1, 6)
            ]
        finally:
            limiter.reset()
        assert codes[:2] == [200, 200]
        assert codes[2:] == [429, 429, 429]
