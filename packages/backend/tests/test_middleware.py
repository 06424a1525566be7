"""Tests for middleware: security headers, request IDs, rate limiting.

Learn: No Redis runs in tests, so the rate limiter normally skips. The
limiter itself is tested by patching get_redis with a tiny in-memory
counter that implements the two commands it uses.
"""

import pytest

from productiveflow.middleware import rate_limit


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_security_headers_on_redirects(client):
    r = await client.get("/dashboard")
    assert r.status_code == 307
    assert r.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/api/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/api/health", headers={"X-Request-ID": "trace-abc"})
    assert r.headers["X-Request-ID"] == "trace-abc"


@pytest.mark.asyncio
async def test_rate_limit_skipped_without_redis(client):
    r = await client.get("/api/health")
    assert "X-RateLimit-Limit" not in r.headers


# ═══════════════════════════════════════════════════════════
# Rate limiting with a stand-in counter
# ═══════════════════════════════════════════════════════════


class CounterStore:
    def __init__(self):
        self.counts: dict[str, int] = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        return True


@pytest.fixture
def counter(monkeypatch):
    store = CounterStore()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: store)
    return store


@pytest.mark.asyncio
async def test_rate_limit_headers(client, counter):
    r = await client.get("/api/health")
    assert r.headers["X-RateLimit-Limit"] == "120"
    assert r.headers["X-RateLimit-Remaining"] == "119"


@pytest.mark.asyncio
async def test_signin_bucket_is_stricter(client, counter):
    body = {"email": "nobody@acme.test", "password": "x"}
    for _ in range(10):
        r = await client.post("/api/auth/signin", json=body)
        assert r.status_code == 401

    r = await client.post("/api/auth/signin", json=body)
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "60"

    # The general bucket is untouched
    assert (await client.get("/api/health")).status_code == 200
