"""Tests for per-API-key rate limiting middleware."""

import pytest

from smsgate.gateway.app import Gateway
from smsgate.gateway.context import CallerContext
from smsgate.gateway.transform import GatewayRequest
from smsgate.middleware.api_key import ApiKeyConfig, ApiKeyMiddleware
from smsgate.middleware.rate_limit import ApiKeyRateLimitMiddleware, RateLimitConfig
from smsgate.testing import TestClient, assert_error

KEYS = {
    "k1": CallerContext.create("u1", "key-1", {"sms:send"}, rate_limit=2),
    "k2": CallerContext.create("u2", "key-2", {"sms:send"}, rate_limit=2),
}


def _lookup(api_key: str, ip: str) -> CallerContext | None:
    return KEYS.get(api_key)


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _gateway(limiter: ApiKeyRateLimitMiddleware) -> Gateway:
    gateway = Gateway(middleware=[ApiKeyMiddleware(ApiKeyConfig(verify_key=_lookup)), limiter])

    @gateway.route("POST", "/v1/sms/send", permissions=["sms:send"])
    def send(request: GatewayRequest):
        return {"ok": True}

    return gateway


@pytest.mark.anyio
async def test_blocks_after_key_limit() -> None:
    async with TestClient(_gateway(ApiKeyRateLimitMiddleware())) as client:
        r1 = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
        r2 = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
        r3 = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})

    assert r1.status == 200
    assert r2.status == 200
    assert_error(
        r3,
        429,
        code="RATE_LIMIT_EXCEEDED",
        message="Rate limit exceeded. Maximum 2 requests per hour allowed.",
    )
    assert r3.header("retry-after") is not None


@pytest.mark.anyio
async def test_rate_limit_headers_on_allowed_responses() -> None:
    async with TestClient(_gateway(ApiKeyRateLimitMiddleware())) as client:
        response = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
    assert response.header("X-Rate-Limit-Limit") == "2"
    assert response.header("RateLimit-Limit") == "2"
    assert response.header("RateLimit-Remaining") == "1"
    assert int(response.header("RateLimit-Reset") or 0) > 0


@pytest.mark.anyio
async def test_limit_is_per_api_key() -> None:
    async with TestClient(_gateway(ApiKeyRateLimitMiddleware())) as client:
        for _ in range(2):
            await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
        blocked = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
        other = await client.post("/v1/sms/send", headers={"x-api-key": "k2"})
    assert blocked.status == 429
    assert other.status == 200


@pytest.mark.anyio
async def test_window_rolls_over() -> None:
    clock = _Clock()
    limiter = ApiKeyRateLimitMiddleware(RateLimitConfig(window_seconds=60), clock=clock)
    async with TestClient(_gateway(limiter)) as client:
        for _ in range(2):
            await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
        blocked = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
        clock.now += 61
        allowed = await client.post("/v1/sms/send", headers={"x-api-key": "k1"})
    assert blocked.status == 429
    assert "per minute" in blocked.json()["message"]
    assert allowed.status == 200


@pytest.mark.anyio
async def test_anonymous_requests_pass_through() -> None:
    gateway = Gateway(middleware=[ApiKeyRateLimitMiddleware()])
    async with TestClient(gateway) as client:
        response = await client.get("/health")
    assert response.status == 200
    assert response.header("RateLimit-Limit") is None
