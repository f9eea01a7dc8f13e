"""Tests for ApiSecurityHeadersMiddleware and GatewayContextMiddleware."""

import re

import pytest

from smsgate.errors import Forbidden
from smsgate.gateway.app import Gateway
from smsgate.gateway.transform import GatewayRequest
from smsgate.middleware.gateway_context import GatewayContextMiddleware
from smsgate.middleware.security_headers import (
    ApiSecurityHeadersConfig,
    ApiSecurityHeadersMiddleware,
)
from smsgate.testing import TestClient, assert_gateway_headers


def _make_gateway(*middleware) -> Gateway:
    gateway = Gateway(middleware=middleware)

    @gateway.route("GET", "/v1/ok", permissions=["x"])
    def ok(request: GatewayRequest):
        return {"ok": True}

    @gateway.route("GET", "/v1/denied", permissions=["x"])
    def denied(request: GatewayRequest):
        raise Forbidden("no")

    return gateway


@pytest.mark.anyio
async def test_headers_on_every_response() -> None:
    gateway = _make_gateway(ApiSecurityHeadersMiddleware())
    async with TestClient(gateway) as client:
        response = await client.get("/health")
    assert response.header("x-content-type-options") == "nosniff"
    assert response.header("x-frame-options") == "DENY"
    assert response.header("x-xss-protection") == "1; mode=block"
    assert response.header("referrer-policy") == "strict-origin-when-cross-origin"
    assert response.header("x-api-version") == "v1"
    assert response.header("x-rate-limit-window") == "3600"


@pytest.mark.anyio
async def test_headers_on_error_responses() -> None:
    gateway = _make_gateway(ApiSecurityHeadersMiddleware())
    async with TestClient(gateway) as client:
        response = await client.get("/v1/missing")
    assert response.status == 404
    assert response.header("x-frame-options") == "DENY"


@pytest.mark.anyio
async def test_custom_values() -> None:
    config = ApiSecurityHeadersConfig(api_version="v2", rate_limit_window_seconds=60)
    gateway = _make_gateway(ApiSecurityHeadersMiddleware(config))
    async with TestClient(gateway) as client:
        response = await client.get("/health")
    assert response.header("x-api-version") == "v2"
    assert response.header("x-rate-limit-window") == "60"


class TestGatewayContext:
    @pytest.mark.anyio
    async def test_adds_gateway_headers(self) -> None:
        gateway = _make_gateway(GatewayContextMiddleware("acme-v1"))
        async with TestClient(gateway) as client:
            response = await client.get("/health")
        assert_gateway_headers(response)
        assert response.header("X-API-Gateway") == "acme-v1"
        assert re.fullmatch(r"\d+ms", response.header("X-Response-Time") or "")
        assert (response.header("X-Request-ID") or "").startswith("req_")

    @pytest.mark.anyio
    async def test_echoes_client_request_id(self) -> None:
        gateway = _make_gateway(GatewayContextMiddleware())
        async with TestClient(gateway) as client:
            response = await client.get("/health", headers={"x-request-id": "req_abc"})
        assert response.header("X-Request-ID") == "req_abc"

    @pytest.mark.anyio
    async def test_error_responses_carry_request_id(self) -> None:
        gateway = _make_gateway(GatewayContextMiddleware())
        async with TestClient(gateway) as client:
            response = await client.get("/v1/denied")
        assert response.status == 401
        assert_gateway_headers(response)
