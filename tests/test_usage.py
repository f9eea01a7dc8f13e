"""Tests for usage logging middleware."""

import logging

import pytest

from smsgate.gateway.app import Gateway
from smsgate.gateway.context import CallerContext
from smsgate.gateway.transform import GatewayRequest
from smsgate.middleware.api_key import ApiKeyConfig, ApiKeyMiddleware
from smsgate.middleware.gateway_context import GatewayContextMiddleware
from smsgate.middleware.usage import UsageLoggingMiddleware, UsageRecord
from smsgate.testing import TestClient

CALLER = CallerContext.create("u1", "key-1", {"sms:send"})


def _lookup(api_key: str, ip: str) -> CallerContext | None:
    return CALLER if api_key == "good" else None


def _gateway(recorder=None) -> Gateway:
    gateway = Gateway(
        middleware=[
            GatewayContextMiddleware(),
            ApiKeyMiddleware(
                ApiKeyConfig(verify_key=_lookup, exclude_paths=frozenset({"/health"}))
            ),
            UsageLoggingMiddleware(recorder),
        ]
    )

    @gateway.route("POST", "/v1/sms/send", permissions=["sms:send"])
    def send(request: GatewayRequest):
        return {"ok": True}

    return gateway


class TestUsageLogging:
    @pytest.mark.anyio
    async def test_recorder_receives_record(self) -> None:
        records: list[UsageRecord] = []
        async with TestClient(_gateway(records.append)) as client:
            await client.post(
                "/v1/sms/send",
                headers={"x-api-key": "good", "user-agent": "sdk/1.0", "x-request-id": "req_1"},
            )
        assert len(records) == 1
        record = records[0]
        assert record.api_key_id == "key-1"
        assert record.path == "/v1/sms/send"
        assert record.method == "POST"
        assert record.status == 200
        assert record.ip_address == "127.0.0.1"
        assert record.user_agent == "sdk/1.0"
        assert record.request_id == "req_1"
        assert record.response_time_ms >= 0

    @pytest.mark.anyio
    async def test_records_error_status(self) -> None:
        records: list[UsageRecord] = []
        async with TestClient(_gateway(records.append)) as client:
            await client.post("/v1/nope", headers={"x-api-key": "good"})
        assert records[0].status == 404

    @pytest.mark.anyio
    async def test_generated_request_id_recorded(self) -> None:
        records: list[UsageRecord] = []
        async with TestClient(_gateway(records.append)) as client:
            response = await client.post("/v1/sms/send", headers={"x-api-key": "good"})
        assert records[0].request_id == response.header("X-Request-ID")

    @pytest.mark.anyio
    async def test_anonymous_requests_not_recorded(self) -> None:
        records: list[UsageRecord] = []
        async with TestClient(_gateway(records.append)) as client:
            await client.get("/health")
        assert records == []

    @pytest.mark.anyio
    async def test_failing_recorder_does_not_fail_request(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken(record: UsageRecord) -> None:
            raise OSError("disk full")

        with caplog.at_level(logging.INFO, logger="smsgate.usage"):
            async with TestClient(_gateway(broken)) as client:
                response = await client.post("/v1/sms/send", headers={"x-api-key": "good"})
        assert response.status == 200
        assert "Usage recorder failed" in caplog.text
        assert "POST /v1/sms/send 200" in caplog.text
