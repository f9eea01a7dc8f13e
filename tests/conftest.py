"""Shared fixtures for smsgate tests."""

import pytest

from smsgate.gateway.context import CallerContext
from smsgate.security.audit import set_security_event_sink


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_security_sink():
    yield
    set_security_event_sink(None)


@pytest.fixture
def sms_caller() -> CallerContext:
    return CallerContext.create("u1", "key-1", {"sms:send", "sms:status"}, rate_limit=100)


@pytest.fixture
def wallet_caller() -> CallerContext:
    return CallerContext.create("u2", "key-2", {"wallet:read"})
