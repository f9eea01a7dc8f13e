"""Tests for smsgate.gateway.permissions — the permission gate."""

import logging

import pytest

from smsgate.errors import Forbidden, Unauthenticated
from smsgate.gateway.context import CallerContext
from smsgate.gateway.permissions import authorize, has_permission
from smsgate.routing.route import RouteMapping
from smsgate.security.audit import SecurityEvent, set_security_event_sink


def _handler() -> None:
    return None


def _mapping(*perms: str) -> RouteMapping:
    return RouteMapping.create("POST", "/v1/sms/send", _handler, perms)


class TestHasPermission:
    def test_exact_membership(self) -> None:
        assert has_permission({"sms:send"}, "sms:send") is True
        assert has_permission({"sms:send"}, "sms:bulk") is False

    def test_no_wildcards(self) -> None:
        assert has_permission({"sms:*"}, "sms:send") is False


class TestAuthorize:
    def test_allows_with_required_permission(self, sms_caller: CallerContext) -> None:
        assert authorize(sms_caller, _mapping("sms:send")) is None

    def test_any_one_permission_suffices(self, wallet_caller: CallerContext) -> None:
        authorize(wallet_caller, _mapping("sms:send", "wallet:read"))

    def test_forbids_without_permission(self, wallet_caller: CallerContext) -> None:
        with pytest.raises(Forbidden) as exc_info:
            authorize(wallet_caller, _mapping("sms:send"))
        assert exc_info.value.status == 403
        assert exc_info.value.detail == "Insufficient permissions. Required: sms:send"

    def test_message_lists_alternatives(self, wallet_caller: CallerContext) -> None:
        with pytest.raises(Forbidden) as exc_info:
            authorize(wallet_caller, _mapping("sms:send", "sms:bulk"))
        assert exc_info.value.detail.endswith("Required: sms:send or sms:bulk")

    def test_empty_requirement_always_forbidden(self, sms_caller: CallerContext) -> None:
        with pytest.raises(Forbidden):
            authorize(sms_caller, _mapping())

    def test_missing_caller_is_unauthenticated(self) -> None:
        with pytest.raises(Unauthenticated) as exc_info:
            authorize(None, _mapping("sms:send"))
        assert exc_info.value.status == 401
        assert exc_info.value.detail == "API key authentication required"

    def test_denial_is_logged(
        self, wallet_caller: CallerContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="smsgate.auth"), pytest.raises(Forbidden):
            authorize(wallet_caller, _mapping("sms:send"))
        assert "key-2" in caplog.text

    def test_denial_emits_security_event(self, wallet_caller: CallerContext) -> None:
        events: list[SecurityEvent] = []
        set_security_event_sink(events.append)
        with pytest.raises(Forbidden):
            authorize(wallet_caller, _mapping("sms:send"))
        assert [e.name for e in events] == ["gateway.authz.permission_denied"]
        assert events[0].api_key_id == "key-2"
        assert events[0].status == 403
        assert events[0].required == ("sms:send",)
        assert events[0].route_pattern == "/v1/sms/send"
