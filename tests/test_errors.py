"""Tests for smsgate.errors — exception hierarchy and error details."""

import pytest

from smsgate.errors import (
    BadRequest,
    ConfigurationError,
    EndpointNotImplemented,
    Forbidden,
    GatewayError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    TooManyRequests,
    Unauthenticated,
)


class TestHierarchy:
    def test_http_error_is_gateway_error(self) -> None:
        assert issubclass(HTTPError, GatewayError)

    def test_configuration_error_is_gateway_error(self) -> None:
        assert issubclass(ConfigurationError, GatewayError)

    @pytest.mark.parametrize(
        "cls",
        [BadRequest, Unauthenticated, Forbidden, NotFound, EndpointNotImplemented],
    )
    def test_subclasses_are_http_errors(self, cls: type[HTTPError]) -> None:
        assert issubclass(cls, HTTPError)


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    @pytest.mark.parametrize(
        ("err", "status", "code"),
        [
            (BadRequest(), 400, "BAD_REQUEST"),
            (Unauthenticated(), 401, "UNAUTHORIZED"),
            (Forbidden(), 403, "FORBIDDEN"),
            (NotFound(), 404, "NOT_FOUND"),
            (EndpointNotImplemented(), 501, "NOT_IMPLEMENTED"),
        ],
    )
    def test_status_and_code(self, err: HTTPError, status: int, code: str) -> None:
        assert err.status == status
        assert err.code == code

    def test_unauthenticated_default_message(self) -> None:
        assert Unauthenticated().detail == "API key authentication required"

    def test_method_not_allowed_allow_header(self) -> None:
        err = MethodNotAllowed("DELETE", ("GET", "POST"))
        assert err.status == 405
        assert err.headers == (("Allow", "GET, POST"),)
        assert err.detail == "Method DELETE not allowed. Supported methods: GET, POST"

    def test_too_many_requests_retry_after(self) -> None:
        err = TooManyRequests("slow down", retry_after=42)
        assert err.status == 429
        assert err.code == "RATE_LIMIT_EXCEEDED"
        assert err.headers == (("Retry-After", "42"),)

    def test_raisable(self) -> None:
        with pytest.raises(NotFound) as exc_info:
            raise NotFound("API endpoint not found: GET /v1/x")
        assert exc_info.value.detail == "API endpoint not found: GET /v1/x"
