"""smsgate exception hierarchy.

Shared across the route table, permission gate, middleware, and the
gateway application so every module raises and catches the same types.
"""

from dataclasses import dataclass


class GatewayError(Exception):
    """Base for all smsgate-specific errors."""


class ConfigurationError(GatewayError):
    """Raised when gateway configuration is invalid.

    Typically raised while wiring middleware at startup.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(GatewayError):
    """An error that maps directly to an HTTP status code.

    Raised by the gateway, middleware, or handlers. The ASGI handler
    catches these and renders the JSON error envelope.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    code: str = "ERROR"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the request is malformed (e.g. API key has the wrong format)."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail, code="BAD_REQUEST")


class Unauthenticated(HTTPError):  # noqa: N818
    """401 — no caller identity could be established."""

    def __init__(self, detail: str = "API key authentication required") -> None:
        super().__init__(status=401, detail=detail, code="UNAUTHORIZED")


class Forbidden(HTTPError):  # noqa: N818
    """403 — the caller is known but lacks a required permission."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail, code="FORBIDDEN")


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail, code="NOT_FOUND")


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405 — the path exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, method: str, allowed: tuple[str, ...]) -> None:
        allow_value = ", ".join(allowed)
        super().__init__(
            status=405,
            detail=f"Method {method} not allowed. Supported methods: {allow_value}",
            headers=(("Allow", allow_value),),
            code="METHOD_NOT_ALLOWED",
        )


class TooManyRequests(HTTPError):  # noqa: N818
    """429 — the API key exhausted its request budget for the window."""

    def __init__(self, detail: str, retry_after: int) -> None:
        super().__init__(
            status=429,
            detail=detail,
            headers=(("Retry-After", str(retry_after)),),
            code="RATE_LIMIT_EXCEEDED",
        )


class EndpointNotImplemented(HTTPError):  # noqa: N818
    """501 — the route is registered but its handler is not available yet."""

    def __init__(self, detail: str = "Endpoint is not yet implemented") -> None:
        super().__init__(status=501, detail=detail, code="NOT_IMPLEMENTED")
