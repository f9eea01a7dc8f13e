"""Error handling pipeline for gateway requests.

Maps HTTPError exceptions and unexpected failures to the platform's JSON
error envelope::

    {"success": false, "message": "...", "code": "NOT_FOUND"}
"""

import logging
from typing import Any

from smsgate.errors import HTTPError
from smsgate.http.request import Request
from smsgate.http.response import Response, json_response

logger = logging.getLogger("smsgate.server")


def error_payload(message: str, code: str, **extra: Any) -> dict[str, Any]:
    """The error envelope shared by every non-2xx gateway response."""
    return {"success": False, "message": message, "code": code, **extra}


def http_error_response(exc: HTTPError, request: Request) -> Response:
    """Render an HTTPError, carrying over its headers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response = json_response(
        error_payload(exc.detail or f"Error {exc.status}", exc.code),
        status=exc.status,
    )
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def internal_error_response(exc: Exception, request: Request, *, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    message = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return json_response(error_payload(message, "INTERNAL_ERROR"), status=500)
