"""Gateway context middleware — request ids and gateway response headers.

Guarantees every request carries an ``x-request-id`` before it reaches
authentication or routing, and stamps responses with the gateway's
name, the request id, and the time spent inside the gateway.
"""

import time

from smsgate.gateway.transform import generate_request_id
from smsgate.http.request import Request
from smsgate.http.response import Response
from smsgate.middleware.protocol import Next


class GatewayContextMiddleware:
    """Attach ``X-API-Gateway``, ``X-Request-ID`` and ``X-Response-Time``."""

    __slots__ = ("_gateway_name",)

    def __init__(self, gateway_name: str = "smsgate-v1") -> None:
        self._gateway_name = gateway_name

    async def __call__(self, request: Request, next: Next) -> Response:
        request_id = request.request_id
        if not request_id:
            request_id = generate_request_id()
            request = request.with_headers({"x-request-id": request_id})

        start = time.perf_counter()
        response = await next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        return response.with_headers(
            {
                "X-API-Gateway": self._gateway_name,
                "X-Request-ID": request_id,
                "X-Response-Time": f"{elapsed_ms:.0f}ms",
            }
        )
