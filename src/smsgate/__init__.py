"""smsgate — API gateway for the SMS platform's client API.

Routes versioned ``/v1`` calls from API-key clients to their handlers:
matches method and path against a route table, checks the caller's
permissions, enriches the request, and dispatches.

Basic usage::

    from smsgate import Gateway, build_default_table, default_middleware

    gateway = Gateway(
        table=build_default_table(MyClientApi()),
        middleware=default_middleware(lookup_key),
    )

    @gateway.route("GET", "/v1/ping", permissions=["sms:send"])
    async def ping(request):
        return {"pong": True}

    gateway.run()
"""

__version__ = "0.1.0"
__all__ = [
    "CallerContext",
    "ClientApi",
    "Forbidden",
    "Gateway",
    "GatewayConfig",
    "GatewayError",
    "GatewayRequest",
    "HTTPError",
    "MatchResult",
    "Middleware",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "RouteMapping",
    "RouteTable",
    "Unauthenticated",
    "authorize",
    "build_default_table",
    "current_caller",
    "default_middleware",
    "transform_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import smsgate`` fast while providing a clean top-level API.
    """
    if name in ("Gateway", "default_middleware"):
        from smsgate.gateway import app as _app

        return getattr(_app, name)

    if name == "GatewayConfig":
        from smsgate.config import GatewayConfig

        return GatewayConfig

    if name in ("RouteMapping", "MatchResult"):
        from smsgate.routing import route as _route

        return getattr(_route, name)

    if name == "RouteTable":
        from smsgate.routing.table import RouteTable

        return RouteTable

    if name in ("CallerContext", "current_caller"):
        from smsgate.gateway import context as _ctx

        return getattr(_ctx, name)

    if name == "authorize":
        from smsgate.gateway.permissions import authorize

        return authorize

    if name in ("GatewayRequest", "transform_request"):
        from smsgate.gateway import transform as _transform

        return getattr(_transform, name)

    if name in ("ClientApi", "build_default_table"):
        from smsgate.gateway import catalog as _catalog

        return getattr(_catalog, name)

    if name == "Request":
        from smsgate.http.request import Request

        return Request

    if name == "Response":
        from smsgate.http.response import Response

        return Response

    if name in ("Middleware", "Next"):
        from smsgate.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("GatewayError", "HTTPError", "Forbidden", "NotFound", "Unauthenticated"):
        from smsgate import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
