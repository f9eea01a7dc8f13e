"""Request transformer — enrich a matched request for its handler.

The transformer never mutates the incoming request. It derives a new
``GatewayRequest`` that carries:

- the route's extracted path parameters merged into the request's own;
- ``GatewayInfo`` describing how the request was routed;
- caller identity in ``x-user-id`` / ``x-api-key-id`` headers, so the
  handler never re-resolves the API key;
- an ``x-request-id`` (the client's own, or a generated one);
- for mapping bodies, the caller's ``userId`` (only when the body does
  not already name one) and a ``_gateway`` metadata object.
"""

import secrets
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from smsgate.gateway.context import CallerContext
from smsgate.http.headers import Headers
from smsgate.http.query import QueryParams
from smsgate.http.request import Request
from smsgate.routing.route import MatchResult, RouteMapping

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_request_id() -> str:
    """Return a fresh correlation id: ``req_<epoch-ms>_<9 base36 chars>``."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


@dataclass(frozen=True, slots=True)
class GatewayInfo:
    """How the gateway routed a request, for downstream logging and tracing."""

    original_route: str
    mapped_route: str
    route_params: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalRoute": self.original_route,
            "mappedRoute": self.mapped_route,
            "routeParams": dict(self.route_params),
            "queryParams": dict(self.query_params),
        }


@dataclass(frozen=True, slots=True)
class GatewayRequest:
    """The enriched request handed to a route handler.

    ``request`` is the original, untouched ``Request``; every other
    field is the gateway's view of it.
    """

    request: Request
    mapping: RouteMapping
    caller: CallerContext | None
    path_params: dict[str, str]
    headers: Headers
    body: Any
    gateway: GatewayInfo
    request_id: str

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def query(self) -> QueryParams:
        return self.request.query

    @property
    def user_id(self) -> str | None:
        """The caller's user id, or ``None`` for anonymous requests."""
        return self.caller.user_id if self.caller is not None else None


def _identity_headers(caller: CallerContext | None, request_id: str) -> dict[str, str]:
    values = {"x-request-id": request_id}
    if caller is not None:
        values["x-user-id"] = caller.user_id
        values["x-api-key-id"] = caller.api_key_id
    return values


def _transform_body(
    body: Any,
    caller: CallerContext | None,
    original_route: str,
    timestamp: str,
) -> Any:
    if not isinstance(body, Mapping):
        return body
    enriched = dict(body)
    if caller is not None and "userId" not in enriched:
        enriched["userId"] = caller.user_id
    enriched["_gateway"] = {
        "originalRoute": original_route,
        "apiKeyId": caller.api_key_id if caller is not None else None,
        "timestamp": timestamp,
    }
    return enriched


def transform_request(
    request: Request,
    match: MatchResult,
    caller: CallerContext | None,
    body: Any = None,
) -> GatewayRequest:
    """Derive the ``GatewayRequest`` for *match* from *request*.

    *body* is the already-parsed request body (any structured value,
    or ``None``). Mapping bodies are copied before enrichment; an
    existing ``userId`` is never overwritten.
    """
    request_id = request.request_id or generate_request_id()
    info = GatewayInfo(
        original_route=request.path,
        mapped_route=match.mapping.pattern,
        route_params=dict(match.params),
        query_params=request.query.to_dict(),
    )
    timestamp = datetime.now(UTC).isoformat()
    return GatewayRequest(
        request=request,
        mapping=match.mapping,
        caller=caller,
        path_params={**request.path_params, **match.params},
        headers=request.headers.replacing(_identity_headers(caller, request_id)),
        body=_transform_body(body, caller, request.path, timestamp),
        gateway=info,
        request_id=request_id,
    )
