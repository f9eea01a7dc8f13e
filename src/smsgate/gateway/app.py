"""The API gateway application.

Mutable during setup (route registration, middleware). Frozen at
runtime when ``__call__()`` is first invoked: the route table stops
accepting registrations and the middleware chain is compiled once.
"""

import inspect
import json
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from smsgate._internal.asgi import Receive, Scope, Send
from smsgate._internal.invoke import invoke
from smsgate._internal.types import Handler
from smsgate.config import GatewayConfig
from smsgate.errors import BadRequest, HTTPError, MethodNotAllowed, NotFound, Unauthenticated
from smsgate.gateway.context import current_caller
from smsgate.gateway.docs import documentation_payload, render_docs_html
from smsgate.gateway.permissions import authorize
from smsgate.gateway.transform import transform_request
from smsgate.http.request import Request
from smsgate.http.response import Response, success
from smsgate.middleware.api_key import (
    ApiKeyConfig,
    ApiKeyFormatMiddleware,
    ApiKeyMiddleware,
    KeyVerifier,
)
from smsgate.middleware.gateway_context import GatewayContextMiddleware
from smsgate.middleware.protocol import Middleware, Next
from smsgate.middleware.rate_limit import ApiKeyRateLimitMiddleware, RateLimitConfig
from smsgate.middleware.security_headers import (
    ApiSecurityHeadersConfig,
    ApiSecurityHeadersMiddleware,
)
from smsgate.middleware.usage import UsageLoggingMiddleware, UsageRecorder
from smsgate.routing.route import MatchResult, RouteMapping
from smsgate.routing.table import RouteTable
from smsgate.server.handler import build_chain, handle_request
from smsgate.server.negotiation import negotiate

logger = logging.getLogger("smsgate.gateway")

PUBLIC_PATHS = frozenset({"/docs", "/health"})
BUILTIN_PATHS = PUBLIC_PATHS | {"/info"}


def default_middleware(
    verify_key: KeyVerifier,
    config: GatewayConfig | None = None,
    *,
    recorder: UsageRecorder | None = None,
    public_paths: Iterable[str] = PUBLIC_PATHS,
) -> list[Middleware]:
    """The standard external-API middleware stack, outermost first.

    Security headers and gateway context wrap everything (error
    responses included), then key format validation, authentication,
    per-key rate limiting, and usage logging.
    """
    cfg = config or GatewayConfig()
    public = frozenset(public_paths)
    return [
        ApiSecurityHeadersMiddleware(
            ApiSecurityHeadersConfig(
                api_version=cfg.api_version,
                rate_limit_window_seconds=cfg.rate_limit_window_seconds,
            )
        ),
        GatewayContextMiddleware(cfg.gateway_name),
        ApiKeyFormatMiddleware(
            header=cfg.api_key_header, pattern=cfg.api_key_pattern, exclude_paths=public
        ),
        ApiKeyMiddleware(
            ApiKeyConfig(verify_key=verify_key, header=cfg.api_key_header, exclude_paths=public)
        ),
        ApiKeyRateLimitMiddleware(RateLimitConfig(window_seconds=cfg.rate_limit_window_seconds)),
        UsageLoggingMiddleware(recorder),
    ]


class Gateway:
    """The API gateway.

    Owns an explicit ``RouteTable`` and a middleware list. Requests under
    ``/<api_version>/`` go through the routing pipeline: match,
    authorize, transform, then call the route's handler::

        table = build_default_table(MyClientApi())
        gateway = Gateway(table=table, middleware=default_middleware(lookup_key))

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the chain, even when
        several workers call ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_chain",
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "table",
    )

    def __init__(
        self,
        config: GatewayConfig | None = None,
        *,
        table: RouteTable | None = None,
        middleware: Sequence[Middleware] = (),
    ) -> None:
        self.config: GatewayConfig = config or GatewayConfig()
        self.table: RouteTable = table if table is not None else RouteTable()
        self._middleware_list: list[Middleware] = list(middleware)
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._chain: Next | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Setup --

    def route(
        self,
        method: str,
        pattern: str,
        *,
        permissions: Iterable[str] = (),
        rate_limit: int | None = None,
        name: str | None = None,
        description: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a handler for *method* and *pattern*.

        Usage::

            @gateway.route("GET", "/v1/wallet/balance", permissions=["wallet:read"])
            async def balance(request: GatewayRequest):
                return {"balance": 42}
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self.table.register(
                RouteMapping.create(
                    method,
                    pattern,
                    func,
                    permissions,
                    rate_limit=rate_limit,
                    name=name,
                    description=description,
                )
            )
            return func

        return decorator

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline (innermost so far)."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run during ASGI lifespan startup."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run during ASGI lifespan shutdown."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the gateway with pounce."""
        from smsgate.server.runner import run_server

        self._ensure_frozen()
        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._chain is not None
        await handle_request(scope, receive, send, chain=self._chain, debug=self.config.debug)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:
                    logger.exception("Gateway startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                logger.info(
                    "Gateway %s started with %d routes", self.config.gateway_name, len(self.table)
                )
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freezing --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self.table.freeze()
            self._chain = build_chain(
                self._dispatch, tuple(self._middleware_list), debug=self.config.debug
            )
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the gateway after it has started serving requests. "
                "Register routes and middleware before the first request."
            )
            raise RuntimeError(msg)

    # -- Dispatch --

    async def _dispatch(self, request: Request) -> Response:
        if request.method == "OPTIONS":
            return self._preflight(request)

        if request.method == "GET":
            if request.path == "/docs":
                return self._docs(request)
            if request.path == "/health":
                return success(self.table.health(), message="API Gateway is healthy")
            if request.path == "/info":
                return self._info()

        match = self.table.find_route(request.method, request.path)
        if match is not None:
            return await self._route(request, match)

        if request.path.startswith(f"/{self.config.api_version}/"):
            logger.info("No API route for %s %s", request.method, request.path)
            raise NotFound(f"API endpoint not found: {request.method} {request.path}")

        return self._fallback(request)

    def _docs(self, request: Request) -> Response:
        if request.accepts_html:
            return Response(
                render_docs_html(self.table, self.config),
                content_type="text/html; charset=utf-8",
            )
        return success(
            documentation_payload(self.table, self.config),
            message="API documentation retrieved successfully",
        )

    def _info(self) -> Response:
        caller = current_caller()
        if caller is None:
            raise Unauthenticated()
        return success(
            {
                "userId": caller.user_id,
                "permissions": sorted(caller.permissions),
                "rateLimit": caller.rate_limit,
            },
            message="API key information retrieved successfully",
        )

    def _preflight(self, request: Request) -> Response:
        wanted = request.headers.get("access-control-request-method") or "GET"
        builtin = wanted == "GET" and request.path in BUILTIN_PATHS
        if not builtin and self.table.find_route(wanted, request.path) is None:
            raise NotFound(f"API endpoint not found: {wanted} {request.path}")
        return Response(
            b"",
            status=204,
            headers=(
                ("Access-Control-Allow-Methods", wanted),
                ("Access-Control-Allow-Headers", self.config.preflight_allow_headers),
                ("Access-Control-Max-Age", str(self.config.preflight_max_age)),
            ),
        )

    def _fallback(self, request: Request) -> Response:
        allowed = self.table.allowed_methods(request.path, self.config.supported_methods)
        if allowed and request.method not in allowed:
            raise MethodNotAllowed(request.method, allowed)
        raise NotFound(f"API endpoint not found: {request.method} {request.path}")

    async def _route(self, request: Request, match: MatchResult) -> Response:
        caller = current_caller()
        try:
            authorize(caller, match.mapping, request=request)
            body = await _read_body(request)
            gateway_request = transform_request(request, match, caller, body)
            logger.info(
                "API gateway routing %s %s -> %s (key=%s, request=%s)",
                request.method,
                request.path,
                match.mapping.name,
                caller.api_key_id if caller is not None else "-",
                gateway_request.request_id,
            )
            result = await invoke(match.mapping.handler, gateway_request)
        except HTTPError as exc:
            logger.info(
                "API gateway rejected %s %s: %d %s",
                request.method,
                request.path,
                exc.status,
                exc.detail,
            )
            raise
        except Exception as exc:
            logger.error(
                "API gateway error in %s for %s %s: %s",
                match.mapping.name,
                request.method,
                request.path,
                exc,
            )
            raise
        return negotiate(result)


async def _read_body(request: Request) -> Any:
    """The request body: parsed JSON, raw bytes, or ``None`` when empty."""
    raw = await request.body()
    if not raw:
        return None
    content_type = request.content_type or ""
    if "json" not in content_type:
        return raw
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise BadRequest("Request body is not valid JSON") from exc
