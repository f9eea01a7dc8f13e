"""API key middleware — format validation and authentication.

Two layers, installed in this order::

    gateway.add_middleware(ApiKeyFormatMiddleware())
    gateway.add_middleware(ApiKeyMiddleware(ApiKeyConfig(verify_key=lookup_key)))

``ApiKeyFormatMiddleware`` rejects requests whose key is missing or
malformed (400) before any lookup happens. ``ApiKeyMiddleware`` resolves
the key through ``verify_key`` and stores the resulting
``CallerContext`` in a ContextVar for the rest of the request::

    from smsgate.gateway.context import current_caller

    caller = current_caller()
    if caller is not None:
        ...
"""

import logging
import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from smsgate._internal.invoke import invoke
from smsgate.errors import BadRequest, ConfigurationError, HTTPError, Unauthenticated
from smsgate.gateway.context import CallerContext, caller_var
from smsgate.http.request import Request
from smsgate.http.response import Response
from smsgate.middleware.protocol import Next
from smsgate.security.audit import API_KEY_REJECTED, emit_security_event

logger = logging.getLogger("smsgate.auth")

type KeyVerifier = Callable[[str, str], CallerContext | None | Awaitable[CallerContext | None]]

DEFAULT_KEY_PATTERN = r"msk_[a-f0-9]{64}"


def _skips_auth(request: Request, exclude_paths: frozenset[str]) -> bool:
    # Browsers never send credentials on CORS preflight.
    return request.method == "OPTIONS" or request.path in exclude_paths


class ApiKeyFormatMiddleware:
    """Reject requests without a well-formed API key.

    Keys look like ``msk_`` followed by 64 lowercase hex characters
    unless another *pattern* is given.
    """

    __slots__ = ("_exclude_paths", "_header", "_regex")

    def __init__(
        self,
        *,
        header: str = "x-api-key",
        pattern: str = DEFAULT_KEY_PATTERN,
        exclude_paths: frozenset[str] = frozenset(),
    ) -> None:
        self._header = header
        self._regex = re.compile(pattern)
        self._exclude_paths = exclude_paths

    async def __call__(self, request: Request, next: Next) -> Response:
        if _skips_auth(request, self._exclude_paths):
            return await next(request)
        api_key = request.headers.get(self._header)
        if not api_key:
            raise BadRequest("API key is required")
        if not self._regex.fullmatch(api_key):
            raise BadRequest("Invalid API key format")
        return await next(request)


@dataclass(frozen=True, slots=True)
class ApiKeyConfig:
    """API key authentication configuration.

    Attributes:
        verify_key: Callback ``(api_key, client_ip) -> CallerContext | None``,
            sync or async. Return ``None`` for unknown keys, or raise an
            ``HTTPError`` (e.g. 403 for an IP outside the key's whitelist).
        header: Request header carrying the key.
        exclude_paths: Paths that skip authentication entirely.
    """

    verify_key: KeyVerifier | None = None
    header: str = "x-api-key"
    exclude_paths: frozenset[str] = frozenset()


class ApiKeyMiddleware:
    """Authenticate the request's API key and publish its ``CallerContext``."""

    __slots__ = ("_config",)

    def __init__(self, config: ApiKeyConfig) -> None:
        if config.verify_key is None:
            msg = "ApiKeyConfig requires 'verify_key' to resolve API keys."
            raise ConfigurationError(msg)
        self._config = config

    async def _authenticate(self, request: Request) -> CallerContext:
        api_key = request.headers.get(self._config.header)
        if not api_key:
            raise Unauthenticated("API key is required")

        caller = await invoke(self._config.verify_key, api_key, request.client_ip)
        if caller is None:
            raise Unauthenticated("Invalid API key")
        return caller

    async def __call__(self, request: Request, next: Next) -> Response:
        """Authenticate the request, then dispatch."""
        if _skips_auth(request, self._config.exclude_paths):
            token = caller_var.set(None)
            try:
                return await next(request)
            finally:
                caller_var.reset(token)

        start = time.perf_counter()
        try:
            caller = await self._authenticate(request)
        except HTTPError as exc:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.warning(
                "API key authentication failed: %s %s from %s (%s) after %.1fms: %s",
                request.method,
                request.path,
                request.client_ip,
                request.user_agent or "unknown agent",
                elapsed_ms,
                exc.detail,
            )
            emit_security_event(API_KEY_REJECTED, exc.status, request=request, reason=exc.detail)
            raise

        token = caller_var.set(caller)
        try:
            return await next(request)
        finally:
            caller_var.reset(token)
