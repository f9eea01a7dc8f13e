"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    ApiKeyFormatMiddleware -- Reject missing or malformed API keys (400)
    ApiKeyMiddleware -- Resolve the API key into a CallerContext (401)
    ApiKeyRateLimitMiddleware -- Per-key fixed-window rate limiting (429)
    ApiSecurityHeadersMiddleware -- Hardening and API metadata headers
    GatewayContextMiddleware -- Request ids and gateway response headers
    UsageLoggingMiddleware -- Per-request usage records
"""

from smsgate.middleware.api_key import ApiKeyConfig, ApiKeyFormatMiddleware, ApiKeyMiddleware
from smsgate.middleware.gateway_context import GatewayContextMiddleware
from smsgate.middleware.protocol import Middleware, Next
from smsgate.middleware.rate_limit import ApiKeyRateLimitMiddleware, RateLimitConfig
from smsgate.middleware.security_headers import (
    ApiSecurityHeadersConfig,
    ApiSecurityHeadersMiddleware,
)
from smsgate.middleware.usage import UsageLoggingMiddleware, UsageRecord

__all__ = [
    "ApiKeyConfig",
    "ApiKeyFormatMiddleware",
    "ApiKeyMiddleware",
    "ApiKeyRateLimitMiddleware",
    "ApiSecurityHeadersConfig",
    "ApiSecurityHeadersMiddleware",
    "GatewayContextMiddleware",
    "Middleware",
    "Next",
    "RateLimitConfig",
    "UsageLoggingMiddleware",
    "UsageRecord",
]
