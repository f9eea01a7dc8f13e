"""API security headers middleware.

Adds hardening headers plus the API version and rate-limit window to
every gateway response, error responses included. Unlike an HTML site,
the gateway answers JSON everywhere, so there is no content-type filter.
"""

from dataclasses import dataclass

from smsgate.http.request import Request
from smsgate.http.response import Response
from smsgate.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class ApiSecurityHeadersConfig:
    """Configuration for API security headers.

    All values are applied as-is. Use standard header values.
    """

    x_content_type_options: str = "nosniff"
    x_frame_options: str = "DENY"
    x_xss_protection: str = "1; mode=block"
    referrer_policy: str = "strict-origin-when-cross-origin"
    api_version: str = "v1"
    rate_limit_window_seconds: int = 3600


class ApiSecurityHeadersMiddleware:
    """Add security and API metadata headers to every response.

    Usage::

        from smsgate.middleware import ApiSecurityHeadersMiddleware

        gateway.add_middleware(ApiSecurityHeadersMiddleware())
    """

    __slots__ = ("config",)

    def __init__(self, config: ApiSecurityHeadersConfig | None = None) -> None:
        self.config = config or ApiSecurityHeadersConfig()

    async def __call__(self, request: Request, next: Next) -> Response:
        response = await next(request)
        cfg = self.config
        return response.with_headers(
            {
                "X-Content-Type-Options": cfg.x_content_type_options,
                "X-Frame-Options": cfg.x_frame_options,
                "X-XSS-Protection": cfg.x_xss_protection,
                "Referrer-Policy": cfg.referrer_policy,
                "X-API-Version": cfg.api_version,
                "X-Rate-Limit-Window": str(cfg.rate_limit_window_seconds),
            }
        )
