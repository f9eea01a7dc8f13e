"""Gateway configuration.

GatewayConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Gateway configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = GatewayConfig(debug=True, port=3000, gateway_name="acme-v1")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # Identity advertised to clients
    api_version: str = "v1"
    base_url: str = "/api/gateway"
    gateway_name: str = "smsgate-v1"

    # API keys
    api_key_header: str = "x-api-key"
    api_key_pattern: str = r"msk_[a-f0-9]{64}"

    # Rate limiting (per API key, limit comes from the key itself)
    rate_limit_window_seconds: int = 3600

    # Preflight
    preflight_allow_headers: str = "Content-Type, Authorization, x-api-key, x-request-id"
    preflight_max_age: int = 86400  # 24 hours

    # Methods probed when answering 405 for an unknown method/path pair
    supported_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")

    supported_formats: tuple[str, ...] = ("JSON",)
