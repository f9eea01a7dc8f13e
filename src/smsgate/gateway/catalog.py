"""The SMS platform's client API route catalog.

Binds every public ``/v1`` endpoint to a method on a ``ClientApi``
implementation. The business logic behind each method (sending SMS,
wallet lookups, OTP) lives outside the gateway; any object with these
methods can be plugged in::

    table = build_default_table(MyClientApi(db))
    gateway = Gateway(table=table, middleware=default_middleware(verify_key))
"""

from typing import Any, Protocol

from smsgate.errors import EndpointNotImplemented
from smsgate.gateway.transform import GatewayRequest
from smsgate.routing.route import RouteMapping
from smsgate.routing.table import RouteTable


class ClientApi(Protocol):
    """The downstream controller for external API-key clients.

    Each method receives the enriched ``GatewayRequest`` and returns a
    response value (a ``Response``, a JSON-serializable payload, or
    ``None``). Methods may be sync or async.
    """

    async def send_sms(self, request: GatewayRequest) -> Any: ...
    async def send_bulk_sms(self, request: GatewayRequest) -> Any: ...
    async def get_sms_status(self, request: GatewayRequest) -> Any: ...
    async def get_sms_history(self, request: GatewayRequest) -> Any: ...
    async def calculate_cost(self, request: GatewayRequest) -> Any: ...
    async def get_balance(self, request: GatewayRequest) -> Any: ...
    async def get_transactions(self, request: GatewayRequest) -> Any: ...
    async def generate_otp(self, request: GatewayRequest) -> Any: ...
    async def verify_otp(self, request: GatewayRequest) -> Any: ...
    async def get_sender_ids(self, request: GatewayRequest) -> Any: ...
    async def request_sender_id(self, request: GatewayRequest) -> Any: ...
    async def get_sms_analytics(self, request: GatewayRequest) -> Any: ...
    async def get_usage_analytics(self, request: GatewayRequest) -> Any: ...


class UnimplementedClientApi:
    """A ``ClientApi`` that answers every endpoint with 501.

    Useful as a base class: override the endpoints you serve and the
    rest keep reporting ``NOT_IMPLEMENTED``.
    """

    def _unimplemented(self, request: GatewayRequest) -> EndpointNotImplemented:
        return EndpointNotImplemented(
            f"{request.method} {request.gateway.mapped_route} is not yet implemented"
        )

    async def send_sms(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def send_bulk_sms(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_sms_status(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_sms_history(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def calculate_cost(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_balance(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_transactions(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def generate_otp(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def verify_otp(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_sender_ids(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def request_sender_id(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_sms_analytics(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)

    async def get_usage_analytics(self, request: GatewayRequest) -> Any:
        raise self._unimplemented(request)


def default_routes(api: ClientApi) -> list[RouteMapping]:
    """The platform's ``/v1`` routes, bound to *api*."""
    return [
        # SMS
        RouteMapping.create(
            "POST", "/v1/sms/send", api.send_sms, ["sms:send"],
            rate_limit=100, description="Send a single SMS message",
        ),
        RouteMapping.create(
            "POST", "/v1/sms/bulk", api.send_bulk_sms, ["sms:bulk"],
            rate_limit=10, description="Send SMS messages to multiple recipients",
        ),
        RouteMapping.create(
            "GET", "/v1/sms/status/:messageId", api.get_sms_status, ["sms:status"],
            description="Get delivery status of an SMS message",
        ),
        RouteMapping.create(
            "GET", "/v1/sms/history", api.get_sms_history, ["sms:logs"],
            description="Get SMS sending history",
        ),
        RouteMapping.create(
            "POST", "/v1/sms/calculate-cost", api.calculate_cost, ["sms:send"],
            description="Calculate cost for SMS sending",
        ),
        # Wallet
        RouteMapping.create(
            "GET", "/v1/wallet/balance", api.get_balance, ["wallet:read"],
            description="Get account balance",
        ),
        RouteMapping.create(
            "GET", "/v1/wallet/transactions", api.get_transactions, ["wallet:read"],
            description="Get wallet transaction history",
        ),
        # OTP
        RouteMapping.create(
            "POST", "/v1/otp/generate", api.generate_otp, ["otp:generate"],
            rate_limit=60, description="Generate OTP code",
        ),
        RouteMapping.create(
            "POST", "/v1/otp/verify", api.verify_otp, ["otp:verify"],
            rate_limit=120, description="Verify OTP code",
        ),
        # Sender IDs
        RouteMapping.create(
            "GET", "/v1/sender-ids", api.get_sender_ids, ["sender:read"],
            description="Get approved sender IDs",
        ),
        RouteMapping.create(
            "POST", "/v1/sender-ids/request", api.request_sender_id, ["sender:write"],
            description="Request new sender ID",
        ),
        # Analytics
        RouteMapping.create(
            "GET", "/v1/analytics/sms", api.get_sms_analytics, ["analytics:read"],
            description="Get SMS analytics",
        ),
        RouteMapping.create(
            "GET", "/v1/analytics/usage", api.get_usage_analytics, ["analytics:read"],
            description="Get usage analytics",
        ),
    ]


def build_default_table(api: ClientApi | None = None) -> RouteTable:
    """A route table holding ``default_routes`` (unfrozen, so callers can extend it)."""
    return RouteTable(default_routes(api or UnimplementedClientApi()))
