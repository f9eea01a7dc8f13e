"""Audit trail for API key and permission decisions.

Every rejected API key and every refused route produces a
``SecurityEvent``. Events carry the gateway's own vocabulary (the route
pattern, the permissions it asked for, the status the client saw) so a
sink can forward them to a SIEM without parsing log lines.

There is one process-wide sink. A sink that raises is logged on
``smsgate.security`` and never changes the response the client gets.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from smsgate.gateway.context import CallerContext
    from smsgate.http.request import Request
    from smsgate.routing.route import RouteMapping

logger = logging.getLogger("smsgate.security")

API_KEY_REJECTED = "gateway.api_key.rejected"
AUTH_REQUIRED = "gateway.authz.unauthenticated"
PERMISSION_DENIED = "gateway.authz.permission_denied"


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """One refused request, as seen by the gateway."""

    name: str
    status: int
    method: str | None = None
    path: str | None = None
    client_ip: str | None = None
    user_id: str | None = None
    api_key_id: str | None = None
    route_pattern: str | None = None
    required: tuple[str, ...] = ()
    reason: str | None = None
    timestamp: float = field(default_factory=time)

    @classmethod
    def build(
        cls,
        name: str,
        status: int,
        *,
        request: Request | None = None,
        caller: CallerContext | None = None,
        route: RouteMapping | None = None,
        reason: str | None = None,
    ) -> SecurityEvent:
        """Collect the event's fields from whatever the caller has at hand."""
        return cls(
            name=name,
            status=status,
            method=request.method if request is not None else None,
            path=request.path if request is not None else None,
            client_ip=request.client_ip if request is not None else None,
            user_id=caller.user_id if caller is not None else None,
            api_key_id=caller.api_key_id if caller is not None else None,
            route_pattern=route.pattern if route is not None else None,
            required=route.permissions if route is not None else (),
            reason=reason,
        )


type SecurityEventSink = Callable[[SecurityEvent], None]


_sink_lock = threading.Lock()
_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Install the process-wide sink, or ``None`` to stop delivery."""
    global _sink
    with _sink_lock:
        _sink = sink


def emit_security_event(
    name: str,
    status: int,
    *,
    request: Request | None = None,
    caller: CallerContext | None = None,
    route: RouteMapping | None = None,
    reason: str | None = None,
) -> None:
    """Deliver an event to the sink, if one is installed."""
    with _sink_lock:
        sink = _sink
    if sink is None:
        return

    event = SecurityEvent.build(
        name, status, request=request, caller=caller, route=route, reason=reason
    )
    try:
        sink(event)
    except Exception:
        logger.exception("Security event sink failed for %s", name)
