"""Permission gate — may this caller invoke this route?

A route lists the permissions that are each *sufficient* on their own:
holding any one of them grants access. Missing identity is reported
as 401 and missing entitlement as 403, so clients can tell "who are
you" apart from "you can't do that".
"""

import logging
from collections.abc import Collection

from smsgate.errors import Forbidden, Unauthenticated
from smsgate.gateway.context import CallerContext
from smsgate.http.request import Request
from smsgate.routing.route import RouteMapping
from smsgate.security.audit import AUTH_REQUIRED, PERMISSION_DENIED, emit_security_event

logger = logging.getLogger("smsgate.auth")


def has_permission(granted: Collection[str], required: str) -> bool:
    """True if *required* is among the *granted* permissions."""
    return required in granted


def authorize(
    caller: CallerContext | None,
    mapping: RouteMapping,
    *,
    request: Request | None = None,
) -> None:
    """Check *caller* against *mapping*'s required permissions.

    Raises ``Unauthenticated`` if there is no caller and ``Forbidden``
    if the caller holds none of the required permissions. Returns
    ``None`` on success.
    """
    if caller is None:
        emit_security_event(AUTH_REQUIRED, 401, request=request, route=mapping)
        raise Unauthenticated("API key authentication required")

    if any(has_permission(caller.permissions, perm) for perm in mapping.permissions):
        return

    required = " or ".join(mapping.permissions)
    logger.warning(
        "API key %s lacks permission for %s %s (required: %s)",
        caller.api_key_id,
        mapping.method,
        mapping.pattern,
        required or "-",
    )
    emit_security_event(PERMISSION_DENIED, 403, request=request, caller=caller, route=mapping)
    raise Forbidden(f"Insufficient permissions. Required: {required}")
