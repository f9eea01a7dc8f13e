"""Security utilities — audit events for API key auth and authorization.

Forward events to your own pipeline::

    from smsgate.security import set_security_event_sink

    set_security_event_sink(lambda event: audit_log.append(event))
"""

from smsgate.security.audit import (
    API_KEY_REJECTED,
    AUTH_REQUIRED,
    PERMISSION_DENIED,
    SecurityEvent,
    emit_security_event,
    set_security_event_sink,
)

__all__ = [
    "API_KEY_REJECTED",
    "AUTH_REQUIRED",
    "PERMISSION_DENIED",
    "SecurityEvent",
    "emit_security_event",
    "set_security_event_sink",
]
