"""Caller identity for the current request.

``ApiKeyMiddleware`` resolves the API key into a ``CallerContext`` and
stores it in a ContextVar for the duration of the request. The gateway
reads it back with ``current_caller()``; nothing downstream mutates it.

Thread safety:
    ``ContextVar`` is task-local under asyncio. No locks needed.
"""

from collections.abc import Iterable
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CallerContext:
    """The authenticated identity and entitlements of an API key."""

    user_id: str
    api_key_id: str
    permissions: frozenset[str] = frozenset()
    rate_limit: int = 1000

    @classmethod
    def create(
        cls,
        user_id: str,
        api_key_id: str,
        permissions: Iterable[str] = (),
        rate_limit: int = 1000,
    ) -> "CallerContext":
        """Build a context from any iterable of permissions."""
        return cls(
            user_id=user_id,
            api_key_id=api_key_id,
            permissions=frozenset(permissions),
            rate_limit=rate_limit,
        )


caller_var: ContextVar[CallerContext | None] = ContextVar("smsgate_caller", default=None)
"""The caller of the current request. Set by ``ApiKeyMiddleware``."""


def current_caller() -> CallerContext | None:
    """Return the authenticated caller, or ``None`` if there is none."""
    return caller_var.get()
