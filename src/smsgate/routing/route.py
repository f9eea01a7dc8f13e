"""RouteMapping, MatchResult, and PathSegment frozen dataclasses."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from smsgate._internal.types import Handler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``/sms``         (is_param=False)
    Param:   ``/:messageId``  (is_param=True, param_name="messageId")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMapping:
    """A declarative rule binding a method and pattern to a handler.

    Created during gateway setup and registered into a ``RouteTable``.
    ``permissions`` keeps declaration order so error messages and docs
    read the way the route was written; membership is what matters.
    """

    pattern: str
    method: str
    handler: Handler
    permissions: tuple[str, ...] = ()
    rate_limit: int | None = None
    name: str | None = None
    description: str | None = None

    @classmethod
    def create(
        cls,
        method: str,
        pattern: str,
        handler: Handler,
        permissions: Iterable[str] = (),
        *,
        rate_limit: int | None = None,
        name: str | None = None,
        description: str | None = None,
    ) -> RouteMapping:
        """Build a mapping from any iterable of permissions."""
        return cls(
            pattern=pattern,
            method=method,
            handler=handler,
            permissions=tuple(dict.fromkeys(permissions)),
            rate_limit=rate_limit,
            name=name or getattr(handler, "__name__", None),
            description=description,
        )

    @property
    def key(self) -> tuple[str, str]:
        """The identity of this mapping inside a route table."""
        return (self.method, self.pattern)


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Result of a successful route lookup."""

    mapping: RouteMapping
    params: dict[str, str] = field(default_factory=dict)
