"""Route table — the gateway's registry of route mappings.

Mappings are registered during setup, keyed by the exact
``(method, pattern)`` pair. Registering the same key again replaces the
earlier mapping in place. The table is frozen before traffic is served;
after that it is read-only and safe to share across requests.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from smsgate.routing.matcher import CompiledPattern, compile_pattern
from smsgate.routing.route import MatchResult, RouteMapping


@dataclass(frozen=True, slots=True)
class RouteDoc:
    """Human-readable description of one registered route."""

    pattern: str
    method: str
    description: str
    permissions: tuple[str, ...]
    parameters: dict[str, str] | None = None
    rate_limit: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form, omitting empty optional fields."""
        doc: dict[str, Any] = {
            "pattern": self.pattern,
            "method": self.method,
            "description": self.description,
            "permissions": list(self.permissions),
        }
        if self.parameters:
            doc["parameters"] = dict(self.parameters)
        if self.rate_limit is not None:
            doc["rateLimit"] = self.rate_limit
        return doc


@dataclass(frozen=True, slots=True)
class _Entry:
    mapping: RouteMapping
    compiled: CompiledPattern


class RouteTable:
    """Registry of ``RouteMapping`` objects with first-match lookup.

    Usage::

        table = RouteTable()
        table.register(RouteMapping.create("POST", "/v1/sms/send", send_sms, ["sms:send"]))
        table.freeze()
        match = table.find_route("POST", "/v1/sms/send")

    Lookup walks mappings in registration order and returns the first
    whose method equals the request method exactly (case-sensitive) and
    whose pattern matches the path.
    """

    __slots__ = ("_entries", "_frozen")

    def __init__(self, mappings: Iterable[RouteMapping] = ()) -> None:
        self._entries: dict[tuple[str, str], _Entry] = {}
        self._frozen = False
        for mapping in mappings:
            self.register(mapping)

    # -- Registration --

    def register(self, mapping: RouteMapping) -> None:
        """Insert *mapping*, replacing any mapping with the same key.

        Must be called before ``freeze()``.
        """
        if self._frozen:
            msg = f"Cannot register {mapping.method} {mapping.pattern} after the route table is frozen."
            raise RuntimeError(msg)
        self._entries[mapping.key] = _Entry(mapping=mapping, compiled=compile_pattern(mapping.pattern))

    def freeze(self) -> None:
        """Freeze the table. No more mappings can be registered."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Lookup --

    def find_route(self, method: str, path: str) -> MatchResult | None:
        """Return the first mapping matching *method* and *path*, or ``None``."""
        if not path:
            return None
        for (route_method, _), entry in self._entries.items():
            if route_method != method:
                continue
            params = entry.compiled.match(path)
            if params is not None:
                return MatchResult(mapping=entry.mapping, params=params)
        return None

    def allowed_methods(self, path: str, candidates: Iterable[str]) -> tuple[str, ...]:
        """Which of *candidates* have a route for *path*, in candidate order."""
        return tuple(method for method in candidates if self.find_route(method, path) is not None)

    # -- Introspection --

    @property
    def routes(self) -> list[RouteMapping]:
        """All registered mappings, in registration order."""
        return [entry.mapping for entry in self._entries.values()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RouteMapping]:
        return iter(self.routes)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def documentation(self) -> list[RouteDoc]:
        """Describe every registered route, sorted by pattern then method."""
        docs: list[RouteDoc] = []
        for entry in self._entries.values():
            mapping = entry.mapping
            names = entry.compiled.param_names
            docs.append(
                RouteDoc(
                    pattern=mapping.pattern,
                    method=mapping.method,
                    description=mapping.description or f"{mapping.method} {mapping.pattern}",
                    permissions=mapping.permissions,
                    parameters={name: "string" for name in names} or None,
                    rate_limit=mapping.rate_limit,
                )
            )
        return sorted(docs, key=lambda doc: (doc.pattern, doc.method))

    def health(self) -> dict[str, Any]:
        """Liveness summary for the gateway health endpoint."""
        return {
            "status": "healthy",
            "routesRegistered": len(self._entries),
            "timestamp": datetime.now(UTC).isoformat(),
        }
