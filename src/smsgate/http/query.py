"""Query string of an incoming API call.

Client API handlers read paging and filter arguments from it
(``?page=2&limit=50&status=delivered``). The gateway records its
first-value view in ``GatewayInfo.query_params``.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Read-only query parameters.

    Indexing returns the first value for a name; ``get_list`` returns
    every value in the order the client sent them.
    """

    __slots__ = ("_pairs", "_first", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        self._raw = query_string
        self._pairs: tuple[tuple[str, str], ...] = tuple(
            parse_qsl(query_string.decode("latin-1"), keep_blank_values=True)
        )
        first: dict[str, str] = {}
        for name, value in self._pairs:
            first.setdefault(name, value)
        self._first = first

    def __getitem__(self, key: str) -> str:
        return self._first[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._first)

    def __len__(self) -> int:
        return len(self._first)

    def __repr__(self) -> str:
        return f"QueryParams({self._first!r})"

    @property
    def raw(self) -> bytes:
        return self._raw

    def get_list(self, key: str) -> list[str]:
        return [value for name, value in self._pairs if name == key]

    def get_int(
        self,
        key: str,
        default: int | None = None,
        *,
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> int | None:
        """Integer value for *key*, clamped to ``[minimum, maximum]``.

        Missing or non-numeric values give *default* unclamped, so
        ``get_int("limit", 20, maximum=100)`` is a complete paging rule.
        """
        try:
            value = int(self._first[key])
        except (KeyError, ValueError):
            return default
        if minimum is not None:
            value = max(value, minimum)
        if maximum is not None:
            value = min(value, maximum)
        return value

    def to_dict(self) -> dict[str, str]:
        """First value per name, as a plain dict."""
        return dict(self._first)
