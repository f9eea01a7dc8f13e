"""Content negotiation — turn a handler's return value into a Response.

Dispatch order:

1. ``Response``  -> passed through unchanged
2. ``None``      -> 204 No Content
3. a mapping that already carries ``success`` -> serialized as-is
4. anything else -> wrapped in the success envelope as ``data``
"""

from collections.abc import Mapping
from typing import Any

from smsgate.http.response import Response, json_response, success


def negotiate(value: Any) -> Response:
    """Convert a route handler's return value to a Response."""
    match value:
        case Response():
            return value
        case None:
            return Response(body=b"", status=204)
        case Mapping() if "success" in value:
            return json_response(dict(value))
        case _:
            return success(value)
