"""ASGI handler — translates ASGI scope/messages to smsgate types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, runs the middleware chain around the
gateway's dispatch, and sends the Response back through ASGI send().
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from smsgate._internal.asgi import Receive, Scope, Send
from smsgate.errors import HTTPError
from smsgate.http.request import Request
from smsgate.http.response import Response
from smsgate.middleware.protocol import Next
from smsgate.server.errors import http_error_response, internal_error_response
from smsgate.server.sender import send_response

type Dispatch = Callable[[Request], Awaitable[Response]]


def _rendering_errors(handler: Next, *, debug: bool) -> Next:
    """Wrap *handler* so anything it raises comes back as a response.

    HTTPErrors become their JSON envelope, any other exception a 500.
    Applied at every layer of the chain: an error raised by an inner
    middleware or the dispatch still passes through the outer
    middleware, which can add their headers to it and record it.
    """

    async def guarded(req: Request) -> Response:
        try:
            return await handler(req)
        except HTTPError as exc:
            return http_error_response(exc, req)
        except Exception as exc:
            return internal_error_response(exc, req, debug=debug)

    return guarded


def build_chain(
    dispatch: Dispatch,
    middleware: Sequence[Callable[..., Any]],
    *,
    debug: bool = False,
) -> Next:
    """Compose *middleware* around *dispatch*, outermost first."""
    handler: Next = _rendering_errors(dispatch, debug=debug)
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        handler = _rendering_errors(make_next, debug=debug)
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    chain: Next,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await chain(request)
    except Exception as exc:
        response = internal_error_response(exc, request, debug=debug)

    await send_response(response, send)
