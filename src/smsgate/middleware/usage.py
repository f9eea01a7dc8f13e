"""Usage logging middleware.

Records one ``UsageRecord`` per authenticated request, with the final
status code and response time. Records are always logged on
``smsgate.usage``; an optional recorder (typically a blocking database
write) receives them in a worker thread so the event loop never waits
on storage.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import anyio.to_thread

from smsgate.gateway.context import current_caller
from smsgate.http.request import Request
from smsgate.http.response import Response
from smsgate.middleware.protocol import Next

logger = logging.getLogger("smsgate.usage")


@dataclass(frozen=True, slots=True)
class UsageRecord:
    """One API call made with an API key."""

    api_key_id: str
    path: str
    method: str
    ip_address: str
    status: int
    response_time_ms: float
    user_agent: str | None = None
    request_id: str | None = None


type UsageRecorder = Callable[[UsageRecord], None]


class UsageLoggingMiddleware:
    """Log (and optionally persist) usage for every authenticated call.

    Usage::

        def save(record: UsageRecord) -> None:
            db.execute("INSERT INTO api_usage ...", record.api_key_id, ...)

        gateway.add_middleware(UsageLoggingMiddleware(recorder=save))

    A failing recorder is logged and never fails the request.
    """

    __slots__ = ("_recorder",)

    def __init__(self, recorder: UsageRecorder | None = None) -> None:
        self._recorder = recorder

    async def __call__(self, request: Request, next: Next) -> Response:
        caller = current_caller()
        if caller is None:
            return await next(request)

        start = time.perf_counter()
        response = await next(request)
        record = UsageRecord(
            api_key_id=caller.api_key_id,
            path=request.path,
            method=request.method,
            ip_address=request.client_ip,
            status=response.status,
            response_time_ms=round((time.perf_counter() - start) * 1000, 3),
            user_agent=request.user_agent,
            request_id=request.request_id,
        )
        logger.info(
            "%s %s %d %.1fms key=%s request=%s",
            record.method,
            record.path,
            record.status,
            record.response_time_ms,
            record.api_key_id,
            record.request_id or "-",
        )
        if self._recorder is not None:
            try:
                await anyio.to_thread.run_sync(self._recorder, record)
            except Exception:
                logger.exception("Usage recorder failed for key %s", record.api_key_id)
        return response
