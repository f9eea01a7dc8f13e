"""Invoke helpers — call sync or async callables uniformly.

Route handlers and API key verifiers can be ``def`` or ``async def``.
Any code that calls a user-provided callable must handle both cases.
This module keeps the sync/async check in exactly one place.

Usage::

    from smsgate._internal.invoke import invoke

    result = await invoke(handler, gateway_request)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
