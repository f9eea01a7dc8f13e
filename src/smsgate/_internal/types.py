"""Shared type aliases used across smsgate modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — receives a GatewayRequest, sync or async, returns a response value
Handler: TypeAlias = Callable[..., Any]
