"""Test utilities for smsgate gateways.

Provides an in-process ASGI test client and envelope assertions::

    from smsgate.testing import TestClient, assert_error
"""

from smsgate.testing.assertions import assert_error, assert_gateway_headers, assert_success
from smsgate.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_error",
    "assert_gateway_headers",
    "assert_success",
]
