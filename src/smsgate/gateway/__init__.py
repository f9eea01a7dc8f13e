"""Gateway core: caller context, permission checks, request transform,
the default route catalog, and the ASGI ``Gateway`` application.

Import from the submodules (``smsgate.gateway.app``,
``smsgate.gateway.context``, ...) or from the top-level ``smsgate``
package.
"""
