"""Run a gateway under pounce.

Pounce's ``run()`` takes an import string (e.g., ``"myapp:gateway"``),
but we hold a live ``Gateway`` object, so ``pounce.Server`` is used
directly with the ASGI callable.
"""

import logging

logger = logging.getLogger("smsgate.server")


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for *app*.

    Args:
        app: ASGI callable (a ``Gateway`` instance).
        host: Bind host address.
        port: Bind port number.
        reload: Enable auto-reload on file changes.
        workers: Worker count (forced to 1 when reloading).
        app_path: Optional ``"module:attribute"`` import string so pounce
            can reimport the app on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
    )
    logger.info("Serving gateway on http://%s:%d", host, port)
    Server(config, app, app_path=app_path).run()
