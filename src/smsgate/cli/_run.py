"""``smsgate run`` — serve a gateway with pounce."""

import argparse
import logging
import sys

from smsgate.cli._resolve import resolve_app


def run_gateway(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it.

    CLI flags override the gateway's configured host, port and log level.
    """
    try:
        gateway = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    level = (args.log_level or gateway.config.log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from smsgate.server.runner import run_server

    gateway._ensure_frozen()
    run_server(
        gateway,
        args.host or gateway.config.host,
        args.port or gateway.config.port,
        reload=gateway.config.debug,
        workers=args.workers,
        app_path=args.app,
    )
