"""smsgate CLI — route listing and the gateway server.

Entry point registered as ``smsgate`` in ``pyproject.toml``::

    [project.scripts]
    smsgate = "smsgate.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``smsgate`` command."""
    parser = argparse.ArgumentParser(
        prog="smsgate",
        description="smsgate — API gateway for the SMS platform's client API.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- smsgate routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered API routes")
    routes_parser.add_argument(
        "app",
        nargs="?",
        default=None,
        help="Import string (e.g. myapp:gateway); defaults to the built-in catalog",
    )
    routes_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the documentation envelope as JSON",
    )

    # -- smsgate run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the gateway server")
    run_parser.add_argument("app", help="Import string (e.g. myapp:gateway)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--workers", type=int, default=1, help="Worker count")
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Root log level (defaults to the gateway's config)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from smsgate.cli._routes import run_routes

        run_routes(args)
    elif args.command == "run":
        from smsgate.cli._run import run_gateway

        run_gateway(args)
