"""``smsgate routes`` — list registered API routes.

Prints the route documentation (sorted by pattern) as a table, or the
full documentation envelope as JSON.
"""

import argparse
import json
import sys

from smsgate.cli._resolve import resolve_app
from smsgate.gateway.app import Gateway
from smsgate.gateway.catalog import build_default_table
from smsgate.gateway.docs import documentation_payload


def run_routes(args: argparse.Namespace) -> None:
    """List the routes of ``args.app`` (or of the built-in catalog)."""
    if args.app is None:
        gateway = Gateway(table=build_default_table())
    else:
        try:
            gateway = resolve_app(args.app)
        except (ModuleNotFoundError, AttributeError, TypeError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc

    if args.json:
        print(json.dumps(documentation_payload(gateway.table, gateway.config), indent=2))
        return

    docs = gateway.table.documentation()
    if not docs:
        print("No routes registered.")
        return

    rows = [
        (doc.method, doc.pattern, " or ".join(doc.permissions) or "-", doc.description)
        for doc in docs
    ]

    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header
    max_perms = max(max(len(r[2]) for r in rows), 11)  # "PERMISSIONS" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{:<{max_perms}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "PERMISSIONS", "DESCRIPTION"))
    sep_len = max_method + max_path + max_perms + 6 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 100))
    for row in rows:
        print(fmt.format(*row))
