"""API documentation surface.

The route table reflects itself into ``RouteDoc`` entries; this module
wraps them in the documentation envelope served at ``/docs`` and renders
the human-readable HTML page with kida.
"""

from dataclasses import dataclass
from typing import Any

from smsgate.config import GatewayConfig
from smsgate.routing.table import RouteDoc, RouteTable

DOCS_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
</head>
<body>
  <h1>{{ title }}</h1>
  <p>Base URL: <code>{{ base_url }}</code> &middot; Authentication: {{ authentication }}</p>
  <table>
    <thead>
      <tr><th>Method</th><th>Path</th><th>Description</th><th>Permissions</th><th>Parameters</th><th>Rate limit</th></tr>
    </thead>
    <tbody>
    {% for row in rows %}
      <tr>
        <td>{{ row.method }}</td>
        <td><code>{{ row.pattern }}</code></td>
        <td>{{ row.description }}</td>
        <td>{{ row.permissions }}</td>
        <td>{{ row.parameters }}</td>
        <td>{{ row.rate_limit }}</td>
      </tr>
    {% end %}
    </tbody>
  </table>
</body>
</html>
"""


@dataclass(frozen=True, slots=True)
class _DocRow:
    method: str
    pattern: str
    description: str
    permissions: str
    parameters: str
    rate_limit: str


def _authentication_label(config: GatewayConfig) -> str:
    return f"API Key ({config.api_key_header} header)"


def documentation_payload(table: RouteTable, config: GatewayConfig) -> dict[str, Any]:
    """The ``data`` object of the ``/docs`` response."""
    return {
        "version": config.api_version,
        "baseUrl": config.base_url,
        "authentication": _authentication_label(config),
        "routes": [doc.to_dict() for doc in table.documentation()],
        "rateLimit": "Per API key configuration",
        "supportedFormats": list(config.supported_formats),
    }


def _row(doc: RouteDoc) -> _DocRow:
    return _DocRow(
        method=doc.method,
        pattern=doc.pattern,
        description=doc.description,
        permissions=" or ".join(doc.permissions) or "-",
        parameters=", ".join(doc.parameters) if doc.parameters else "-",
        rate_limit=str(doc.rate_limit) if doc.rate_limit is not None else "-",
    )


def render_docs_html(table: RouteTable, config: GatewayConfig) -> str:
    """Render the route documentation as an HTML page."""
    from kida import Environment

    env = Environment(autoescape=True)
    template = env.from_string(DOCS_TEMPLATE)
    return template.render(
        {
            "title": f"{config.gateway_name} API reference",
            "base_url": config.base_url,
            "authentication": _authentication_label(config),
            "rows": [_row(doc) for doc in table.documentation()],
        }
    )
