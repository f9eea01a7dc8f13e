"""Gateway import resolution — resolves ``"module:attribute"`` strings to Gateway instances.

Shared utility used by ``smsgate run`` and ``smsgate routes``.
"""

import importlib

from smsgate.gateway.app import Gateway


def resolve_app(import_string: str) -> Gateway:
    """Resolve an import string to a ``Gateway`` instance.

    Accepts ``"module:attribute"`` format. When the attribute portion
    is omitted, defaults to ``"gateway"`` (e.g. ``"myapp"`` resolves to
    ``myapp.gateway``).

    Factory functions are supported: a callable that is not a Gateway
    is called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a ``Gateway`` or factory.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "gateway"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Gateway):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Gateway):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a smsgate.Gateway instance"
        raise TypeError(msg)

    return obj
