"""Routing — route table with ``:param`` pattern matching.

Mappings are registered during setup and the table is frozen before
the gateway serves traffic.
"""

from smsgate.routing.matcher import CompiledPattern, compile_pattern, param_names, parse_pattern
from smsgate.routing.route import MatchResult, PathSegment, RouteMapping
from smsgate.routing.table import RouteDoc, RouteTable

__all__ = [
    "CompiledPattern",
    "MatchResult",
    "PathSegment",
    "RouteDoc",
    "RouteMapping",
    "RouteTable",
    "compile_pattern",
    "param_names",
    "parse_pattern",
]
