"""Route pattern compilation and path matching.

Patterns use ``:name`` segments for parameters::

    /v1/sms/status/:messageId
    /v1/users/:userId/messages/:messageId

Each parameter captures exactly one non-empty path segment. Literal
segments must match exactly, and the whole path is anchored, so a
pattern without a trailing slash never matches a path with one.
Routes are registered exactly as clients call them; nothing is
normalized.
"""

import re
from dataclasses import dataclass

from smsgate.routing.route import PathSegment

# One path segment: anything but a slash, at least one character
SEGMENT_REGEX = r"([^/]+)"


def _is_param(part: str) -> bool:
    return part.startswith(":") and len(part) > 1


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into its non-empty segments.

    Examples::

        "/v1/sms/send"              -> [PathSegment("v1"), PathSegment("sms"), PathSegment("send")]
        "/v1/sms/status/:messageId" -> [..., PathSegment(":messageId", is_param=True,
                                                         param_name="messageId")]
    """
    segments: list[PathSegment] = []
    for part in pattern.split("/"):
        if not part:
            continue
        if _is_param(part):
            segments.append(PathSegment(value=part, is_param=True, param_name=part[1:]))
        else:
            segments.append(PathSegment(value=part))
    return segments


def param_names(pattern: str) -> tuple[str, ...]:
    """Names of the ``:param`` segments of *pattern*, in declaration order."""
    return tuple(seg.param_name for seg in parse_pattern(pattern) if seg.param_name)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A route pattern compiled to an anchored regular expression.

    ``param_names`` lines up positionally with the regex groups.
    """

    pattern: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path* and return its parameters, or ``None``.

        Parameters bind positionally. If a name repeats, the last
        occurrence wins.
        """
        if not path:
            return None
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self.param_names, found.groups(), strict=True))


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile *pattern* into a ``CompiledPattern``.

    Literal segments are regex-escaped, so punctuation in a pattern
    (``calculate-cost``, ``v1.2``) is matched literally. Compilation
    cannot fail; a pattern that makes no sense simply never matches.
    """
    names: list[str] = []
    parts: list[str] = []
    for part in pattern.split("/"):
        if _is_param(part):
            names.append(part[1:])
            parts.append(SEGMENT_REGEX)
        else:
            parts.append(re.escape(part))
    return CompiledPattern(
        pattern=pattern,
        regex=re.compile("/".join(parts)),
        param_names=tuple(names),
    )
