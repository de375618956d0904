"""Path Extractor — pull named captures out of arbitrary JSON trees.

A path pattern is a colon-delimited list of object keys ending in a named
capture::

    content:input:${args}

Arrays met anywhere along the walk are flattened: the remaining segments
are applied to every element, in element order, and all captures land in
the same bucket. Missing keys are soft failures, so nothing here raises on
data; only a malformed pattern is an error.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from llmfunc_sdk.errors import PatternError

logger = logging.getLogger("llmfunc_sdk.extract")

_CAPTURE_RE = re.compile(r"^\$\{(?P<name>[A-Za-z0-9_]+)\}$")
_PLACEHOLDER_RE = re.compile(r"\$\{[A-Za-z0-9_]+\}")

Captures = Dict[str, List[str]]


# ──────────────────────────────────────────────
# PathPattern
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class PathPattern:
    """A parsed ``seg1:seg2:...:${capture}`` pattern."""

    segments: Tuple[str, ...]
    capture: str

    @classmethod
    def parse(cls, pattern: str) -> PathPattern:
        items = pattern.split(":")
        m = _CAPTURE_RE.match(items[-1])
        if m is None:
            raise PatternError(pattern, "last segment must be ${name}")
        return cls(segments=tuple(items[:-1]), capture=m.group("name"))

    def __str__(self) -> str:
        return ":".join(self.segments + ("${" + self.capture + "}",))


def _as_text(node: Any) -> Optional[str]:
    """Text form of a capturable node, or None if it is not capturable."""
    if isinstance(node, bool) or node is None:
        return None
    if isinstance(node, str):
        return node
    if isinstance(node, (int, float)):
        return json.dumps(node)
    if isinstance(node, dict):
        return json.dumps(node, ensure_ascii=False, separators=(",", ":"))
    return None


def _walk(node: Any, segments: Tuple[str, ...], capture: str, found: Captures) -> None:
    for pos, seg in enumerate(segments):
        if isinstance(node, list):
            rest = segments[pos:]
            for element in node:
                _walk(element, rest, capture, found)
            return
        if not isinstance(node, dict) or seg not in node:
            return
        node = node[seg]

    # An array at the capture position contributes nothing.
    text = _as_text(node)
    if text is not None:
        found.setdefault(capture, []).append(text)


def get_functions(
    value: Any,
    patterns: Iterable[Union[str, PathPattern]],
) -> Captures:
    """Apply every pattern to *value* and merge the captures.

    Args:
        value: A parsed JSON value of any shape.
        patterns: Pattern strings or :class:`PathPattern` objects.

    Returns:
        Capture name → captured text values, in traversal order. A capture
        that matched nothing is absent from the mapping.

    Raises:
        PatternError: A pattern string is malformed.
    """
    found: Captures = {}
    for p in patterns:
        pattern = p if isinstance(p, PathPattern) else PathPattern.parse(p)
        _walk(value, pattern.segments, pattern.capture, found)
    logger.debug("Captured %s", {k: len(v) for k, v in found.items()})
    return found


def find_patterns(template: Any) -> List[str]:
    """Derive path patterns from a JSON template.

    Every string leaf containing a ``${name}`` placeholder yields the key
    path leading to it, followed by the placeholder. Arrays contribute no
    segment, matching the flattening done by :func:`get_functions`::

        find_patterns({"content": [{"name": "${func}"}]})
        # ["content:name:${func}"]
    """
    found: List[str] = []

    def finder(node: Any, prefix: str) -> None:
        if isinstance(node, str):
            m = _PLACEHOLDER_RE.search(node)
            if m:
                pattern = prefix + m.group(0)
                if pattern not in found:
                    found.append(pattern)
        elif isinstance(node, list):
            for element in node:
                finder(element, prefix)
        elif isinstance(node, dict):
            for key, element in node.items():
                finder(element, f"{prefix}{key}:")

    finder(template, "")
    return found
