"""Result Unifier — captured ``func``/``args`` buckets → canonical calls."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger("llmfunc_sdk.extract")

FUNC = "func"
ARGS = "args"

# Greedy: the last "String(...)" wrapper is the one stripped.
_STRING_WRAPPER_RE = re.compile(r"(.*)String\((.*)\)(.*)", re.DOTALL)


@dataclass(frozen=True)
class ParsedArgument:
    """One decoded argument.

    ``desc`` holds the decoded argument *value*, not a description.
    """

    name: str
    desc: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "desc": self.desc}


@dataclass(frozen=True)
class ParsedFunction:
    """A provider-agnostic record of one requested function invocation.

    Argument order follows the decoded mapping, not the declaration, so
    consumers should match arguments by name.
    """

    function: str
    arguments: List[ParsedArgument] = field(default_factory=list)

    def arguments_dict(self) -> Dict[str, str]:
        return {a.name: a.desc for a in self.arguments}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "function": self.function,
            "arguments": [a.to_dict() for a in self.arguments],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParsedFunction:
        return cls(
            function=data.get("function", ""),
            arguments=[
                ParsedArgument(name=a.get("name", ""), desc=a.get("desc", ""))
                for a in data.get("arguments") or []
            ],
        )


def unwrap_string(value: str) -> str:
    """Strip a ``String(...)`` wrapper if present, otherwise return *value*."""
    m = _STRING_WRAPPER_RE.match(value)
    if m is None:
        return value
    return m.group(1) + m.group(2) + m.group(3)


def _value_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def decode_arguments(raw: str) -> List[ParsedArgument]:
    """Decode an args capture into arguments; zero arguments on any failure."""
    text = unwrap_string(raw)
    if not (text.startswith("{") and text.endswith("}")):
        return []
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Arguments are not a valid object literal: %s", text)
        return []
    if not isinstance(decoded, dict):
        return []
    return [ParsedArgument(name=k, desc=_value_text(v)) for k, v in decoded.items()]


def unpack_functions(captures: Mapping[str, Sequence[str]]) -> Optional[List[ParsedFunction]]:
    """Pair ``func`` and ``args`` captures into canonical calls.

    Returns ``None`` when either bucket is missing, meaning the response was
    not a function-call response. Buckets of unequal length are truncated to
    the shorter one.
    """
    funcs = captures.get(FUNC)
    args = captures.get(ARGS)
    if funcs is None or args is None:
        return None

    if len(funcs) != len(args):
        logger.warning(
            "Function/argument capture mismatch: %d names, %d argument sets; truncating",
            len(funcs), len(args),
        )

    return [
        ParsedFunction(function=f, arguments=decode_arguments(a))
        for f, a in zip(funcs, args)
    ]


def functions_to_json(funcs: Optional[Sequence[ParsedFunction]]) -> str:
    """Serialize a call list for logging or hand-off to a dispatcher."""
    if funcs is None:
        return "null"
    return json.dumps([f.to_dict() for f in funcs], ensure_ascii=False)
