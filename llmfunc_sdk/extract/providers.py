"""Per-provider wire-format tables and one-shot response extraction.

Each provider places the function name, its arguments, token counters and
the finish reason somewhere different in its response envelope. The tables
below describe those places as path patterns using fixed capture names:

- ``func``   — function name
- ``args``   — function arguments (object or JSON text)
- ``in``     — input/prompt token count
- ``out``    — output/completion token count
- ``finish`` — finish/stop reason
- ``text``   — plain reply text
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from llmfunc_sdk.errors import ResponseFormatError
from llmfunc_sdk.extract.path import Captures, get_functions
from llmfunc_sdk.extract.unify import ParsedFunction, unpack_functions

logger = logging.getLogger("llmfunc_sdk.extract")

_OPENAI_STYLE = [
    "choices:message:tool_calls:function:name:${func}",
    "choices:message:tool_calls:function:arguments:${args}",
    "usage:prompt_tokens:${in}",
    "usage:completion_tokens:${out}",
    "choices:finish_reason:${finish}",
    "choices:message:content:${text}",
]

PROVIDER_PATTERNS: Dict[str, List[str]] = {
    "claude": [
        "content:input:${args}",
        "content:name:${func}",
        "usage:input_tokens:${in}",
        "usage:output_tokens:${out}",
        "stop_reason:${finish}",
        "content:text:${text}",
    ],
    "gemini": [
        "candidates:content:parts:functionCall:name:${func}",
        "candidates:content:parts:functionCall:args:${args}",
        "usageMetadata:promptTokenCount:${in}",
        "usageMetadata:candidatesTokenCount:${out}",
        "candidates:finishReason:${finish}",
        "candidates:content:parts:text:${text}",
    ],
    "gpt": _OPENAI_STYLE,
    "mistral": _OPENAI_STYLE,
    "groq": _OPENAI_STYLE,
    "deepseek": _OPENAI_STYLE,
}

# Provider-specific spellings of "finished normally".
_STOP_REASONS = {"end_turn", "stop", "STOP"}


def patterns_for(provider: str) -> List[str]:
    """Pattern table for *provider*; unknown ids use the OpenAI-style table."""
    return list(PROVIDER_PATTERNS.get(provider, _OPENAI_STYLE))


@dataclass(frozen=True)
class Usage:
    """Token counters reported by a provider."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class ExtractedResponse:
    """Everything the core recovers from one provider response.

    Attributes:
        functions: Canonical calls, or None if this was not a function-call
            response.
        usage: Token counters (zeros when the provider omitted them).
        finish_reason: Normalised finish reason (``"STOP"`` for a normal end).
        text: Plain reply text, code-fence lines removed (empty when the
            provider sent none).
        captures: The raw capture buckets.
    """

    functions: Optional[List[ParsedFunction]] = None
    usage: Usage = field(default_factory=Usage)
    finish_reason: str = ""
    text: str = ""
    captures: Captures = field(default_factory=dict)

    @property
    def is_function_call(self) -> bool:
        return bool(self.functions)


def _first_int(captures: Captures, name: str) -> int:
    values = captures.get(name)
    if not values:
        return 0
    try:
        return int(float(values[0]))
    except (ValueError, OverflowError):
        logger.debug("Non-numeric %s counter: %r", name, values[0])
        return 0


def _finish_reason(captures: Captures) -> str:
    values = captures.get("finish")
    if not values:
        return ""
    reason = values[0]
    return "STOP" if reason in _STOP_REASONS else reason


def _reply_text(captures: Captures) -> str:
    lines = [
        line
        for value in captures.get("text", [])
        for line in value.splitlines()
        if not line.startswith("```")
    ]
    return "\n".join(lines)


def load_payload(provider: str, payload: Union[str, bytes, Any]) -> Any:
    """Decode raw JSON text/bytes; already-parsed values pass through."""
    if not isinstance(payload, (str, bytes)):
        return payload
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"{provider}: response is not valid JSON: {e}") from e


def extract_response(provider: str, payload: Union[str, bytes, Any]) -> ExtractedResponse:
    """Extract canonical calls, usage, finish reason and reply text.

    Args:
        provider: Provider id selecting the pattern table.
        payload: Raw JSON text/bytes, or an already-parsed JSON value.

    Raises:
        ResponseFormatError: *payload* is text that is not valid JSON.
    """
    value = load_payload(provider, payload)

    captures = get_functions(value, patterns_for(provider))
    return ExtractedResponse(
        functions=unpack_functions(captures),
        usage=Usage(
            input_tokens=_first_int(captures, "in"),
            output_tokens=_first_int(captures, "out"),
        ),
        finish_reason=_finish_reason(captures),
        text=_reply_text(captures),
        captures=captures,
    )
