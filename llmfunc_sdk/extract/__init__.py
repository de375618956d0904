"""
Path Extractor and Result Unifier — provider responses → canonical calls.

Quick Start::

    from llmfunc_sdk.extract import get_functions, unpack_functions

    captures = get_functions(response, [
        "content:name:${func}",
        "content:input:${args}",
    ])
    calls = unpack_functions(captures)  # None if not a function call

Or in one step, using the built-in provider tables::

    from llmfunc_sdk.extract import extract_response

    result = extract_response("claude", raw_text)
    result.functions, result.usage, result.finish_reason, result.text
"""

from llmfunc_sdk.extract.path import PathPattern, find_patterns, get_functions
from llmfunc_sdk.extract.providers import (
    PROVIDER_PATTERNS,
    ExtractedResponse,
    Usage,
    extract_response,
    patterns_for,
)
from llmfunc_sdk.extract.unify import (
    ParsedArgument,
    ParsedFunction,
    decode_arguments,
    functions_to_json,
    unpack_functions,
    unwrap_string,
)

__all__ = [
    "PathPattern",
    "find_patterns",
    "get_functions",
    "PROVIDER_PATTERNS",
    "ExtractedResponse",
    "Usage",
    "extract_response",
    "patterns_for",
    "ParsedArgument",
    "ParsedFunction",
    "decode_arguments",
    "functions_to_json",
    "unpack_functions",
    "unwrap_string",
]
