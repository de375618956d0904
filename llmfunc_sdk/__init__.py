"""
llmfunc SDK — describe functions once, call them through any LLM provider.

Compiles comment-annotated function signatures into the tool schema
dialect each provider expects, and recovers the invoked function name and
arguments from whatever provider-specific JSON comes back.

Quick Start:
    from llmfunc_sdk import get_function_json, extract_response

    block = '''
    // Derive the value of the arithmetic expression
    // expr: An arithmetic expression
    fn arithmetic(expr)
    '''

    tools = get_function_json("claude", [block])   # None if unavailable
    ...                                            # send via your transport
    result = extract_response("claude", raw_response)
    for call in result.functions or []:
        print(call.function, call.arguments_dict())
"""

__version__ = "0.3.0"

from llmfunc_sdk.caller import CallOutcome, FunctionCaller
from llmfunc_sdk.core.config import ProviderConfig
from llmfunc_sdk.dispatch.registry import (
    DispatchContext,
    DispatchResult,
    FunctionDispatcher,
)
from llmfunc_sdk.errors import (
    ArgumentMismatchError,
    LLMFuncError,
    PatternError,
    ResponseFormatError,
    SignatureSyntaxError,
    TransportError,
)
from llmfunc_sdk.extract.path import PathPattern, find_patterns, get_functions
from llmfunc_sdk.extract.providers import ExtractedResponse, Usage, extract_response
from llmfunc_sdk.extract.unify import ParsedArgument, ParsedFunction, unpack_functions
from llmfunc_sdk.schema.emitter import (
    ProviderSchema,
    compile_functions,
    compile_schemas,
    get_function_json,
    wrap_tools,
)
from llmfunc_sdk.signature.parser import ARGUMENT_MISMATCH, parse_block, parse_signature
from llmfunc_sdk.signature.types import ArgumentDescriptor, FunctionDescriptor
from llmfunc_sdk.transport.http import HTTPTransport, InProcessTransport
from llmfunc_sdk.utils.logger import reset_logging, setup_logging

__all__ = [
    "CallOutcome",
    "FunctionCaller",
    "ProviderConfig",
    "DispatchContext",
    "DispatchResult",
    "FunctionDispatcher",
    "ArgumentMismatchError",
    "LLMFuncError",
    "PatternError",
    "ResponseFormatError",
    "SignatureSyntaxError",
    "TransportError",
    "PathPattern",
    "find_patterns",
    "get_functions",
    "ExtractedResponse",
    "Usage",
    "extract_response",
    "ParsedArgument",
    "ParsedFunction",
    "unpack_functions",
    "ProviderSchema",
    "compile_functions",
    "compile_schemas",
    "get_function_json",
    "wrap_tools",
    "ARGUMENT_MISMATCH",
    "parse_block",
    "parse_signature",
    "ArgumentDescriptor",
    "FunctionDescriptor",
    "HTTPTransport",
    "InProcessTransport",
    "reset_logging",
    "setup_logging",
    "__version__",
]
