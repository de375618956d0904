"""
Schema Emitter — compile signature blocks into provider tool schemas.

Quick Start::

    from llmfunc_sdk.schema import get_function_json, wrap_tools

    defs = get_function_json("claude", [block])
    if defs is None:
        ...  # no functions available, send a plain request
    tools = wrap_tools("claude", defs)
"""

from llmfunc_sdk.schema.emitter import (
    ProviderSchema,
    compile_functions,
    compile_schemas,
    get_function_json,
    wrap_tools,
)

__all__ = [
    "ProviderSchema",
    "compile_functions",
    "compile_schemas",
    "get_function_json",
    "wrap_tools",
]
