"""
Signature Parser — comment-annotated function declarations → descriptors.

Quick Start::

    from llmfunc_sdk.signature import parse_signature

    fd = parse_signature(
        '''
        // Derive the value of the arithmetic expression
        // expr: An arithmetic expression
        fn arithmetic(expr)
        '''
    )
    fd.required  # ["expr"]
"""

from llmfunc_sdk.signature.parser import (
    ARGUMENT_MISMATCH,
    parse_block,
    parse_signature,
)
from llmfunc_sdk.signature.types import ArgumentDescriptor, FunctionDescriptor

__all__ = [
    "ARGUMENT_MISMATCH",
    "ArgumentDescriptor",
    "FunctionDescriptor",
    "parse_block",
    "parse_signature",
]
