"""Recursive-descent parser for comment-annotated function signatures.

Grammar (order-significant)::

    block        := BLANK* FUNC_COMMENT+ ARG_COMMENT+ DECLARATION BLANK* EOF

Blank lines may also appear between any two significant lines. After a
successful parse, the argument comments are cross-validated against the
declared arguments, position by position.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union, cast

from llmfunc_sdk.errors import ArgumentMismatchError, SignatureSyntaxError
from llmfunc_sdk.signature.tokenizer import Token, TokenKind, tokenize
from llmfunc_sdk.signature.types import ArgumentDescriptor, FunctionDescriptor

logger = logging.getLogger("llmfunc_sdk.signature")

# Emitted in place of a schema fragment when cross-validation fails in
# legacy mode. Not valid JSON.
ARGUMENT_MISMATCH = "Error: Argument names do not match"

_EXPECTED = {
    TokenKind.FUNC_COMMENT: "function comment",
    TokenKind.ARG_COMMENT: "argument comment 'name: description'",
    TokenKind.DECLARATION: "declaration 'fn name(args)'",
}


class _Parser:
    """Consumes the token stream of one block."""

    def __init__(self, text: str) -> None:
        self._tokens = [t for t in tokenize(text) if t.kind is not TokenKind.BLANK]
        self._pos = 0

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _fail(self, expected: str) -> SignatureSyntaxError:
        tok = self._peek()
        if tok is None:
            last = self._tokens[-1].line if self._tokens else 0
            return SignatureSyntaxError(f"expected {expected}, found end of block", last + 1, 1)
        found = tok.value if tok.kind is TokenKind.INVALID else tok.kind.value
        return SignatureSyntaxError(f"expected {expected}, found {found}", tok.line, tok.column)

    def _many(self, kind: TokenKind) -> List[Token]:
        """One or more tokens of *kind*."""
        out: List[Token] = []
        while True:
            tok = self._peek()
            if tok is None or tok.kind is not kind:
                break
            out.append(tok)
            self._pos += 1
        if not out:
            raise self._fail(_EXPECTED[kind])
        return out

    def _one(self, kind: TokenKind) -> Token:
        tok = self._peek()
        if tok is None or tok.kind is not kind:
            raise self._fail(_EXPECTED[kind])
        self._pos += 1
        return tok

    def _end(self) -> None:
        if self._peek() is not None:
            raise self._fail("end of block")

    def parse(self) -> Tuple[List[Token], List[Token], Token]:
        func_comments = self._many(TokenKind.FUNC_COMMENT)
        arg_comments = self._many(TokenKind.ARG_COMMENT)
        decl = self._one(TokenKind.DECLARATION)
        self._end()
        return func_comments, arg_comments, decl


def _arguments_match(arg_comments: List[Token], declared: List[str]) -> bool:
    if len(arg_comments) != len(declared):
        return False
    return all(c.name == d.lstrip("*") for c, d in zip(arg_comments, declared))


def parse_block(text: str, strict: bool = False) -> Union[FunctionDescriptor, str]:
    """Parse one signature block.

    Args:
        text: The block, comment lines followed by a declaration line.
        strict: Raise :class:`ArgumentMismatchError` on a cross-validation
            failure instead of returning :data:`ARGUMENT_MISMATCH`.

    Returns:
        A :class:`FunctionDescriptor`, or the :data:`ARGUMENT_MISMATCH`
        sentinel string when the argument comments do not line up with the
        declared arguments (legacy mode).

    Raises:
        SignatureSyntaxError: The block does not match the grammar.
    """
    func_comments, arg_comments, decl = _Parser(text).parse()
    declared = list(decl.args)

    if not _arguments_match(arg_comments, declared):
        commented = [c.name for c in arg_comments]
        if strict:
            raise ArgumentMismatchError(decl.name, commented, declared)
        logger.debug("Argument mismatch in %s: %s vs %s", decl.name, commented, declared)
        return ARGUMENT_MISMATCH

    arguments = [
        ArgumentDescriptor(
            name=d.lstrip("*"),
            description=c.value,
            optional=d.startswith("*"),
        )
        for c, d in zip(arg_comments, declared)
    ]
    return FunctionDescriptor(
        name=decl.name,
        description=func_comments[0].value,
        arguments=arguments,
    )


def parse_signature(text: str) -> FunctionDescriptor:
    """Parse one block, raising on any failure."""
    # strict=True raises instead of returning the sentinel string
    return cast(FunctionDescriptor, parse_block(text, strict=True))
