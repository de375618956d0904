"""Line tokenizer for function signature blocks.

A signature block is line oriented, so each physical line becomes exactly
one :class:`Token`::

    // Derive the value of the arithmetic expression     FUNC_COMMENT
    // expr: An arithmetic expression                     ARG_COMMENT
    fn arithmetic(expr)                                   DECLARATION
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

_IDENT = r"[A-Za-z0-9_]+"

_COMMENT_RE = re.compile(r"^(\s*)/{2,3}\s*(?P<body>.*?)\s*$")
_ARG_COMMENT_RE = re.compile(rf"^(?P<name>{_IDENT}):(?P<desc>.+)$")
_DECLARATION_RE = re.compile(
    rf"^\s*(?:fn\s+)?(?P<name>{_IDENT})\s*\((?P<args>[^()]*)\)\s*$"
)
_ARG_IDENT_RE = re.compile(rf"^\*?{_IDENT}$")


class TokenKind(str, Enum):
    BLANK = "blank"
    FUNC_COMMENT = "func_comment"
    ARG_COMMENT = "arg_comment"
    DECLARATION = "declaration"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    """One classified line.

    Attributes:
        kind: Line classification.
        text: The raw line.
        line: 1-based line number within the block.
        column: 1-based column of the first significant character.
        name: Argument name (ARG_COMMENT) or function name (DECLARATION).
        value: Comment text (FUNC_COMMENT / ARG_COMMENT) or error reason (INVALID).
        args: Raw declared argument identifiers, ``*`` marker included.
    """

    kind: TokenKind
    text: str
    line: int
    column: int = 1
    name: str = ""
    value: str = ""
    args: Tuple[str, ...] = ()


def _column(text: str) -> int:
    return len(text) - len(text.lstrip()) + 1


def _split_args(raw: str) -> Tuple[Tuple[str, ...], str]:
    """Split a declaration argument list; returns (args, error)."""
    if not raw.strip():
        return (), ""
    args = tuple(part.strip() for part in raw.split(","))
    for a in args:
        if not _ARG_IDENT_RE.match(a):
            return (), f"invalid argument identifier {a!r}"
    return args, ""


def classify_line(text: str, line: int) -> Token:
    """Classify a single line of a signature block."""
    if not text.strip():
        return Token(TokenKind.BLANK, text, line)

    col = _column(text)

    m = _COMMENT_RE.match(text)
    if m:
        body = m.group("body")
        if not body:
            return Token(TokenKind.INVALID, text, line, col, value="empty comment")
        if ":" not in body:
            return Token(TokenKind.FUNC_COMMENT, text, line, col, value=body)
        am = _ARG_COMMENT_RE.match(body)
        if am is None:
            return Token(
                TokenKind.INVALID, text, line, col,
                value="expected 'name: description' in argument comment",
            )
        return Token(
            TokenKind.ARG_COMMENT, text, line, col,
            name=am.group("name"),
            value=am.group("desc").strip(),
        )

    d = _DECLARATION_RE.match(text)
    if d:
        args, error = _split_args(d.group("args"))
        if error:
            return Token(TokenKind.INVALID, text, line, col, value=error)
        return Token(
            TokenKind.DECLARATION, text, line, col,
            name=d.group("name"),
            args=args,
        )

    return Token(TokenKind.INVALID, text, line, col, value="unrecognised line")


def tokenize(text: str) -> List[Token]:
    """Tokenize a whole block, one token per line."""
    return [classify_line(raw, i) for i, raw in enumerate(text.split("\n"), start=1)]
