"""Exception hierarchy for llmfunc_sdk.

Only hard failures live here. Soft outcomes ("no functions available",
"not a function-call response", missing JSON fields) are reported as
``None`` or empty values, never as exceptions.
"""

from __future__ import annotations

from typing import List


class LLMFuncError(Exception):
    """Base class for all llmfunc_sdk errors."""


# ──────────────────────────────────────────────
# Signature errors
# ──────────────────────────────────────────────


class SignatureSyntaxError(LLMFuncError):
    """A text block does not match the declaration grammar at all."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"signature: {line}:{column}: {message}")


class ArgumentMismatchError(LLMFuncError):
    """Argument comments do not line up with the declared arguments.

    Only raised in strict mode; legacy mode embeds a sentinel string instead.
    """

    def __init__(self, function: str, commented: List[str], declared: List[str]) -> None:
        self.function = function
        self.commented = list(commented)
        self.declared = list(declared)
        super().__init__(
            f"signature: {function}: argument comments {self.commented} "
            f"do not match declared arguments {self.declared}"
        )


# ──────────────────────────────────────────────
# Extraction errors
# ──────────────────────────────────────────────


class PatternError(LLMFuncError):
    """A path pattern is not of the form ``seg:seg:${name}``."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"pattern {pattern!r}: {reason}")


class ResponseFormatError(LLMFuncError):
    """A provider payload is not valid JSON."""


# ──────────────────────────────────────────────
# Transport errors
# ──────────────────────────────────────────────


class TransportError(LLMFuncError):
    """Wraps HTTP non-2xx responses with status code and body preview."""

    def __init__(self, status_code: int, body_preview: str = "") -> None:
        self.status_code = status_code
        self.body_preview = body_preview
        super().__init__(f"transport: http {status_code}: {body_preview}")

    @property
    def is_retryable(self) -> bool:
        return self.status_code >= 500 or self.status_code == 429
