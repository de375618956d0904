"""Schema Emitter — descriptors → provider-specific tool schema JSON.

Field naming depends on the provider id: ``"claude"`` places the parameter
object under ``input_schema``; every other id, including unrecognised ones,
uses ``parameters``. Emission is pure templating with no I/O.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from llmfunc_sdk.errors import SignatureSyntaxError
from llmfunc_sdk.signature.parser import parse_block, parse_signature
from llmfunc_sdk.signature.types import CLAUDE, FunctionDescriptor, schema_key

logger = logging.getLogger("llmfunc_sdk.schema")

GEMINI = "gemini"


# ──────────────────────────────────────────────
# ProviderSchema
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class ProviderSchema:
    """An emitted schema fragment tagged with the provider that shaped it."""

    provider: str
    fragment: Dict[str, Any]

    @property
    def key(self) -> str:
        return schema_key(self.provider)

    @property
    def name(self) -> str:
        return self.fragment["name"]

    @property
    def required(self) -> List[str]:
        return list(self.fragment[self.key]["required"])

    @classmethod
    def from_descriptor(cls, provider: str, fd: FunctionDescriptor) -> ProviderSchema:
        return cls(provider=provider, fragment=fd.to_schema(provider))


# ──────────────────────────────────────────────
# Batch compilation
# ──────────────────────────────────────────────


def compile_functions(provider: str, blocks: Sequence[str], strict: bool = False) -> str:
    """Compile a batch of signature blocks into one JSON array literal.

    Each block is parsed independently. In legacy mode a block whose
    argument comments do not match its declaration contributes the
    ``ARGUMENT_MISMATCH`` sentinel verbatim, so the returned text is no
    longer valid JSON.

    Raises:
        SignatureSyntaxError: Any block fails the grammar; nothing is
            produced for the batch.
        ArgumentMismatchError: Cross-validation failure with ``strict=True``.
    """
    fragments: List[str] = []
    for block in blocks:
        result = parse_block(block, strict=strict)
        if isinstance(result, FunctionDescriptor):
            fragments.append(json.dumps(result.to_schema(provider), ensure_ascii=False))
        else:
            fragments.append(result)
    return "[ " + ", ".join(fragments) + " ]"


def get_function_json(
    provider: str,
    blocks: Sequence[str],
    strict: bool = False,
) -> Optional[List[Dict[str, Any]]]:
    """Compile *blocks* and parse the result into schema dicts.

    Returns ``None`` ("no functions available") when the batch fails the
    grammar or the compiled text is not valid JSON. Callers should then
    proceed without tool calling.
    """
    try:
        text = compile_functions(provider, blocks, strict=strict)
    except SignatureSyntaxError as e:
        logger.warning("Invalid function definition for %s: %s", provider, e)
        return None

    try:
        defs = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Compiled function batch for %s is not valid JSON: %s", provider, e)
        return None
    return defs


def compile_schemas(provider: str, blocks: Sequence[str]) -> List[ProviderSchema]:
    """Typed variant of :func:`get_function_json`; raises on every failure."""
    return [ProviderSchema.from_descriptor(provider, parse_signature(b)) for b in blocks]


# ──────────────────────────────────────────────
# Request envelopes
# ──────────────────────────────────────────────


def wrap_tools(provider: str, defs: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Wrap compiled definitions in the envelope *provider* expects.

    - ``claude``: no wrapper.
    - ``gemini``: ``{"functionDeclarations": def}``
    - everyone else: ``{"type": "function", "function": def}``
    """
    if not defs:
        return []
    if provider == CLAUDE:
        return list(defs)
    if provider == GEMINI:
        return [{"functionDeclarations": d} for d in defs]
    return [{"type": "function", "function": d} for d in defs]
