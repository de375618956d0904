"""
FunctionCaller — one function-calling round trip against a provider.

compile signature blocks → wrap for the provider → send via transport →
extract captures → unify into canonical calls → (optionally) dispatch.

Failures meaning "this capability was not used" stay soft: an invalid
function batch sends a plain request, and a response without a function
call yields ``functions=None`` with the reply in ``text``. Only transport
and payload-format errors propagate.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from llmfunc_sdk.core.config import ProviderConfig, normalize_provider
from llmfunc_sdk.dispatch.registry import DispatchResult, FunctionDispatcher
from llmfunc_sdk.extract.providers import Usage, extract_response, load_payload
from llmfunc_sdk.extract.unify import ParsedFunction
from llmfunc_sdk.schema.emitter import get_function_json, wrap_tools
from llmfunc_sdk.transport.http import HTTPTransport, LLMTransport
from llmfunc_sdk.transport.request import build_request
from llmfunc_sdk.utils.logger import setup_logging

logger = logging.getLogger("llmfunc_sdk.caller")


@dataclass
class CallOutcome:
    """Result of :meth:`FunctionCaller.call`.

    Attributes:
        functions: Canonical calls, or None for a plain (non-function) reply.
        results: Dispatcher results, one per call (empty without a dispatcher).
        usage: Token counters.
        finish_reason: Normalised finish reason.
        text: Plain reply text, code-fence lines removed.
        timing: Wall-clock seconds spent in the transport.
        raw: The decoded response payload.
    """

    functions: Optional[List[ParsedFunction]] = None
    results: List[DispatchResult] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    finish_reason: str = ""
    text: str = ""
    timing: float = 0.0
    raw: Any = None

    @property
    def is_function_call(self) -> bool:
        return bool(self.functions)

    def messages(self) -> List[str]:
        """Human-readable dispatch results."""
        if not self.is_function_call:
            return ["LLM failed to treat query as a function call"]
        return [str(r) for r in self.results]


class FunctionCaller:
    """Drive a function-calling request through a transport.

    Parameters:
        transport: Where requests are sent.
        provider: Provider id (``claude``, ``gpt``, ``gemini``, ...).
        model: Model name placed in the request body.
        dispatcher: Optional dispatcher; when set, recognised calls are
            executed and their results attached to the outcome.
        strict: Raise on argument/comment mismatches instead of silently
            falling back to a plain request.
    """

    def __init__(
        self,
        transport: LLMTransport,
        provider: str,
        model: str = "",
        dispatcher: Optional[FunctionDispatcher] = None,
        strict: bool = False,
    ) -> None:
        self.transport = transport
        self.provider = normalize_provider(provider)
        self.model = model
        self.dispatcher = dispatcher
        self.strict = strict

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        dispatcher: Optional[FunctionDispatcher] = None,
    ) -> FunctionCaller:
        """HTTP-backed caller; applies the config's ``debug``/``log_file``."""
        if config.debug or config.log_file:
            setup_logging(config)
        return cls(
            HTTPTransport.from_config(config),
            config.provider,
            model=config.model,
            dispatcher=dispatcher,
            strict=config.strict_signatures,
        )

    def tools(self, blocks: Sequence[str]) -> List[Dict[str, Any]]:
        """Compiled and wrapped tool list; empty when none are available."""
        if not blocks:
            return []
        defs = get_function_json(self.provider, blocks, strict=self.strict)
        if defs is None:
            logger.warning("No function definitions available, proceeding without tools")
        return wrap_tools(self.provider, defs)

    async def call(
        self,
        messages: Sequence[str],
        blocks: Sequence[str] = (),
        system: str = "",
        temperature: float = 0.2,
    ) -> CallOutcome:
        """Send *messages* with the functions described by *blocks*.

        Raises:
            TransportError: The provider answered with a non-2xx status.
            ResponseFormatError: The provider payload is not JSON.
        """
        body = build_request(
            self.provider,
            self.model,
            messages,
            tools=self.tools(blocks),
            system=system,
            temperature=temperature,
        )

        start = time.monotonic()
        raw = await self.transport.send(json.dumps(body, ensure_ascii=False).encode("utf-8"))
        timing = time.monotonic() - start

        value = load_payload(self.provider, raw)
        extracted = extract_response(self.provider, value)
        outcome = CallOutcome(
            functions=extracted.functions,
            usage=extracted.usage,
            finish_reason=extracted.finish_reason,
            text=extracted.text,
            timing=timing,
            raw=value,
        )

        if outcome.is_function_call:
            logger.info(
                "%s requested %d function call(s): %s",
                self.provider,
                len(outcome.functions or []),
                ", ".join(f.function for f in outcome.functions or []),
            )
            if self.dispatcher is not None:
                outcome.results = await self.dispatcher.dispatch(outcome.functions)
        else:
            logger.debug("%s replied with text (%d chars)", self.provider, len(outcome.text))
        return outcome
