"""
FunctionDispatcher — maps canonical calls onto registered Python handlers.

Consumes the ``ParsedFunction`` list produced by the unifier. Arguments are
matched by name, since the unifier does not guarantee declaration order.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union, get_type_hints

from llmfunc_sdk.extract.unify import ParsedFunction
from llmfunc_sdk.signature.parser import parse_signature
from llmfunc_sdk.signature.types import FunctionDescriptor

logger = logging.getLogger("llmfunc_sdk.dispatch")


# ──────────────────────────────────────────────
# DispatchContext
# ──────────────────────────────────────────────


@dataclass
class DispatchContext:
    """Context passed to handlers that declare it as their first parameter.

    Attributes:
        function: Name of the function being invoked.
        extra: Arbitrary shared state.
    """

    function: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


# ──────────────────────────────────────────────
# FunctionHandler
# ──────────────────────────────────────────────


@dataclass
class FunctionHandler:
    """A registered handler.

    Attributes:
        name: Function name as the LLM will call it.
        handler: The callable to execute.
        descriptor: Optional signature descriptor; its required arguments are
            enforced before the handler runs.
        is_async: Whether the handler is a coroutine function.
    """

    name: str
    handler: Callable
    descriptor: Optional[FunctionDescriptor] = None
    is_async: bool = False

    @property
    def required(self) -> List[str]:
        return self.descriptor.required if self.descriptor else []

    def wants_context(self) -> bool:
        params = list(inspect.signature(self.handler).parameters)
        if not params:
            return False
        try:
            hints = get_type_hints(self.handler)
        except Exception:
            hints = {}
        return hints.get(params[0]) is DispatchContext


# ──────────────────────────────────────────────
# DispatchResult
# ──────────────────────────────────────────────


@dataclass
class DispatchResult:
    """Outcome of one dispatched call.

    Attributes:
        function: Function name.
        content: Serialized handler result.
        error: Error message if the call could not be executed.
    """

    function: str
    content: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {"function": self.function, "content": self.content, "error": self.error}

    def __str__(self) -> str:
        if self.error:
            return self.error
        return f"{self.function} -> {self.content}"


# ──────────────────────────────────────────────
# FunctionDispatcher
# ──────────────────────────────────────────────


class FunctionDispatcher:
    """Registry of handlers and dispatcher of canonical calls.

    Usage::

        dispatcher = FunctionDispatcher()

        @dispatcher.function('''
        // Derive the value of the arithmetic expression
        // expr: An arithmetic expression
        fn arithmetic(expr)
        ''')
        def arithmetic(expr: str) -> str:
            ...

        results = await dispatcher.dispatch(calls)
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, FunctionHandler] = {}

    def register(
        self,
        handler: Callable,
        name: Optional[str] = None,
        descriptor: Optional[Union[FunctionDescriptor, str]] = None,
    ) -> FunctionHandler:
        """Register *handler*.

        *descriptor* may be a :class:`FunctionDescriptor` or a signature
        block; when given, its name is used unless *name* overrides it.
        """
        if isinstance(descriptor, str):
            descriptor = parse_signature(descriptor)
        func_name = name or (descriptor.name if descriptor else handler.__name__)
        entry = FunctionHandler(
            name=func_name,
            handler=handler,
            descriptor=descriptor,
            is_async=inspect.iscoroutinefunction(handler),
        )
        if func_name in self._handlers:
            logger.warning("Function %r already registered, overwriting", func_name)
        self._handlers[func_name] = entry
        logger.debug("Function registered: %s", func_name)
        return entry

    def function(
        self,
        signature: Optional[str] = None,
        *,
        name: Optional[str] = None,
    ) -> Callable[[Callable], Callable]:
        """Decorator form of :meth:`register`; returns the original callable."""

        def decorator(fn: Callable) -> Callable:
            self.register(fn, name=name, descriptor=signature)
            return fn

        return decorator

    def get(self, name: str) -> Optional[FunctionHandler]:
        return self._handlers.get(name)

    def names(self) -> List[str]:
        return list(self._handlers.keys())

    def signatures(self) -> List[FunctionDescriptor]:
        """Descriptors of every handler registered with one."""
        return [h.descriptor for h in self._handlers.values() if h.descriptor]

    def remove(self, name: str) -> None:
        self._handlers.pop(name, None)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, name: str) -> bool:
        return name in self._handlers

    # ─── Execution ───

    async def execute(
        self,
        name: str,
        args: Optional[Dict[str, Any]] = None,
        ctx: Optional[DispatchContext] = None,
    ) -> Any:
        """Execute a handler by name.

        Raises:
            KeyError: If the function is not registered.
            TypeError: If a required argument is missing.
        """
        entry = self._handlers.get(name)
        if entry is None:
            raise KeyError(f"Function not found: {name!r}")

        call_args = dict(args or {})
        for arg in entry.required:
            if arg not in call_args:
                raise TypeError(f"Function {name!r} missing required argument: {arg!r}")

        if ctx is None:
            ctx = DispatchContext(function=name)
        else:
            ctx.function = name

        if entry.wants_context():
            result = entry.handler(ctx, **call_args)
        else:
            result = entry.handler(**call_args)
        if entry.is_async:
            result = await result
        return result

    async def dispatch(
        self,
        funcs: Optional[Sequence[ParsedFunction]],
        extra: Optional[Dict[str, Any]] = None,
    ) -> List[DispatchResult]:
        """Execute every call, collecting one result per call.

        Failures (unknown function, missing argument, handler exception) are
        reported in the result rather than raised.
        """
        results: List[DispatchResult] = []

        for f in funcs or []:
            args = f.arguments_dict()
            ctx = DispatchContext(function=f.function, extra=dict(extra or {}))
            try:
                result = await self.execute(f.function, args, ctx=ctx)
                content = result if isinstance(result, str) else json.dumps(result, ensure_ascii=False)
                results.append(DispatchResult(function=f.function, content=content))
            except Exception as e:
                logger.error("Function call failed: %s(%s) -> %s", f.function, args, e)
                results.append(DispatchResult(function=f.function, error=str(e)))

        return results
