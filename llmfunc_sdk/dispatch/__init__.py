from llmfunc_sdk.dispatch.registry import (
    DispatchContext,
    DispatchResult,
    FunctionDispatcher,
    FunctionHandler,
)

__all__ = [
    "DispatchContext",
    "DispatchResult",
    "FunctionDispatcher",
    "FunctionHandler",
]
