"""Transport collaborator — sends compiled schemas to a provider."""

from llmfunc_sdk.transport.http import HTTPTransport, InProcessTransport, LLMTransport
from llmfunc_sdk.transport.request import build_request

__all__ = [
    "HTTPTransport",
    "InProcessTransport",
    "LLMTransport",
    "build_request",
]
