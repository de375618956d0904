"""LLM transport layer (HTTP, InProcess)."""

from __future__ import annotations

import asyncio
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

from llmfunc_sdk.core.config import ProviderConfig
from llmfunc_sdk.errors import TransportError

logger = logging.getLogger("llmfunc_sdk.transport")

_MAX_ERROR_BODY = 128 * 1024  # 128KB


# ──────────────────────────────────────────────
# Transport Protocol
# ──────────────────────────────────────────────


@runtime_checkable
class LLMTransport(Protocol):
    """Request-response transport: one JSON body in, one raw payload out."""

    async def send(self, payload: bytes) -> bytes:
        ...


# ──────────────────────────────────────────────
# HTTPTransport
# ──────────────────────────────────────────────


class HTTPTransport:
    """LLMTransport over HTTP POST.

    Uses ``urllib.request`` in ``asyncio.to_thread`` to avoid blocking the
    event loop.
    """

    def __init__(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: int = 60,
    ) -> None:
        self.url = url
        self.headers = headers or {}
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ProviderConfig) -> HTTPTransport:
        """Build a transport for *config*'s provider endpoint."""
        url = config.endpoint
        headers = dict(config.headers)
        if config.provider == "gemini":
            url = f"{url.rstrip('/')}/{config.model}:generateContent"
            if config.api_key:
                url += "?" + urllib.parse.urlencode({"key": config.api_key})
        elif config.provider == "claude":
            headers.setdefault("anthropic-version", "2023-06-01")
            if config.api_key:
                headers.setdefault("x-api-key", config.api_key)
        elif config.api_key:
            headers.setdefault("Authorization", f"Bearer {config.api_key}")
        return cls(url, headers=headers, timeout=config.timeout)

    async def send(self, payload: bytes) -> bytes:
        return await asyncio.to_thread(self._sync_send, payload)

    def _sync_send(self, payload: bytes) -> bytes:
        req = urllib.request.Request(
            self.url,
            data=payload,
            headers={"Content-Type": "application/json", **self.headers},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as e:
            body = ""
            try:
                raw = e.read(_MAX_ERROR_BODY)
                body = raw.decode("utf-8", errors="replace")
                if len(body) > 512:
                    body = body[:512] + "..."
            except OSError:
                logger.debug("Could not read error body from %s", self.url)
            raise TransportError(e.code, body) from e


# ──────────────────────────────────────────────
# InProcessTransport (for testing)
# ──────────────────────────────────────────────


class InProcessTransport:
    """LLMTransport that delegates to a handler function directly.

    Used for deterministic testing without network access.
    """

    def __init__(self, handler: Callable[[bytes], bytes]) -> None:
        self.handler = handler

    async def send(self, payload: bytes) -> bytes:
        return self.handler(payload)
