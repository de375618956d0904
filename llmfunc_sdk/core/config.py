"""
Provider 配置管理。

Replaces per-provider global environment lookups with an explicit object
handed to the transport layer. Supports loading from environment variables
(.env) or direct construction. The parsing/extraction core takes no
configuration at all.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

PROVIDERS = ("gemini", "gpt", "claude", "mistral", "groq", "deepseek")

# Public endpoints used when <PROVIDER>_URL is not set.
DEFAULT_URLS: Dict[str, str] = {
    "gemini": "https://generativelanguage.googleapis.com/v1beta/models",
    "gpt": "https://api.openai.com/v1/chat/completions",
    "claude": "https://api.anthropic.com/v1/messages",
    "mistral": "https://api.mistral.ai/v1/chat/completions",
    "groq": "https://api.groq.com/openai/v1/chat/completions",
    "deepseek": "https://api.deepseek.com/chat/completions",
}

_ALIASES = {"openai": "gpt", "0": "gemini", "1": "gpt", "2": "claude", "3": "mistral", "4": "deepseek", "5": "groq"}


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def normalize_provider(provider: str) -> str:
    """Map aliases (``openai``, numeric menu ids) onto canonical provider ids."""
    p = provider.strip().lower()
    return _ALIASES.get(p, p)


@dataclass
class ProviderConfig:
    """Transport configuration for one provider."""

    # ── Provider ──
    provider: str = "gpt"
    model: str = ""
    url: str = ""
    api_key: str = ""

    # ── Transport ──
    timeout: int = 60
    headers: Dict[str, str] = field(default_factory=dict)

    # ── Signatures ──
    strict_signatures: bool = False  # raise on argument/comment mismatch

    # ── Debug ──
    debug: bool = False
    log_file: str = ""

    @property
    def endpoint(self) -> str:
        return self.url or DEFAULT_URLS.get(self.provider, "")

    @classmethod
    def from_env(cls, provider: str, env_file: str = ".env") -> ProviderConfig:
        """
        从 .env 文件和环境变量中加载配置。

        Reads ``<PROVIDER>_MODEL``, ``<PROVIDER>_URL`` and
        ``<PROVIDER>_API_KEY`` plus the shared ``LLM_TIMEOUT``,
        ``STRICT_SIGNATURES``, ``DEBUG`` and ``LOG_FILE``. Environment
        variables take precedence over the .env file.
        """
        load_dotenv(env_file, override=False)

        provider = normalize_provider(provider)
        prefix = provider.upper()

        return cls(
            provider=provider,
            model=os.getenv(f"{prefix}_MODEL", "").strip(),
            url=os.getenv(f"{prefix}_URL", "").strip(),
            api_key=os.getenv(f"{prefix}_API_KEY", "").strip(),
            timeout=int(os.getenv("LLM_TIMEOUT", "60")),
            strict_signatures=_to_bool(os.getenv("STRICT_SIGNATURES")),
            debug=_to_bool(os.getenv("DEBUG")),
            log_file=os.getenv("LOG_FILE", "").strip(),
        )

    def summary(self) -> str:
        """返回配置摘要（敏感信息脱敏）。"""
        key_display = f"{self.api_key[:6]}..." if self.api_key else "未配置"
        return (
            f"Provider: {self.provider.upper()}\n"
            f"Model: {self.model or '未配置'}\n"
            f"Endpoint: {self.endpoint[:50]}\n"
            f"API Key: {key_display}\n"
            f"Timeout: {self.timeout}s\n"
            f"Strict signatures: {self.strict_signatures}\n"
            f"Debug: {self.debug}"
        )
