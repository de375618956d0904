"""Minimal provider request bodies.

Only the fields the function-calling round trip needs are set: the model,
the conversation and the tool list. Prompts alternate user/assistant
turns, starting with the user.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

DEFAULT_MAX_TOKENS = 4096


def _roles(messages: Sequence[str], assistant: str) -> List[tuple]:
    return [("user" if i % 2 == 0 else assistant, m) for i, m in enumerate(messages)]


def build_request(
    provider: str,
    model: str,
    messages: Sequence[str],
    tools: Optional[List[Dict[str, Any]]] = None,
    system: str = "",
    temperature: float = 0.2,
) -> Dict[str, Any]:
    """Build the JSON body for one provider call.

    *tools* must already be wrapped for *provider* (see ``wrap_tools``);
    the ``tools`` key is omitted when there are none.
    """
    if provider == "gemini":
        body: Dict[str, Any] = {
            "contents": [
                {"role": role, "parts": [{"text": text}]}
                for role, text in _roles(messages, "model")
            ],
            "generationConfig": {"temperature": temperature},
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
    elif provider == "claude":
        body = {
            "model": model,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "temperature": temperature,
            "messages": [
                {"role": role, "content": text}
                for role, text in _roles(messages, "assistant")
            ],
        }
        if system:
            body["system"] = system
    else:
        turns = [{"role": role, "content": text} for role, text in _roles(messages, "assistant")]
        if system:
            turns.insert(0, {"role": "system", "content": system})
        body = {"model": model, "temperature": temperature, "messages": turns}

    if tools:
        body["tools"] = tools
    return body
