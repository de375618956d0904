"""
测试 FunctionCaller — 使用 InProcessTransport 模拟 provider 端到端流程。
"""

import json
from urllib.parse import parse_qs, urlparse

import pytest

from llmfunc_sdk.caller import CallOutcome, FunctionCaller
from llmfunc_sdk.core.config import ProviderConfig
from llmfunc_sdk.dispatch.registry import FunctionDispatcher
from llmfunc_sdk.errors import ArgumentMismatchError, ResponseFormatError
from llmfunc_sdk.transport.http import HTTPTransport, InProcessTransport, LLMTransport
from llmfunc_sdk.transport.request import build_request

ARITHMETIC = """
// Derive the value of the arithmetic expression
// expr: An arithmetic expression
fn arithmetic(expr)
"""

MISMATCH = """
// Broken function
// a: Alpha
fn broken(b)
"""


# ══════════════════════════════════════════════
# Test helpers — mock providers via InProcessTransport
# ══════════════════════════════════════════════


class Recorder:
    """Records request bodies and replies with a canned response."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, payload: bytes) -> bytes:
        self.requests.append(json.loads(payload))
        if isinstance(self.response, bytes):
            return self.response
        return json.dumps(self.response).encode("utf-8")


def claude_tool_use(name, args):
    return {
        "content": [{"type": "tool_use", "id": "t1", "name": name, "input": args}],
        "stop_reason": "tool_use",
        "usage": {"input_tokens": 10, "output_tokens": 3},
    }


def gpt_tool_call(name, args):
    return {
        "choices": [{
            "message": {"tool_calls": [
                {"id": "c1", "type": "function",
                 "function": {"name": name, "arguments": json.dumps(args)}},
            ]},
            "finish_reason": "tool_calls",
        }],
        "usage": {"prompt_tokens": 7, "completion_tokens": 2},
    }


def make_dispatcher():
    d = FunctionDispatcher()

    @d.function(ARITHMETIC)
    def arithmetic(expr: str) -> str:
        left, _, right = expr.partition("+")
        return str(int(left) + int(right))

    return d


# ══════════════════════════════════════════════
# Request building
# ══════════════════════════════════════════════


class TestBuildRequest:
    """请求体构造测试。"""

    def test_claude_body(self):
        body = build_request("claude", "m", ["hi"], tools=[{"name": "f"}], system="sys")
        assert body["model"] == "m"
        assert body["system"] == "sys"
        assert body["messages"] == [{"role": "user", "content": "hi"}]
        assert body["tools"] == [{"name": "f"}]

    def test_gpt_body_alternates_roles(self):
        body = build_request("gpt", "m", ["q1", "a1", "q2"], system="sys")
        assert [m["role"] for m in body["messages"]] == ["system", "user", "assistant", "user"]
        assert "tools" not in body

    def test_gemini_body(self):
        body = build_request("gemini", "m", ["q1", "a1"], tools=[{"functionDeclarations": {}}])
        assert [c["role"] for c in body["contents"]] == ["user", "model"]
        assert body["contents"][0]["parts"] == [{"text": "q1"}]
        assert "tools" in body


# ══════════════════════════════════════════════
# FunctionCaller round trips
# ══════════════════════════════════════════════


class TestFunctionCaller:
    """端到端调用测试。"""

    def test_in_process_transport_is_llm_transport(self):
        assert isinstance(InProcessTransport(lambda p: p), LLMTransport)

    @pytest.mark.asyncio
    async def test_claude_round_trip(self):
        rec = Recorder(claude_tool_use("arithmetic", {"expr": "2+3"}))
        caller = FunctionCaller(InProcessTransport(rec), "claude", "model-x", dispatcher=make_dispatcher())
        outcome = await caller.call(["What is 2+3?"], [ARITHMETIC])

        sent = rec.requests[0]
        assert sent["tools"][0]["name"] == "arithmetic"
        assert "input_schema" in sent["tools"][0]

        assert isinstance(outcome, CallOutcome)
        assert outcome.is_function_call
        assert outcome.functions[0].arguments_dict() == {"expr": "2+3"}
        assert outcome.results[0].content == "5"
        assert outcome.messages() == ["arithmetic -> 5"]
        assert outcome.usage.total == 13
        assert outcome.finish_reason == "tool_use"

    @pytest.mark.asyncio
    async def test_gpt_round_trip_wraps_tools(self):
        rec = Recorder(gpt_tool_call("arithmetic", {"expr": "1+1"}))
        caller = FunctionCaller(InProcessTransport(rec), "openai", "m", dispatcher=make_dispatcher())
        outcome = await caller.call(["1+1?"], [ARITHMETIC])

        tool = rec.requests[0]["tools"][0]
        assert tool["type"] == "function"
        assert "parameters" in tool["function"]
        assert caller.provider == "gpt"
        assert outcome.results[0].content == "2"

    @pytest.mark.asyncio
    async def test_without_dispatcher(self):
        rec = Recorder(claude_tool_use("arithmetic", {"expr": "2+3"}))
        outcome = await FunctionCaller(InProcessTransport(rec), "claude").call(["q"], [ARITHMETIC])
        assert outcome.functions[0].function == "arithmetic"
        assert outcome.results == []

    @pytest.mark.asyncio
    async def test_invalid_functions_send_plain_request(self):
        rec = Recorder({"content": [{"type": "text", "text": "plain"}], "stop_reason": "end_turn"})
        caller = FunctionCaller(InProcessTransport(rec), "claude", dispatcher=make_dispatcher())
        outcome = await caller.call(["q"], [MISMATCH])

        assert "tools" not in rec.requests[0]
        assert outcome.functions is None
        assert outcome.text == "plain"
        assert outcome.finish_reason == "STOP"
        assert outcome.messages() == ["LLM failed to treat query as a function call"]

    @pytest.mark.asyncio
    async def test_plain_text_reply(self):
        rec = Recorder({"choices": [{"message": {"content": "Hello there"}, "finish_reason": "stop"}]})
        outcome = await FunctionCaller(InProcessTransport(rec), "gpt").call(["hi"])

        assert outcome.functions is None
        assert outcome.text == "Hello there"
        assert outcome.finish_reason == "STOP"

    @pytest.mark.asyncio
    async def test_strict_mismatch_raises(self):
        rec = Recorder({})
        caller = FunctionCaller(InProcessTransport(rec), "claude", strict=True)
        with pytest.raises(ArgumentMismatchError):
            await caller.call(["q"], [MISMATCH])
        assert rec.requests == []

    @pytest.mark.asyncio
    async def test_non_json_response(self):
        rec = Recorder(b"<html>bad gateway</html>")
        caller = FunctionCaller(InProcessTransport(rec), "gpt")
        with pytest.raises(ResponseFormatError):
            await caller.call(["q"])


# ══════════════════════════════════════════════
# HTTPTransport configuration
# ══════════════════════════════════════════════


class TestHTTPTransportConfig:
    """HTTPTransport.from_config 测试（不发起网络请求）。"""

    def test_claude_headers(self):
        t = HTTPTransport.from_config(ProviderConfig(provider="claude", api_key="k1"))
        assert t.url == "https://api.anthropic.com/v1/messages"
        assert t.headers["x-api-key"] == "k1"
        assert "anthropic-version" in t.headers

    def test_bearer_for_openai_style(self):
        t = HTTPTransport.from_config(ProviderConfig(provider="groq", api_key="k2", timeout=5))
        assert t.headers["Authorization"] == "Bearer k2"
        assert t.timeout == 5

    def test_gemini_url(self):
        t = HTTPTransport.from_config(ProviderConfig(provider="gemini", model="gm", api_key="k3"))
        parsed = urlparse(t.url)
        assert parsed.path.endswith("/gm:generateContent")
        assert parse_qs(parsed.query) == {"key": ["k3"]}

    def test_explicit_url_wins(self):
        t = HTTPTransport.from_config(ProviderConfig(provider="gpt", url="http://localhost:1234/v1"))
        assert t.url == "http://localhost:1234/v1"

    def test_caller_from_config(self):
        caller = FunctionCaller.from_config(ProviderConfig(provider="mistral", model="mm", strict_signatures=True))
        assert caller.provider == "mistral"
        assert caller.model == "mm"
        assert caller.strict is True
        assert isinstance(caller.transport, HTTPTransport)
