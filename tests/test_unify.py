"""
测试 Result Unifier — func/args 配对、String(...) 解包与参数解码。
"""

import json
import logging

import pytest

from llmfunc_sdk.extract.unify import (
    ParsedArgument,
    ParsedFunction,
    decode_arguments,
    functions_to_json,
    unpack_functions,
    unwrap_string,
)


class TestUnwrapString:
    """String(...) 包装解码测试。"""

    def test_whole_value_wrapped(self):
        assert unwrap_string('String({"x":"1"})') == '{"x":"1"}'

    def test_inner_value_wrapped(self):
        assert unwrap_string('{"expr": String("1+2")}') == '{"expr": "1+2"}'

    def test_parentheses_inside_wrapper(self):
        assert unwrap_string('{"e": String("f(x)")}') == '{"e": "f(x)"}'

    def test_unwrapped_unchanged(self):
        assert unwrap_string('{"x":"1"}') == '{"x":"1"}'


class TestDecodeArguments:
    """参数解码测试。"""

    def test_object_literal(self):
        assert decode_arguments('{"x":"1"}') == [ParsedArgument("x", "1")]

    def test_wrapper(self):
        assert decode_arguments('String({"x":"1"})') == [ParsedArgument("x", "1")]

    def test_non_string_values_stringified(self):
        args = decode_arguments('{"n": 3, "flag": true, "obj": {"k": "v"}}')
        assert {a.name: a.desc for a in args} == {
            "n": "3",
            "flag": "true",
            "obj": '{"k":"v"}',
        }

    @pytest.mark.parametrize("raw", ["", "plain text", "[1, 2]", "42", "{not json}"])
    def test_not_an_object_gives_no_arguments(self, raw):
        assert decode_arguments(raw) == []

    def test_empty_object(self):
        assert decode_arguments("{}") == []


class TestUnpackFunctions:
    """func/args 配对测试。"""

    def test_pairing_and_decode(self):
        funcs = unpack_functions({
            "func": ["f1", "f2"],
            "args": ['{"x":"1"}', '{"y":"2"}'],
        })
        assert funcs == [
            ParsedFunction("f1", [ParsedArgument("x", "1")]),
            ParsedFunction("f2", [ParsedArgument("y", "2")]),
        ]

    def test_wrapped_args(self):
        funcs = unpack_functions({"func": ["f"], "args": ['String({"x":"1"})']})
        assert funcs[0].arguments == [ParsedArgument("x", "1")]

    @pytest.mark.parametrize("captures", [
        {},
        {"func": ["f"]},
        {"args": ['{"x":"1"}']},
        {"in": ["10"], "out": ["5"]},
    ])
    def test_missing_bucket_returns_none(self, captures):
        assert unpack_functions(captures) is None

    def test_empty_buckets_return_empty_list(self):
        assert unpack_functions({"func": [], "args": []}) == []

    def test_non_object_args_kept_with_no_arguments(self):
        funcs = unpack_functions({"func": ["f"], "args": ["oops"]})
        assert funcs == [ParsedFunction("f", [])]

    def test_length_mismatch_truncates_and_logs(self, caplog):
        with caplog.at_level(logging.WARNING, logger="llmfunc_sdk.extract"):
            funcs = unpack_functions({
                "func": ["f1", "f2", "f3"],
                "args": ['{"a":"1"}'],
            })
        assert [f.function for f in funcs] == ["f1"]
        assert "mismatch" in caplog.text

    def test_idempotent(self):
        captures = {"func": ["f1"], "args": ['{"x":"1","y":"2"}']}
        assert unpack_functions(captures) == unpack_functions(captures)


class TestParsedFunction:
    """ParsedFunction 序列化测试。"""

    def test_to_dict(self):
        f = ParsedFunction("apple", [ParsedArgument("color", "red")])
        assert f.to_dict() == {
            "function": "apple",
            "arguments": [{"name": "color", "desc": "red"}],
        }

    def test_from_dict(self):
        data = {"function": "apple", "arguments": [{"name": "color", "desc": "red"}]}
        assert ParsedFunction.from_dict(data) == ParsedFunction("apple", [ParsedArgument("color", "red")])

    def test_arguments_dict(self):
        f = ParsedFunction("apple", [ParsedArgument("color", "red"), ParsedArgument("taste", "sweet")])
        assert f.arguments_dict() == {"color": "red", "taste": "sweet"}

    def test_functions_to_json(self):
        funcs = [ParsedFunction("f", [ParsedArgument("x", "1")])]
        assert json.loads(functions_to_json(funcs)) == [
            {"function": "f", "arguments": [{"name": "x", "desc": "1"}]}
        ]

    def test_functions_to_json_none(self):
        assert functions_to_json(None) == "null"
