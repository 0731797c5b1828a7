"""Pipeline API and runtime prelude."""

import logging

import pytest

from vie import (
    LexicalError,
    ParseError,
    compile_program,
    compile_source,
    parse,
)
from vie.prelude import PRELUDE, PRELUDE_FUNCTIONS, wrap_program


def test_compile_program_wraps_output():
    js = compile_program("trả_về in(1)")
    assert js.startswith(PRELUDE)
    assert "\n(async () => {\nreturn console.log(1);\n})();\n" in js
    assert js.endswith("})();\n")


def test_wrap_program_layout():
    assert wrap_program("x;") == (
        PRELUDE + "\n// Compiled Vie program\n(async () => {\nx;\n})();\n"
    )


def test_prelude_defines_its_functions():
    for name in PRELUDE_FUNCTIONS:
        assert "function " + name + "(" in PRELUDE


def test_lexical_errors_propagate():
    with pytest.raises(LexicalError) as exc_info:
        compile_program('cho s = "abc')
    assert exc_info.value.line == 1
    assert exc_info.value.msg == "unterminated string literal"


def test_first_parse_error_is_reported():
    with pytest.raises(ParseError) as exc_info:
        compile_source("cho = 1\ncho y = ]")
    assert exc_info.value.line == 1


def test_stages_log_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="vie"):
        compile_source("cho a = 1\nin(a)")
    messages = [r.getMessage() for r in caplog.records]
    assert "tokenized 9 tokens" in messages
    assert "parsed 2 top-level statements" in messages
    assert "generated 26 characters of JavaScript" in messages


def test_library_is_silent_by_default(caplog):
    with caplog.at_level(logging.WARNING):
        parse("cho a = 1")
    assert caplog.records == []
