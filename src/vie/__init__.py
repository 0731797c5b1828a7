"""Vie compiler public API."""

from __future__ import annotations

import logging

from .ast import Program
from .emit import generate
from .errors import CompileError as CompileError, format_error as format_error
from .parse import ParseError as ParseError, parse_tokens
from .prelude import wrap_program
from .tokens import LexicalError as LexicalError, Token, tokenize

logger = logging.getLogger(__name__)

__all__ = [
    "CompileError",
    "LexicalError",
    "ParseError",
    "Program",
    "Token",
    "compile_program",
    "compile_source",
    "format_error",
    "generate",
    "parse",
    "tokenize",
]


def parse(source: str) -> Program:
    """Parse Vie source code into a Program AST."""
    tokens = tokenize(source)
    logger.debug("tokenized %d tokens", len(tokens))
    program = parse_tokens(tokens)
    logger.debug("parsed %d top-level statements", len(program.body))
    return program


def compile_source(source: str) -> str:
    """Compile Vie source to JavaScript, without the prelude or wrapper."""
    code = generate(parse(source))
    logger.debug("generated %d characters of JavaScript", len(code))
    return code


def compile_program(source: str) -> str:
    """Compile Vie source to a complete JavaScript program ready for Node."""
    return wrap_program(compile_source(source))
