"""Vie compile errors and their source-excerpt formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokens import Token


class CompileError(Exception):
    """Base for errors reported to the user as a failed compilation."""

    def __init__(self, msg: str, line: int):
        self.msg: str = msg
        self.line: int = line
        super().__init__(msg + " at line " + str(line))


class LexicalError(CompileError):
    """Unterminated string or unknown character; carries only a line."""


class ParseError(CompileError):
    """Syntax error anchored on the offending token."""

    def __init__(self, msg: str, token: Token):
        self.token: Token = token
        super().__init__(msg, token.line)


def _underline_target(token: Token) -> str:
    if token.lexeme == "{" or token.lexeme == "}":
        return token.lexeme
    return token.lexeme.strip()


def format_error(error: CompileError, source: str) -> str:
    """Render an error for the terminal.

    Parse errors show the offending source line with a caret underline
    beneath the first occurrence of the token's text. When the line does not
    exist or the text is not found on it, the underline starts at column 0.
    """
    if not isinstance(error, ParseError):
        return "line " + str(error.line) + ": " + error.msg
    lines = source.split("\n")
    idx = error.line - 1
    error_line = lines[idx] if 0 <= idx < len(lines) else ""
    target = _underline_target(error.token)
    column = error_line.find(target)
    if column < 0:
        column = 0
    pointer = " " * column + "^" * len(target)
    return (
        "\n--- Compile error ---\n"
        + error.msg
        + "\n\nAt line "
        + str(error.line)
        + ":\n  "
        + error_line
        + "\n  "
        + pointer
        + "\n---------------------\n"
    )
