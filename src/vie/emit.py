"""Vie emitter. Converts a parsed Program into JavaScript source.

Total over the AST in `vie/ast.py`: a node type the emitter does not know is
an internal error and raises TypeError.
"""

from __future__ import annotations

import math

from .ast import (
    ArrayLiteral,
    Assignment,
    Binary,
    Block,
    BooleanLiteral,
    Call,
    ClassDeclaration,
    Expr,
    ExpressionStatement,
    ForEach,
    FunctionDeclaration,
    Identifier,
    If,
    Member,
    New,
    NullLiteral,
    NumericLiteral,
    Program,
    Return,
    Stmt,
    StringLiteral,
    This,
    VariableDeclaration,
    While,
)

INDENT: str = "  "

# Method name that marks an object initializer in Vie source.
CONSTRUCTOR_NAME: str = "khởi_tạo"

# Calls to these bare identifiers are routed to JavaScript primitives.
BUILTINS: dict[str, str] = {
    "in": "console.log",
}


def generate(program: Program) -> str:
    """Render a `Program` as JavaScript source text."""
    return _Emitter().emit_program(program)


def format_number(value: float) -> str:
    """Format a number the way JavaScript's Number#toString does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        if mantissa.endswith(".0"):
            mantissa = mantissa[:-2]
        sign = "-" if exponent.startswith("-") else "+"
        exponent = sign + exponent.lstrip("+-").lstrip("0")
        text = mantissa + "e" + exponent
    return text


def quote_string(value: str) -> str:
    """Double-quote a string, escaping only embedded double quotes."""
    return '"' + value.replace('"', '\\"') + '"'


class _Emitter:
    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent_level: int = 0

    # ── Public ──────────────────────────────────────────────

    def emit_program(self, program: Program) -> str:
        self._lines = []
        self._indent_level = 0
        for stmt in program.body:
            self._emit_stmt(stmt)
        return "\n".join(self._lines)

    # ── Lines / Blocks ──────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(INDENT * self._indent_level + line)

    def _emit_stmt_block(self, stmts: tuple[Stmt, ...]) -> None:
        self._indent_level += 1
        for stmt in stmts:
            self._emit_stmt(stmt)
        self._indent_level -= 1

    def _render_stmt(self, stmt: Stmt) -> list[str]:
        """Emit a statement at the current level and return its lines."""
        saved = self._lines
        self._lines = []
        self._emit_stmt(stmt)
        rendered = self._lines
        self._lines = saved
        return rendered

    def _emit_body(self, header: str, body: Stmt) -> None:
        """Emit `header` followed by a braced Block or an inline statement."""
        if isinstance(body, Block):
            self._emit_line(header + " {")
            self._emit_stmt_block(body.body)
            self._emit_line("}")
            return
        rendered = self._render_stmt(body)
        self._emit_line(header + " " + rendered[0].lstrip(" "))
        self._lines.extend(rendered[1:])

    # ── Stmts ───────────────────────────────────────────────

    def _emit_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, ExpressionStatement):
            self._emit_line(self._render_expr(stmt.expr) + ";")
            return
        if isinstance(stmt, VariableDeclaration):
            self._emit_line(
                "let " + stmt.name + " = " + self._render_expr(stmt.value) + ";"
            )
            return
        if isinstance(stmt, Return):
            self._emit_line("return " + self._render_expr(stmt.argument) + ";")
            return
        if isinstance(stmt, Block):
            self._emit_line("{")
            self._emit_stmt_block(stmt.body)
            self._emit_line("}")
            return
        if isinstance(stmt, FunctionDeclaration):
            self._emit_function("function " + stmt.name.name, stmt)
            return
        if isinstance(stmt, ClassDeclaration):
            self._emit_class(stmt)
            return
        if isinstance(stmt, If):
            self._emit_if(stmt)
            return
        if isinstance(stmt, While):
            self._emit_body("while (" + self._render_expr(stmt.test) + ")", stmt.body)
            return
        if isinstance(stmt, ForEach):
            header = (
                "for (const "
                + stmt.iterator.name
                + " of "
                + self._render_expr(stmt.iterable)
                + ")"
            )
            self._emit_body(header, stmt.body)
            return
        raise TypeError("unhandled stmt type: " + type(stmt).__name__)

    def _emit_function(self, head: str, decl: FunctionDeclaration) -> None:
        params = ", ".join(p.name for p in decl.params)
        self._emit_body(head + "(" + params + ")", decl.body)

    def _emit_class(self, decl: ClassDeclaration) -> None:
        self._emit_line("class " + decl.name.name + " {")
        self._indent_level += 1
        for method in decl.methods:
            name = method.name.name
            if name == CONSTRUCTOR_NAME:
                name = "constructor"
            self._emit_function(name, method)
        self._indent_level -= 1
        self._emit_line("}")

    def _emit_if(self, stmt: If) -> None:
        self._emit_body("if (" + self._render_expr(stmt.test) + ")", stmt.consequent)
        if stmt.alternate is None:
            return
        # `else` continues the last line of the consequent: `} else ...`
        tail = self._lines.pop().lstrip(" ")
        self._emit_body(tail + " else", stmt.alternate)

    # ── Exprs ───────────────────────────────────────────────

    def _render_args(self, args: tuple[Expr, ...]) -> str:
        return ", ".join(self._render_expr(a) for a in args)

    def _render_expr(self, expr: Expr) -> str:
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, This):
            return "this"
        if isinstance(expr, NumericLiteral):
            return format_number(expr.value)
        if isinstance(expr, StringLiteral):
            return quote_string(expr.value)
        if isinstance(expr, BooleanLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, NullLiteral):
            return "null"
        if isinstance(expr, ArrayLiteral):
            return "[" + self._render_args(expr.elements) + "]"
        if isinstance(expr, Assignment):
            return (
                "(" + self._render_expr(expr.left) + " = " + self._render_expr(expr.right) + ")"
            )
        if isinstance(expr, Binary):
            return (
                "("
                + self._render_expr(expr.left)
                + " "
                + expr.operator
                + " "
                + self._render_expr(expr.right)
                + ")"
            )
        if isinstance(expr, Call):
            args = self._render_args(expr.args)
            if isinstance(expr.callee, Identifier) and expr.callee.name in BUILTINS:
                return BUILTINS[expr.callee.name] + "(" + args + ")"
            return self._render_expr(expr.callee) + "(" + args + ")"
        if isinstance(expr, Member):
            obj = self._render_expr(expr.object)
            if expr.computed:
                return obj + "[" + self._render_expr(expr.property) + "]"
            return obj + "." + self._render_expr(expr.property)
        if isinstance(expr, New):
            return "new " + expr.callee.name + "(" + self._render_args(expr.args) + ")"
        raise TypeError("unhandled expr type: " + type(expr).__name__)
