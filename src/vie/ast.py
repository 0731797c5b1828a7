"""Vie AST node definitions.

Nodes are frozen dataclasses built bottom-up by the parser and only read by
the emitter. They carry no source position; tokens are the only positional
channel.
"""

from __future__ import annotations

from dataclasses import dataclass


# ============================================================
# BASES
# ============================================================


@dataclass(frozen=True)
class Node:
    """Base for all nodes."""


@dataclass(frozen=True)
class Stmt(Node):
    """Base for all statements."""


@dataclass(frozen=True)
class Expr(Node):
    """Base for all expressions."""


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Identifier(Expr):
    name: str


@dataclass(frozen=True)
class This(Expr):
    pass


@dataclass(frozen=True)
class NumericLiteral(Expr):
    value: float


@dataclass(frozen=True)
class StringLiteral(Expr):
    """Raw text between the quotes; never unescaped."""

    value: str


@dataclass(frozen=True)
class BooleanLiteral(Expr):
    value: bool


@dataclass(frozen=True)
class NullLiteral(Expr):
    pass


@dataclass(frozen=True)
class ArrayLiteral(Expr):
    elements: tuple[Expr, ...]


@dataclass(frozen=True)
class Binary(Expr):
    """Binary operation; operator is spelled as in the output language."""

    left: Expr
    operator: str
    right: Expr


@dataclass(frozen=True)
class Member(Expr):
    """obj.prop when not computed, obj[prop] when computed."""

    object: Expr
    property: Expr
    computed: bool


@dataclass(frozen=True)
class Assignment(Expr):
    """left = right, where left is an Identifier or a Member."""

    left: Expr
    right: Expr

    def __post_init__(self) -> None:
        if not isinstance(self.left, (Identifier, Member)):
            raise TypeError(
                "assignment target must be Identifier or Member, got "
                + type(self.left).__name__
            )


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    args: tuple[Expr, ...]


@dataclass(frozen=True)
class New(Expr):
    callee: Identifier
    args: tuple[Expr, ...]


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Block(Stmt):
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    expr: Expr


@dataclass(frozen=True)
class VariableDeclaration(Stmt):
    name: str
    value: Expr


@dataclass(frozen=True)
class FunctionDeclaration(Stmt):
    """Top-level function, or a method when nested in a ClassDeclaration."""

    name: Identifier
    params: tuple[Identifier, ...]
    body: Block


@dataclass(frozen=True)
class ClassDeclaration(Stmt):
    name: Identifier
    methods: tuple[FunctionDeclaration, ...]


@dataclass(frozen=True)
class Return(Stmt):
    """Bare return carries a NullLiteral argument."""

    argument: Expr


@dataclass(frozen=True)
class If(Stmt):
    """Else-if chains nest as an If in alternate."""

    test: Expr
    consequent: Stmt
    alternate: Stmt | None


@dataclass(frozen=True)
class While(Stmt):
    test: Expr
    body: Stmt


@dataclass(frozen=True)
class ForEach(Stmt):
    iterator: Identifier
    iterable: Expr
    body: Stmt


# ============================================================
# PROGRAM
# ============================================================


@dataclass(frozen=True)
class Program(Node):
    body: tuple[Stmt, ...]
