"""Recursive descent parser for Vie, one method per grammar production."""

from __future__ import annotations

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
from .errors import ParseError as ParseError
from .tokens import (
    TK_CHO,
    TK_COMMA,
    TK_CON_NEU,
    TK_DOT,
    TK_DUNG,
    TK_EOF,
    TK_EQ_EQ,
    TK_EQUAL,
    TK_GT,
    TK_GTE,
    TK_HAM,
    TK_HOAC,
    TK_IDENT,
    TK_KHI,
    TK_LBRACE,
    TK_LBRACKET,
    TK_LOP,
    TK_LPAREN,
    TK_LT,
    TK_LTE,
    TK_MINUS,
    TK_MOI,
    TK_NEU,
    TK_NGUOC_LAI,
    TK_NOT_EQ,
    TK_NUMBER,
    TK_PLUS,
    TK_RBRACE,
    TK_RBRACKET,
    TK_RONG,
    TK_RPAREN,
    TK_SAI,
    TK_SLASH,
    TK_STAR,
    TK_STRING,
    TK_THIS,
    TK_TRA_VE,
    TK_TRONG,
    TK_VA,
    TK_VOI_MOI,
    Token,
)

# Tokens that open a declaration or statement; recovery stops in front of them.
SYNC_KINDS: set[str] = {
    TK_LOP,
    TK_HAM,
    TK_CHO,
    TK_NEU,
    TK_KHI,
    TK_VOI_MOI,
    TK_TRA_VE,
}


class Parser:
    """Recursive descent parser for Vie."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current().kind == TK_EOF

    def at(self, kind: str) -> bool:
        return not self.at_end() and self.current().kind == kind

    def advance(self) -> Token:
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def match(self, *kinds: str) -> bool:
        for kind in kinds:
            if self.at(kind):
                self.advance()
                return True
        return False

    def expect(self, kind: str, msg: str) -> Token:
        if self.at(kind):
            return self.advance()
        raise self.error(msg)

    def error(self, msg: str) -> ParseError:
        return ParseError(msg, self.current())

    def synchronize(self) -> None:
        """Skip to just past a '}' or to the start of the next statement."""
        self.advance()
        while not self.at_end():
            if self.previous().kind == TK_RBRACE:
                return
            if self.current().kind in SYNC_KINDS:
                return
            self.advance()

    # ── Declarations ─────────────────────────────────────────

    def parse(self) -> Program:
        body: list[Stmt] = []
        while not self.at_end():
            body.append(self.parse_declaration())
        return Program(tuple(body))

    def parse_declaration(self) -> Stmt:
        try:
            if self.match(TK_CHO):
                return self.parse_variable_declaration()
            if self.match(TK_HAM):
                return self.parse_function_declaration("function")
            if self.match(TK_LOP):
                return self.parse_class_declaration()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            raise

    def parse_variable_declaration(self) -> VariableDeclaration:
        name_tok = self.expect(TK_IDENT, "expected variable name after 'cho'")
        self.expect(TK_EQUAL, "expected '=' in variable declaration")
        value = self.parse_expression()
        return VariableDeclaration(name_tok.lexeme, value)

    def parse_function_declaration(self, kind: str) -> FunctionDeclaration:
        name_tok = self.expect(TK_IDENT, "expected " + kind + " name")
        self.expect(TK_LPAREN, "expected '(' after " + kind + " name")
        params: list[Identifier] = []
        if not self.at(TK_RPAREN):
            params.append(self.parse_identifier())
            while self.match(TK_COMMA):
                params.append(self.parse_identifier())
        self.expect(TK_RPAREN, "expected ')' after parameters")
        self.expect(TK_LBRACE, "expected '{' before " + kind + " body")
        body = self.parse_block()
        return FunctionDeclaration(Identifier(name_tok.lexeme), tuple(params), body)

    def parse_class_declaration(self) -> ClassDeclaration:
        name = self.parse_identifier()
        self.expect(TK_LBRACE, "expected '{' after class name")
        methods: list[FunctionDeclaration] = []
        while not self.at(TK_RBRACE) and not self.at_end():
            if not self.match(TK_HAM):
                raise self.error("only 'hàm' methods are allowed in a class body")
            methods.append(self.parse_function_declaration("method"))
        self.expect(TK_RBRACE, "expected '}' after class body")
        return ClassDeclaration(name, tuple(methods))

    # ── Statements ───────────────────────────────────────────

    def parse_statement(self) -> Stmt:
        if self.match(TK_NEU):
            return self.parse_if_statement()
        if self.match(TK_KHI):
            return self.parse_while_statement()
        if self.match(TK_VOI_MOI):
            return self.parse_for_each_statement()
        if self.match(TK_LBRACE):
            return self.parse_block()
        if self.match(TK_TRA_VE):
            return self.parse_return_statement()
        return ExpressionStatement(self.parse_expression())

    def parse_block(self) -> Block:
        """Block = '{' Declaration* '}', with '{' already consumed."""
        stmts: list[Stmt] = []
        while not self.at(TK_RBRACE) and not self.at_end():
            stmts.append(self.parse_declaration())
        self.expect(TK_RBRACE, "expected '}' after block")
        return Block(tuple(stmts))

    def parse_if_statement(self) -> If:
        self.expect(TK_LPAREN, "expected '(' after 'nếu'")
        test = self.parse_expression()
        self.expect(TK_RPAREN, "expected ')' after condition")
        consequent = self.parse_statement()
        alternate: Stmt | None = None
        if self.match(TK_NGUOC_LAI):
            if self.match(TK_NEU):
                alternate = self.parse_if_statement()
            else:
                alternate = self.parse_statement()
        elif self.match(TK_CON_NEU):
            alternate = self.parse_if_statement()
        return If(test, consequent, alternate)

    def parse_while_statement(self) -> While:
        self.expect(TK_LPAREN, "expected '(' after 'khi'")
        test = self.parse_expression()
        self.expect(TK_RPAREN, "expected ')' after condition")
        body = self.parse_statement()
        return While(test, body)

    def parse_for_each_statement(self) -> ForEach:
        self.expect(TK_LPAREN, "expected '(' after 'với_mỗi'")
        iterator = self.parse_identifier()
        self.expect(TK_TRONG, "expected 'trong' in loop header")
        iterable = self.parse_expression()
        self.expect(TK_RPAREN, "expected ')' after loop header")
        body = self.parse_statement()
        return ForEach(iterator, iterable, body)

    def parse_return_statement(self) -> Return:
        if self.at(TK_RBRACE) or self.at_end():
            return Return(NullLiteral())
        return Return(self.parse_expression())

    # ── Expressions ──────────────────────────────────────────

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        """Assignment = Or ( '=' Assignment )?"""
        expr = self.parse_or()
        if self.at(TK_EQUAL):
            target_tok = self.previous()
            self.advance()
            value = self.parse_assignment()
            if isinstance(expr, (Identifier, Member)):
                return Assignment(expr, value)
            raise ParseError("invalid assignment target", target_tok)
        return expr

    def parse_or(self) -> Expr:
        """Or = And ( 'hoặc' And )*"""
        left = self.parse_and()
        while self.match(TK_HOAC):
            right = self.parse_and()
            left = Binary(left, "||", right)
        return left

    def parse_and(self) -> Expr:
        """And = Equality ( 'và' Equality )*"""
        left = self.parse_equality()
        while self.match(TK_VA):
            right = self.parse_equality()
            left = Binary(left, "&&", right)
        return left

    def parse_equality(self) -> Expr:
        """Equality = Comparison ( ( '==' | '!=' ) Comparison )*"""
        left = self.parse_comparison()
        while self.match(TK_EQ_EQ, TK_NOT_EQ):
            op = self.previous().lexeme
            right = self.parse_comparison()
            left = Binary(left, op, right)
        return left

    def parse_comparison(self) -> Expr:
        """Comparison = Term ( ( '>' | '>=' | '<' | '<=' ) Term )*"""
        left = self.parse_term()
        while self.match(TK_GT, TK_GTE, TK_LT, TK_LTE):
            op = self.previous().lexeme
            right = self.parse_term()
            left = Binary(left, op, right)
        return left

    def parse_term(self) -> Expr:
        """Term = Factor ( ( '+' | '-' ) Factor )*"""
        left = self.parse_factor()
        while self.match(TK_PLUS, TK_MINUS):
            op = self.previous().lexeme
            right = self.parse_factor()
            left = Binary(left, op, right)
        return left

    def parse_factor(self) -> Expr:
        """Factor = Unary ( ( '*' | '/' ) Unary )*"""
        left = self.parse_unary()
        while self.match(TK_STAR, TK_SLASH):
            op = self.previous().lexeme
            right = self.parse_unary()
            left = Binary(left, op, right)
        return left

    def parse_unary(self) -> Expr:
        """Unary = '-' Unary | Postfix; negation lowers to 0 - operand."""
        if self.match(TK_MINUS):
            operand = self.parse_unary()
            return Binary(NumericLiteral(0.0), "-", operand)
        return self.parse_postfix()

    def parse_postfix(self) -> Expr:
        """Postfix = Primary ( '(' Args ')' | '[' Expr ']' | '.' Ident )*"""
        expr = self.parse_primary()
        while True:
            if self.match(TK_LPAREN):
                expr = Call(expr, self.parse_arguments())
            elif self.match(TK_LBRACKET):
                index = self.parse_expression()
                self.expect(TK_RBRACKET, "expected ']' after index")
                expr = Member(expr, index, True)
            elif self.match(TK_DOT):
                expr = Member(expr, self.parse_identifier(), False)
            else:
                break
        return expr

    def parse_arguments(self) -> tuple[Expr, ...]:
        """Args = ( Expr ( ',' Expr )* )? ')', with '(' already consumed."""
        args: list[Expr] = []
        if not self.at(TK_RPAREN):
            args.append(self.parse_expression())
            while self.match(TK_COMMA):
                args.append(self.parse_expression())
        self.expect(TK_RPAREN, "expected ')' after arguments")
        return tuple(args)

    def parse_primary(self) -> Expr:
        if self.match(TK_SAI):
            return BooleanLiteral(False)
        if self.match(TK_DUNG):
            return BooleanLiteral(True)
        if self.match(TK_RONG):
            return NullLiteral()
        if self.match(TK_NUMBER):
            return NumericLiteral(float(self.previous().lexeme))
        if self.match(TK_STRING):
            return StringLiteral(self.previous().lexeme)
        if self.match(TK_THIS):
            return This()
        if self.match(TK_IDENT):
            return Identifier(self.previous().lexeme)
        if self.match(TK_LBRACKET):
            elements: list[Expr] = []
            if not self.at(TK_RBRACKET):
                elements.append(self.parse_expression())
                while self.match(TK_COMMA):
                    elements.append(self.parse_expression())
            self.expect(TK_RBRACKET, "expected ']' after array elements")
            return ArrayLiteral(tuple(elements))
        if self.match(TK_MOI):
            callee = self.parse_identifier()
            self.expect(TK_LPAREN, "expected '(' after class name in 'mới'")
            return New(callee, self.parse_arguments())
        if self.match(TK_LPAREN):
            expr = self.parse_expression()
            self.expect(TK_RPAREN, "expected ')' after expression")
            return expr
        if self.at_end():
            raise self.error("expected expression, got end of input")
        raise self.error("expected expression, got '" + self.current().lexeme + "'")

    def parse_identifier(self) -> Identifier:
        tok = self.expect(TK_IDENT, "expected identifier")
        return Identifier(tok.lexeme)


def parse_tokens(tokens: list[Token]) -> Program:
    """Parse a token list ending with TK_EOF into a Program."""
    return Parser(tokens).parse()
