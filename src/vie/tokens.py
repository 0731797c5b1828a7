"""Vie tokenizer. Lexes source into a flat token list."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import LexicalError as LexicalError


# Keyword kinds
TK_CHO = "CHO"
TK_HAM = "HAM"
TK_LOP = "LOP"
TK_MOI = "MOI"
TK_NEU = "NEU"
TK_CON_NEU = "CON_NEU"
TK_NGUOC_LAI = "NGUOC_LAI"
TK_KHI = "KHI"
TK_VOI_MOI = "VOI_MOI"
TK_TRONG = "TRONG"
TK_TRA_VE = "TRA_VE"
TK_DUNG = "DUNG"
TK_SAI = "SAI"
TK_RONG = "RONG"
TK_VA = "VA"
TK_HOAC = "HOAC"
TK_THIS = "THIS"

# Punctuation and operator kinds
TK_LPAREN = "LPAREN"
TK_RPAREN = "RPAREN"
TK_LBRACE = "LBRACE"
TK_RBRACE = "RBRACE"
TK_LBRACKET = "LBRACKET"
TK_RBRACKET = "RBRACKET"
TK_COMMA = "COMMA"
TK_DOT = "DOT"
TK_PLUS = "PLUS"
TK_MINUS = "MINUS"
TK_STAR = "STAR"
TK_SLASH = "SLASH"
TK_EQUAL = "EQUAL"
TK_EQ_EQ = "EQ_EQ"
TK_NOT_EQ = "NOT_EQ"
TK_LT = "LT"
TK_LTE = "LTE"
TK_GT = "GT"
TK_GTE = "GTE"

# Literal kinds
TK_IDENT = "IDENT"
TK_NUMBER = "NUMBER"
TK_STRING = "STRING"
TK_EOF = "EOF"

KEYWORDS: dict[str, str] = {
    "cho": TK_CHO,
    "hàm": TK_HAM,
    "lớp": TK_LOP,
    "mới": TK_MOI,
    "nếu": TK_NEU,
    "còn_nếu": TK_CON_NEU,
    "ngược_lại": TK_NGUOC_LAI,
    "khi": TK_KHI,
    "với_mỗi": TK_VOI_MOI,
    "trong": TK_TRONG,
    "trả_về": TK_TRA_VE,
    "đúng": TK_DUNG,
    "sai": TK_SAI,
    "rỗng": TK_RONG,
    "và": TK_VA,
    "hoặc": TK_HOAC,
    "this": TK_THIS,
}

SINGLE_OPS: dict[str, str] = {
    "(": TK_LPAREN,
    ")": TK_RPAREN,
    "{": TK_LBRACE,
    "}": TK_RBRACE,
    "[": TK_LBRACKET,
    "]": TK_RBRACKET,
    ",": TK_COMMA,
    ".": TK_DOT,
    "+": TK_PLUS,
    "-": TK_MINUS,
    "*": TK_STAR,
    "/": TK_SLASH,
}

# First char -> (kind with '=' following, kind without). A lone '!' lexes as
# an identifier-kind token; there is no logical-not operator.
COMPOUND_OPS: dict[str, tuple[str, str]] = {
    "=": (TK_EQ_EQ, TK_EQUAL),
    "!": (TK_NOT_EQ, TK_IDENT),
    "<": (TK_LTE, TK_LT),
    ">": (TK_GTE, TK_GT),
}

ACCENTED_LETTERS: frozenset[str] = frozenset(
    "àáâãèéêìíòóôõùúăđĩũơư"
    "ạảấầẩẫậắằẳẵặẹẻẽếềểễệỉịọỏốồổỗộớờởỡợụủứừửữựỳỵỷỹ"
)


@dataclass(frozen=True)
class Token:
    """A token with kind, source text, and the line it starts on."""

    kind: str
    lexeme: str
    line: int


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (
        (c >= "a" and c <= "z")
        or (c >= "A" and c <= "Z")
        or c == "_"
        or c in ACCENTED_LETTERS
    )


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


def tokenize(source: str) -> list[Token]:
    """Tokenize Vie source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        if c == "\n":
            pos += 1
            line += 1
            continue

        if c == " " or c == "\t" or c == "\r":
            pos += 1
            continue

        # Line comment: #
        if c == "#":
            while pos < length and source[pos] != "\n":
                pos += 1
            continue

        start_pos = pos
        start_line = line

        if c in SINGLE_OPS:
            tokens.append(Token(SINGLE_OPS[c], c, start_line))
            pos += 1
            continue

        if c in COMPOUND_OPS:
            with_eq, without_eq = COMPOUND_OPS[c]
            if pos + 1 < length and source[pos + 1] == "=":
                tokens.append(Token(with_eq, c + "=", start_line))
                pos += 2
            else:
                tokens.append(Token(without_eq, c, start_line))
                pos += 1
            continue

        # String literal, closed by the same quote; no escapes
        if c == '"' or c == "'":
            pos += 1
            while pos < length and source[pos] != c:
                if source[pos] == "\n":
                    line += 1
                pos += 1
            if pos >= length:
                raise LexicalError("unterminated string literal", start_line)
            value = source[start_pos + 1 : pos]
            pos += 1  # skip closing quote
            tokens.append(Token(TK_STRING, value, start_line))
            continue

        # Number: digits only
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
            tokens.append(Token(TK_NUMBER, source[start_pos:pos], start_line))
            continue

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_alnum(source[pos]):
                pos += 1
            word = source[start_pos:pos]
            tokens.append(Token(KEYWORDS.get(word, TK_IDENT), word, start_line))
            continue

        raise LexicalError("unexpected character: " + repr(c), line)

    tokens.append(Token(TK_EOF, "", line))
    return tokens
