"""
Token definitions for GSX source files.

Tokens carry their literal text, the offset where they start in the
source and a 1-based line/column pair used for diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kind of a lexical token. The value is the human readable name."""

    # Special tokens
    EOF = "EOF"
    ERROR = "Error"
    NEWLINE = "Newline"

    # Keywords
    PACKAGE = "package"
    IMPORT = "import"
    FUNC = "func"
    RETURN = "return"
    IF = "if"
    ELSE = "else"
    FOR = "for"
    RANGE = "range"

    # DSL directives (@ prefixed)
    AT_COMPONENT = "@component"
    AT_LET = "@let"
    AT_FOR = "@for"
    AT_IF = "@if"
    AT_ELSE = "@else"
    AT_CALL = "@Call"  # @ComponentName

    # Literals
    IDENT = "Ident"
    INT = "Int"
    FLOAT = "Float"
    STRING = "String"
    RAW_STRING = "RawString"
    RUNE = "Rune"

    # Operators and punctuation
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LANGLE = "<"
    RANGLE = ">"
    LBRACKET = "["
    RBRACKET = "]"
    SLASH = "/"
    EQUALS = "="
    COMMA = ","
    DOT = "."
    COLON = ":"
    SEMICOLON = ";"
    COLON_EQUALS = ":="
    AMPERSAND = "&"
    PIPE = "|"
    STAR = "*"
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    UNDERSCORE = "_"
    HASH = "#"
    PERCENT = "%"
    CARET = "^"
    TILDE = "~"

    # Composite tokens
    GO_EXPR = "GoExpr"
    SLASH_ANGLE = "/>"
    LANGLE_SLASH = "</"

    def __str__(self) -> str:
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "package": TokenType.PACKAGE,
    "import": TokenType.IMPORT,
    "func": TokenType.FUNC,
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "range": TokenType.RANGE,
}

DIRECTIVES: dict[str, TokenType] = {
    "component": TokenType.AT_COMPONENT,
    "let": TokenType.AT_LET,
    "for": TokenType.AT_FOR,
    "if": TokenType.AT_IF,
    "else": TokenType.AT_ELSE,
}

# Single characters that always form a token of their own
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ">": TokenType.RANGLE,
    "=": TokenType.EQUALS,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "&": TokenType.AMPERSAND,
    "|": TokenType.PIPE,
    "*": TokenType.STAR,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "!": TokenType.BANG,
    "#": TokenType.HASH,
    "%": TokenType.PERCENT,
    "^": TokenType.CARET,
    "~": TokenType.TILDE,
}


def lookup_ident(ident: str) -> TokenType:
    """Return the keyword token type for ident, or IDENT."""
    return KEYWORDS.get(ident, TokenType.IDENT)


@dataclass(frozen=True)
class Position:
    """A source location used for error reporting."""

    file: str = ""
    line: int = 0
    column: int = 0

    def shifted(self, columns: int) -> Position:
        """Return the same location moved right by the given number of columns."""
        return Position(self.file, self.line, self.column + columns)

    def __str__(self) -> str:
        if not self.file:
            return f"{self.line}:{self.column}"
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """A lexical token with its type, literal value and source position."""

    type: TokenType
    literal: str
    line: int
    column: int
    start_pos: int  # offset in source where the token starts

    def __str__(self) -> str:
        if not self.literal:
            return f"{self.type} at {self.line}:{self.column}"
        lit = self.literal
        if len(lit) > 20:
            lit = lit[:17] + "..."
        return f"{self.type}({lit!r}) at {self.line}:{self.column}"
