"""
Lexer - turns GSX source text into a stream of positioned tokens.
"""

from .tokens import KEYWORDS, Position, Token, TokenType, lookup_ident

__all__ = [
    "KEYWORDS",
    "Position",
    "Token",
    "TokenType",
    "lookup_ident",
]
