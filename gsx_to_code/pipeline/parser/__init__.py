"""
Parser - builds the GSX AST from the lexer's token stream.
"""

from .parser import Parser

__all__ = ["Parser"]
