"""
GSX AST - typed tree built by the parser and annotated by the analyzer.
"""

from .nodes import (
    Attribute,
    AttributeValue,
    BodyNode,
    BoolLit,
    ChildrenSlot,
    Comment,
    CommentGroup,
    Component,
    ComponentCall,
    Element,
    File,
    FloatLit,
    ForLoop,
    GoCode,
    GoDecl,
    GoExpr,
    GoFunc,
    IfStmt,
    Import,
    IntLit,
    LetBinding,
    Param,
    RawGoExpr,
    StringLit,
    TextContent,
    child_bodies,
    group_comments,
)

__all__ = [
    "Attribute",
    "AttributeValue",
    "BodyNode",
    "BoolLit",
    "ChildrenSlot",
    "Comment",
    "CommentGroup",
    "Component",
    "ComponentCall",
    "Element",
    "File",
    "FloatLit",
    "ForLoop",
    "GoCode",
    "GoDecl",
    "GoExpr",
    "GoFunc",
    "IfStmt",
    "Import",
    "IntLit",
    "LetBinding",
    "Param",
    "RawGoExpr",
    "StringLit",
    "TextContent",
    "child_bodies",
    "group_comments",
]
