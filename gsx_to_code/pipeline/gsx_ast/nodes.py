"""
AST (Abstract Syntax Tree) node definitions for GSX source files.

These nodes represent the parsed structure of a .gsx file before any
semantic analysis. Embedded Go code is kept as raw source text.

The set of body nodes is closed (see BodyNode); every tree walker
dispatches on it with isinstance. Positions are carried for diagnostics
only and never take part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..lexer.tokens import Position


@dataclass
class Comment:
    """A single // or /* */ comment."""

    text: str = ""  # raw text including the comment markers
    position: Position = field(default_factory=Position, compare=False)
    end_line: int = 0
    end_col: int = 0
    is_block: bool = False
    blank_line_before: bool = False

    # Offset in source where the comment starts
    offset: int = field(default=0, compare=False)

    def stripped(self) -> str:
        """Return the comment body without its markers."""
        if self.is_block:
            text = self.text.removeprefix("/*").removesuffix("*/")
        else:
            text = self.text.removeprefix("//")
        return text.strip()


@dataclass
class CommentGroup:
    """Adjacent comments with no blank line between them."""

    comments: list[Comment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(c.stripped() for c in self.comments)


def group_comments(comments: list[Comment]) -> list[CommentGroup]:
    """Split comments into groups, starting a new group after each blank line."""
    groups: list[CommentGroup] = []
    current: list[Comment] = []
    for c in comments:
        if current and c.position.line > current[-1].end_line + 1:
            groups.append(CommentGroup(current))
            current = []
        current.append(c)
    if current:
        groups.append(CommentGroup(current))
    return groups


# Attribute values


@dataclass
class StringLit:
    value: str = ""
    position: Position = field(default_factory=Position, compare=False)


@dataclass
class IntLit:
    value: int = 0
    position: Position = field(default_factory=Position, compare=False)


@dataclass
class FloatLit:
    value: float = 0.0
    position: Position = field(default_factory=Position, compare=False)


@dataclass
class BoolLit:
    value: bool = False
    position: Position = field(default_factory=Position, compare=False)


# Embedded Go


@dataclass
class GoExpr:
    """A Go expression in braces, evaluated on every render."""

    code: str = ""
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None


@dataclass
class RawGoExpr:
    """A direct reference to a value bound earlier with @let."""

    code: str = ""
    position: Position = field(default_factory=Position, compare=False)


@dataclass
class GoCode:
    """A raw Go statement inside a component body."""

    code: str = ""
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None


@dataclass
class GoFunc:
    """A top-level Go function passed through unchanged."""

    code: str = ""
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None


@dataclass
class GoDecl:
    """A top-level type, const or var declaration passed through unchanged."""

    kind: str = ""  # "type", "const" or "var"
    code: str = ""
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None


# Markup


@dataclass
class Attribute:
    """An element attribute: name=value, name={expr} or a bare boolean name."""

    name: str = ""
    value: AttributeValue | None = None
    position: Position = field(default_factory=Position, compare=False)

    # Where the value text starts; for string literals this is inside the quote
    value_position: Position = field(default_factory=Position, compare=False)


@dataclass
class TextContent:
    text: str = ""
    position: Position = field(default_factory=Position, compare=False)


@dataclass
class ChildrenSlot:
    """The {children...} placeholder for children forwarded by the caller."""

    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None


@dataclass
class Element:
    """An XML-like element such as <div class="flex">...</div>."""

    tag: str = ""
    attributes: list[Attribute] = field(default_factory=list)
    children: list[BodyNode] = field(default_factory=list)
    self_close: bool = False
    named_ref: str = ""  # from <tag #Name>
    ref_key: GoExpr | None = None  # from key={expr}
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None
    trailing_comments: CommentGroup | None = None
    orphan_comments: list[CommentGroup] = field(default_factory=list)

    def get_attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass
class LetBinding:
    """@let name = <element>"""

    name: str = ""
    element: Element = field(default_factory=Element)
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None


@dataclass
class ForLoop:
    """@for [index,] value := range iterable { body }"""

    index: str = ""
    value: str = ""
    iterable: str = ""
    body: list[BodyNode] = field(default_factory=list)
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None
    trailing_comments: CommentGroup | None = None
    orphan_comments: list[CommentGroup] = field(default_factory=list)


@dataclass
class IfStmt:
    """@if condition { then } @else { else_ }

    An @else @if chain is stored as a single nested IfStmt in else_.
    """

    condition: str = ""
    then: list[BodyNode] = field(default_factory=list)
    else_: list[BodyNode] = field(default_factory=list)
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None
    trailing_comments: CommentGroup | None = None
    orphan_comments: list[CommentGroup] = field(default_factory=list)


@dataclass
class ComponentCall:
    """@Name(args) with an optional { children } block."""

    name: str = ""
    args: str = ""
    children: list[BodyNode] = field(default_factory=list)
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None
    orphan_comments: list[CommentGroup] = field(default_factory=list)


# Declarations


@dataclass
class Param:
    name: str = ""
    type: str = ""  # raw Go type text
    position: Position = field(default_factory=Position, compare=False)


@dataclass
class Component:
    """A component definition: @component Name(params) { body }"""

    name: str = ""
    params: list[Param] = field(default_factory=list)
    body: list[BodyNode] = field(default_factory=list)
    accepts_children: bool = False
    return_type: str = "*element.Element"
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None
    trailing_comments: CommentGroup | None = None
    orphan_comments: list[CommentGroup] = field(default_factory=list)


@dataclass
class Import:
    alias: str = ""
    path: str = ""
    position: Position = field(default_factory=Position, compare=False)
    trailing_comments: CommentGroup | None = None


@dataclass
class File:
    """A complete .gsx source file."""

    package: str = ""
    imports: list[Import] = field(default_factory=list)
    decls: list[GoDecl] = field(default_factory=list)
    components: list[Component] = field(default_factory=list)
    funcs: list[GoFunc] = field(default_factory=list)
    position: Position = field(default_factory=Position, compare=False)
    leading_comments: CommentGroup | None = None
    orphan_comments: list[CommentGroup] = field(default_factory=list)

    def has_import(self, path: str) -> bool:
        return any(imp.path == path for imp in self.imports)


AttributeValue = StringLit | IntLit | FloatLit | BoolLit | GoExpr

BodyNode = Element | LetBinding | ForLoop | IfStmt | ComponentCall | ChildrenSlot | GoExpr | RawGoExpr | TextContent | GoCode


def child_bodies(node: BodyNode) -> list[list[BodyNode]]:
    """Return the nested bodies of a node, in source order."""
    if isinstance(node, Element):
        return [node.children]
    if isinstance(node, LetBinding):
        return [node.element.children]
    if isinstance(node, ForLoop):
        return [node.body]
    if isinstance(node, IfStmt):
        return [node.then, node.else_]
    if isinstance(node, ComponentCall):
        return [node.children]
    return []
