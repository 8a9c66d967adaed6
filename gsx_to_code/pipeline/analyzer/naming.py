"""
Synthetic element naming.

The analyzer's state bindings and any code emitter must agree on the
variable name of every element, so both derive it from this one function.
"""

from __future__ import annotations

from ..config import AnalyzerConfig
from ..gsx_ast.nodes import BodyNode, ComponentCall, Element, ForLoop, GoExpr, IfStmt, LetBinding, TextContent
from .ir_nodes import ElementName


def assign_element_names(body: list[BodyNode], config: AnalyzerConfig | None = None) -> list[ElementName]:
    """
    Name every element of a component body in document order.

    An element with a #Ref outside any loop is named after the ref and
    does not advance the counter. Every other element takes the next
    "<prefix>N" name. Text children (GoExpr and TextContent) each take a
    further counter slot unless the element is an inline text tag with
    exactly one child, in which case the text is set on the element itself.
    @let wrappers, loops, conditionals and component calls are transparent.

    Args:
        body: The component body
        config: Analyzer configuration (name prefix, inline text tags)

    Returns:
        One ElementName per element, in document order
    """
    config = config or AnalyzerConfig()
    names: list[ElementName] = []
    counter = 0

    def next_name() -> str:
        nonlocal counter
        name = f"{config.element_name_prefix}{counter}"
        counter += 1
        return name

    def walk(nodes: list[BodyNode], in_loop: bool) -> None:
        for node in nodes:
            if isinstance(node, Element):
                if node.named_ref and not in_loop:
                    entry = ElementName(element=node, name=node.named_ref, in_loop=in_loop, uses_counter=False)
                else:
                    entry = ElementName(element=node, name=next_name(), in_loop=in_loop)
                names.append(entry)

                inline_text = node.tag in config.inline_text_tags and len(node.children) == 1
                if not inline_text:
                    for child in node.children:
                        if isinstance(child, (GoExpr, TextContent)):
                            entry.child_targets.append(next_name())

                walk(node.children, in_loop)
            elif isinstance(node, LetBinding):
                walk(node.element.children, in_loop)
            elif isinstance(node, ForLoop):
                walk(node.body, True)
            elif isinstance(node, IfStmt):
                walk(node.then, in_loop)
                walk(node.else_, in_loop)
            elif isinstance(node, ComponentCall):
                walk(node.children, in_loop)

    walk(body, False)
    return names


def names_by_element(names: list[ElementName]) -> dict[int, ElementName]:
    """Index element names by the identity of their element."""
    return {id(n.element): n for n in names}
