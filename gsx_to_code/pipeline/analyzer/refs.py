"""
Named element references (#Name).

Validates ref names and classifies each ref by where it appears: a plain
ref is a single element, a ref inside @for becomes a slice, and a ref
inside @for with key={expr} becomes a map.
"""

from __future__ import annotations

from ...utils import is_valid_ref_name
from ..gsx_ast.nodes import BodyNode, Component, ComponentCall, Element, ForLoop, IfStmt, LetBinding
from .context import AnalysisContext
from .ir_nodes import NamedRef, RefKind

# Reserved for the component's root element
RESERVED_REF_NAMES = ("Root",)


def infer_key_type(key_expr: str) -> str:
    """Guess the Go map key type from a key expression."""
    if key_expr.endswith(".ID") or key_expr.endswith(".Id"):
        return "string"
    if "int" in key_expr or "Int" in key_expr:
        return "int"
    return "string"


def collect_named_refs(comp: Component, ctx: AnalysisContext) -> list[NamedRef]:
    """
    Validate and collect every named ref of a component.

    Args:
        comp: The component to scan
        ctx: Analysis context receiving diagnostics

    Returns:
        The valid refs, in document order
    """
    refs: list[NamedRef] = []
    seen: dict[str, Element] = {}

    def check(elem: Element, in_loop: bool, in_conditional: bool) -> None:
        name = elem.named_ref
        if not is_valid_ref_name(name):
            ctx.diagnostics.add_error(
                elem.position,
                f'invalid ref name "{name}" - must be valid Go identifier starting with uppercase letter',
            )
            return
        if name in RESERVED_REF_NAMES:
            ctx.diagnostics.add_error(elem.position, f"ref name '{name}' is reserved")
            return
        if name in seen:
            ctx.diagnostics.add_error(
                elem.position, f'duplicate ref name "{name}" (first defined at {seen[name].position})'
            )
            return
        if elem.ref_key is not None and not in_loop:
            ctx.diagnostics.add_error(elem.position, f'key attribute on ref "{name}" only valid inside @for loop')
            return

        seen[name] = elem
        ref = NamedRef(name=name, element=elem, in_loop=in_loop, in_conditional=in_conditional)
        if in_loop:
            ref.kind = RefKind.LIST
            if elem.ref_key is not None:
                ref.kind = RefKind.MAP
                ref.key_expr = elem.ref_key.code
                ref.key_type = infer_key_type(ref.key_expr)
        refs.append(ref)

    def walk(nodes: list[BodyNode], in_loop: bool, in_conditional: bool) -> None:
        for node in nodes:
            if isinstance(node, Element):
                if node.named_ref:
                    check(node, in_loop, in_conditional)
                walk(node.children, in_loop, in_conditional)
            elif isinstance(node, LetBinding):
                walk(node.element.children, in_loop, in_conditional)
            elif isinstance(node, ForLoop):
                walk(node.body, True, in_conditional)
            elif isinstance(node, IfStmt):
                walk(node.then, in_loop, True)
                walk(node.else_, in_loop, True)
            elif isinstance(node, ComponentCall):
                walk(node.children, in_loop, in_conditional)

    walk(comp.body, False, False)
    return refs
