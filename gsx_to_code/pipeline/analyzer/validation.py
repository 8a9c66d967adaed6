"""
Element, attribute and utility-class validation.

Also records which runtime packages (layout, tui) the component's Go code
refers to, so the analyzer can add the missing imports.
"""

from __future__ import annotations

from ..classes.translator import classes_with_positions, needs_imports
from ..errors import Diagnostic
from ..gsx_ast.nodes import (
    Attribute,
    BodyNode,
    Component,
    ComponentCall,
    Element,
    ForLoop,
    GoCode,
    GoExpr,
    IfStmt,
    LetBinding,
    StringLit,
)
from .context import AnalysisContext


def validate_component(comp: Component, ctx: AnalysisContext) -> None:
    """Validate every element of a component body."""
    # Every component builds element trees
    ctx.uses_element = True
    validate_body(comp.body, ctx)


def validate_body(nodes: list[BodyNode], ctx: AnalysisContext) -> None:
    for node in nodes:
        if isinstance(node, Element):
            validate_element(node, ctx)
        elif isinstance(node, LetBinding):
            validate_element(node.element, ctx)
        elif isinstance(node, ForLoop):
            ctx.note_go_code(node.iterable)
            validate_body(node.body, ctx)
        elif isinstance(node, IfStmt):
            ctx.note_go_code(node.condition)
            validate_body(node.then, ctx)
            validate_body(node.else_, ctx)
        elif isinstance(node, ComponentCall):
            validate_component_call(node, ctx)
        elif isinstance(node, (GoExpr, GoCode)):
            ctx.note_go_code(node.code)


def validate_element(elem: Element, ctx: AnalysisContext) -> None:
    config = ctx.config
    if not config.is_known_tag(elem.tag):
        ctx.diagnostics.add_error(elem.position, f"unknown element tag <{elem.tag}>")

    if config.is_void_tag(elem.tag) and elem.children:
        ctx.diagnostics.add_error(elem.position, f"<{elem.tag}> is a void element and cannot have children")

    for attr in elem.attributes:
        validate_attribute(attr, ctx)

    validate_body(elem.children, ctx)


def validate_attribute(attr: Attribute, ctx: AnalysisContext) -> None:
    config = ctx.config
    if not config.is_known_attribute(attr.name):
        hint = ""
        suggestion = config.suggest_attribute(attr.name)
        if suggestion:
            hint = f"did you mean {suggestion}?"
        ctx.diagnostics.add_error(attr.position, f"unknown attribute {attr.name}", hint)
        return

    if attr.name == "class":
        if isinstance(attr.value, StringLit):
            validate_class_list(attr, attr.value.value, ctx)
        elif isinstance(attr.value, GoExpr):
            ctx.note_go_code(attr.value.code)
        return

    if isinstance(attr.value, GoExpr):
        ctx.note_go_code(attr.value.code)


def validate_class_list(attr: Attribute, classes: str, ctx: AnalysisContext) -> None:
    """Validate a literal class="..." value, reporting each unknown class with its exact span."""
    # Class options only ever need the tui package
    if "tui" in needs_imports(classes):
        ctx.uses_tui = True

    if not ctx.config.validate_classes:
        return

    start = attr.value_position
    for cls in classes_with_positions(classes):
        if cls.valid:
            continue
        hint = ""
        if cls.suggestion:
            hint = f'did you mean "{cls.suggestion}"?'
        ctx.diagnostics.add(
            Diagnostic(
                position=start.shifted(cls.start_col),
                end_position=start.shifted(cls.end_col),
                message=f'unknown Tailwind class "{cls.cls}"',
                hint=hint,
            )
        )


def validate_component_call(call: ComponentCall, ctx: AnalysisContext) -> None:
    accepts_children = ctx.component_defs.get(call.name)
    # Components from other files are not checked
    if call.children and accepts_children is False:
        ctx.diagnostics.add_error(
            call.position,
            f"component {call.name} does not accept children (no {{children...}} slot in definition)",
        )
    ctx.note_go_code(call.args)
    validate_body(call.children, ctx)
