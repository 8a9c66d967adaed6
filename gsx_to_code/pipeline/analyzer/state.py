"""
Reactive state detection.

Finds state variables (local `x := tui.NewState(init)` declarations and
`*tui.State[T]` parameters) and the element properties that read them,
either through `x.Get()` calls or an explicit deps={[x, y]} attribute.
"""

from __future__ import annotations

import logging
import re

from ..gsx_ast.nodes import (
    BodyNode,
    Component,
    ComponentCall,
    Element,
    ForLoop,
    GoCode,
    GoExpr,
    IfStmt,
    LetBinding,
    TextContent,
)
from .context import AnalysisContext
from .ir_nodes import StateBinding, StateVar
from .naming import assign_element_names, names_by_element

logger = logging.getLogger(__name__)

# Ordered: the first matching shape wins
_TYPE_SHAPES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"^-?\d+$", re.ASCII), "int"),
    (re.compile(r"^-?\d+\.\d+$", re.ASCII), "float64"),
    (re.compile(r"^(true|false)$"), "bool"),
    (re.compile(r'^".*"$|^`.*`$', re.DOTALL), "string"),
    (re.compile(r"^nil$"), "any"),
    (re.compile(r"^\[\](\w+(?:\.\w+)?)\{", re.ASCII), "[]{0}"),
    (re.compile(r"^map\[(\w+)\](\w+(?:\.\w+)?)\{", re.ASCII), "map[{0}]{1}"),
    (re.compile(r"^&(\w+(?:\.\w+)?)\{", re.ASCII), "*{0}"),
    (re.compile(r"^(\w+(?:\.\w+)?)\{", re.ASCII), "{0}"),
]

DEPS_EXPRESSION_ERROR = "deps attribute must use expression syntax: deps={[state1, state2]}"
DEPS_ARRAY_ERROR = "deps attribute must be an array literal: deps={[state1, state2]}"


def infer_type(expr: str) -> str:
    """
    Infer the Go type of a state initializer from its shape.

    Examples:
        "0" -> "int"
        "[]string{}" -> "[]string"
        "&Model{}" -> "*Model"
        "load()" -> "any"
    """
    expr = expr.strip()
    for pattern, template in _TYPE_SHAPES:
        m = pattern.match(expr)
        if m is not None:
            # Only the composite literal shapes have groups to substitute
            return template.format(*m.groups()) if "{0}" in template else template
    return "any"


def _declaration_pattern(constructor: str) -> re.Pattern:
    return re.compile(rf"(\w+)\s*:=\s*{re.escape(constructor)}\((.+)\)", re.ASCII)


def _parameter_pattern(state_type: str) -> re.Pattern:
    return re.compile(rf"\*{re.escape(state_type)}\[(.+)\]$")


def _accessor_pattern(accessor: str) -> re.Pattern:
    return re.compile(rf"(?:\(\*(\w+)\)|(\w+))\.{re.escape(accessor)}\(\)", re.ASCII)


def detect_state_vars(comp: Component, ctx: AnalysisContext) -> list[StateVar]:
    """
    Find the state variables of a component.

    Parameters come first, then declarations in top-level Go statements.
    Declarations nested in loops or conditionals are not state.
    """
    config = ctx.config
    state_vars: list[StateVar] = []

    param_pattern = _parameter_pattern(config.state_type)
    for param in comp.params:
        m = param_pattern.search(param.type.strip())
        if m is not None:
            state_vars.append(StateVar(name=param.name, type=m.group(1), is_parameter=True))

    decl_pattern = _declaration_pattern(config.state_constructor)
    for node in comp.body:
        if not isinstance(node, GoCode):
            continue
        for name, init_expr in decl_pattern.findall(node.code):
            state_vars.append(StateVar(name=name, type=infer_type(init_expr), init_expr=init_expr))

    return state_vars


def detect_get_calls(expr: str, state_names: set[str], accessor: str = "Get") -> list[str]:
    """Return the known state variables read with x.Get() or (*x).Get(), in first-use order."""
    found: list[str] = []
    for deref_name, name in _accessor_pattern(accessor).findall(expr):
        var = deref_name or name
        if var in state_names and var not in found:
            found.append(var)
    return found


def parse_explicit_deps(elem: Element, state_names: set[str], ctx: AnalysisContext) -> list[str] | None:
    """
    Parse a deps={[a, b]} attribute.

    Returns:
        The listed known state variables, possibly empty, or None when the
        element has no usable deps attribute. An empty list still replaces
        Get() detection.
    """
    attr = elem.get_attribute("deps")
    if attr is None:
        return None

    if not isinstance(attr.value, GoExpr):
        ctx.diagnostics.add_error(attr.position, DEPS_EXPRESSION_ERROR)
        return None

    code = attr.value.code.strip()
    if not (code.startswith("[") and code.endswith("]")):
        ctx.diagnostics.add_error(attr.position, DEPS_ARRAY_ERROR)
        return None

    inner = code[1:-1].strip()
    if not inner:
        ctx.diagnostics.add_warning(attr.position, "empty deps attribute has no effect")
        return []

    deps: list[str] = []
    for part in inner.split(","):
        name = part.strip()
        if not name:
            continue
        if name not in state_names:
            ctx.diagnostics.add_error(attr.position, f'unknown state variable "{name}" in deps')
            continue
        if name not in deps:
            deps.append(name)
    return deps


def detect_state_bindings(comp: Component, state_vars: list[StateVar], ctx: AnalysisContext) -> list[StateBinding]:
    """
    Find the element properties that depend on state.

    Only elements outside loops get bindings. An explicit deps attribute
    replaces detection for every binding of its element.
    """
    state_names = {var.name for var in state_vars}
    accessor = ctx.config.state_accessor
    names = names_by_element(assign_element_names(comp.body, ctx.config))
    bindings: list[StateBinding] = []

    def deps_for(expr: str, explicit: list[str] | None) -> tuple[list[str], bool]:
        if explicit is not None:
            return explicit, True
        return detect_get_calls(expr, state_names, accessor), False

    def visit_element(elem: Element, in_loop: bool) -> None:
        explicit = parse_explicit_deps(elem, state_names, ctx)
        if not in_loop:
            entry = names[id(elem)]
            element_name = entry.name
            text_index = 0
            for child in elem.children:
                if not isinstance(child, (GoExpr, TextContent)):
                    continue
                # Text that is not rendered inline lives in its own element
                target = entry.child_targets[text_index] if entry.child_targets else element_name
                text_index += 1
                if isinstance(child, GoExpr):
                    deps, is_explicit = deps_for(child.code, explicit)
                    if deps:
                        bindings.append(
                            StateBinding(
                                state_vars=list(deps),
                                element=elem,
                                element_name=target,
                                attribute="text",
                                expr=child.code,
                                explicit_deps=is_explicit,
                            )
                        )

            class_attr = elem.get_attribute("class")
            if class_attr is not None and isinstance(class_attr.value, GoExpr):
                deps, is_explicit = deps_for(class_attr.value.code, explicit)
                if deps:
                    bindings.append(
                        StateBinding(
                            state_vars=list(deps),
                            element=elem,
                            element_name=element_name,
                            attribute="class",
                            expr=class_attr.value.code,
                            explicit_deps=is_explicit,
                        )
                    )
        walk(elem.children, in_loop)

    def walk(nodes: list[BodyNode], in_loop: bool) -> None:
        for node in nodes:
            if isinstance(node, Element):
                visit_element(node, in_loop)
            elif isinstance(node, LetBinding):
                walk(node.element.children, in_loop)
            elif isinstance(node, ForLoop):
                walk(node.body, True)
            elif isinstance(node, IfStmt):
                walk(node.then, in_loop)
                walk(node.else_, in_loop)
            elif isinstance(node, ComponentCall):
                walk(node.children, in_loop)

    walk(comp.body, False)
    logger.debug("%s: %d state bindings", comp.name, len(bindings))
    return bindings
