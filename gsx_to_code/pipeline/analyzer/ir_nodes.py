"""
Analysis output definitions.

These records describe what the analyzer learned about each component:
named element references, reactive state and the bindings between them.
They point back into the (mutated) AST and are what a code emitter reads
alongside it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..errors import DiagnosticList, GsxCompileError
from ..gsx_ast.nodes import Component, Element, File


class RefKind(Enum):
    """How a named reference is exposed to Go code."""

    SINGLE = "single"  # *element.Element
    LIST = "list"  # []*element.Element, one per loop iteration
    MAP = "map"  # map[K]*element.Element, keyed by key={expr}


@dataclass
class NamedRef:
    """An element tagged with #Name."""

    name: str = ""
    element: Element | None = None
    in_loop: bool = False
    in_conditional: bool = False

    # Only set for refs inside a loop with key={expr}
    key_expr: str = ""
    key_type: str = ""  # "string" or "int"

    kind: RefKind = RefKind.SINGLE

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "tag": self.element.tag if self.element else "",
            "kind": self.kind.value,
            "in_loop": self.in_loop,
            "in_conditional": self.in_conditional,
        }
        if self.key_expr:
            d["key_expr"] = self.key_expr
            d["key_type"] = self.key_type
        return d


@dataclass
class StateVar:
    """A reactive state variable, declared locally or received as a parameter."""

    name: str = ""
    type: str = ""  # Go type, e.g. "int" or "[]string"
    init_expr: str = ""  # empty for parameters
    is_parameter: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "init_expr": self.init_expr,
            "is_parameter": self.is_parameter,
        }


@dataclass
class StateBinding:
    """An element property that must be refreshed when state changes."""

    state_vars: list[str] = field(default_factory=list)
    element: Element | None = None
    element_name: str = ""
    attribute: str = ""  # "text" or "class"
    expr: str = ""
    explicit_deps: bool = False

    def to_dict(self) -> dict:
        return {
            "state_vars": self.state_vars,
            "element_name": self.element_name,
            "attribute": self.attribute,
            "expr": self.expr,
            "explicit_deps": self.explicit_deps,
        }


@dataclass
class ElementName:
    """The variable name an emitter gives to one element."""

    element: Element | None = None
    name: str = ""
    in_loop: bool = False

    # False for elements named after their #Ref
    uses_counter: bool = True

    # Names of the standalone text nodes created for GoExpr/TextContent children
    child_targets: list[str] = field(default_factory=list)


@dataclass
class ComponentAnalysis:
    """Everything the analyzer derived for one component."""

    component: Component | None = None
    named_refs: list[NamedRef] = field(default_factory=list)
    state_vars: list[StateVar] = field(default_factory=list)
    state_bindings: list[StateBinding] = field(default_factory=list)
    element_names: list[ElementName] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.component.name if self.component else "",
            "accepts_children": self.component.accepts_children if self.component else False,
            "named_refs": [ref.to_dict() for ref in self.named_refs],
            "state_vars": [var.to_dict() for var in self.state_vars],
            "state_bindings": [binding.to_dict() for binding in self.state_bindings],
            "element_names": [n.name for n in self.element_names],
        }


@dataclass
class AnalysisResult:
    """The result of analyzing one file."""

    file: File | None = None
    diagnostics: DiagnosticList = field(default_factory=DiagnosticList)
    components: list[ComponentAnalysis] = field(default_factory=list)

    @property
    def error(self) -> GsxCompileError | None:
        """The errors as a single exception value, or None. Warnings are ignored."""
        return self.diagnostics.err()

    def raise_for_errors(self) -> None:
        err = self.error
        if err is not None:
            raise err

    def component(self, name: str) -> ComponentAnalysis | None:
        for analysis in self.components:
            if analysis.component is not None and analysis.component.name == name:
                return analysis
        return None

    def to_dict(self) -> dict:
        return {
            "package": self.file.package if self.file else "",
            "imports": [imp.path for imp in self.file.imports] if self.file else [],
            "components": [c.to_dict() for c in self.components],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
