"""
Semantic analyzer for parsed GSX files.

Phase 3 of the pipeline: annotate and rewrite the AST in place, validate
it, and collect the per-component tables a code emitter needs.
"""

from __future__ import annotations

import logging

from ...utils import is_simple_identifier
from ..config import AnalyzerConfig
from ..gsx_ast.nodes import (
    BodyNode,
    ChildrenSlot,
    Component,
    ComponentCall,
    Element,
    File,
    ForLoop,
    GoExpr,
    IfStmt,
    Import,
    LetBinding,
    RawGoExpr,
    child_bodies,
)
from .context import AnalysisContext
from .ir_nodes import AnalysisResult, ComponentAnalysis
from .naming import assign_element_names
from .refs import collect_named_refs
from .state import detect_state_bindings, detect_state_vars
from .validation import validate_component

logger = logging.getLogger(__name__)


class GsxAnalyzer:
    """Runs the analysis passes over a File."""

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

        # Rebuilt by every analyze() call
        self.context = AnalysisContext(config=self.config)

    def analyze(self, file: File) -> AnalysisResult:
        """
        Analyze a parsed file.

        The passes run in a fixed order, each over every component:

        1. children slot detection
        2. @let binding collection
        3. rewrite of bare @let references to RawGoExpr
        4. named ref validation
        5. element, attribute and class validation
        6. state variable and binding detection

        Finally the runtime imports the file needs are added. Running
        analyze() again on the same file gives the same result.

        Args:
            file: The parsed file, modified in place

        Returns:
            The analysis result; check result.error for problems
        """
        self.context = ctx = AnalysisContext(config=self.config)
        result = AnalysisResult(file=file, diagnostics=ctx.diagnostics)
        analyses = [ComponentAnalysis(component=comp) for comp in file.components]

        # Pass 1
        for comp in file.components:
            comp.accepts_children = self._has_children_slot(comp.body)
            ctx.component_defs[comp.name] = comp.accepts_children

        # Pass 2
        for comp in file.components:
            self._collect_let_bindings(comp)

        # Pass 3
        for comp in file.components:
            self._rewrite_let_references(comp.body)

        # Pass 4
        for analysis in analyses:
            analysis.named_refs = collect_named_refs(analysis.component, ctx)

        # Pass 5
        for comp in file.components:
            validate_component(comp, ctx)

        # Pass 6
        for analysis in analyses:
            comp = analysis.component
            analysis.state_vars = detect_state_vars(comp, ctx)
            analysis.state_bindings = detect_state_bindings(comp, analysis.state_vars, ctx)
            if analysis.state_vars:
                ctx.uses_tui = True
            analysis.element_names = assign_element_names(comp.body, self.config)

        self._add_missing_imports(file)

        result.components = analyses
        logger.debug(
            "Analyzed %s: %d components, %d errors, %d warnings",
            file.package,
            len(analyses),
            len(ctx.diagnostics.errors),
            len(ctx.diagnostics.warnings),
        )
        return result

    # Pass 1

    def _has_children_slot(self, nodes: list[BodyNode]) -> bool:
        for node in nodes:
            if isinstance(node, ChildrenSlot):
                return True
            if any(self._has_children_slot(body) for body in child_bodies(node)):
                return True
        return False

    # Pass 2

    def _collect_let_bindings(self, comp: Component) -> None:
        declared: set[str] = set()

        def walk(nodes: list[BodyNode]) -> None:
            for node in nodes:
                if isinstance(node, LetBinding):
                    if node.name in declared:
                        self.context.diagnostics.add_error(node.position, f'duplicate @let binding "{node.name}"')
                    declared.add(node.name)
                    self.context.let_bindings[node.name] = False
                    walk(node.element.children)
                elif isinstance(node, Element):
                    walk(node.children)
                elif isinstance(node, ForLoop):
                    walk(node.body)
                elif isinstance(node, IfStmt):
                    walk(node.then)
                    walk(node.else_)
                elif isinstance(node, ComponentCall):
                    walk(node.children)

        walk(comp.body)

    # Pass 3

    def _rewrite_let_references(self, nodes: list[BodyNode]) -> None:
        """Replace {name} expressions that refer to a @let binding with RawGoExpr."""
        let_bindings = self.context.let_bindings
        for i, node in enumerate(nodes):
            if isinstance(node, GoExpr):
                code = node.code.strip()
                if is_simple_identifier(code) and code in let_bindings:
                    nodes[i] = RawGoExpr(code=code, position=node.position)
                    let_bindings[code] = True
            elif isinstance(node, RawGoExpr):
                # Rewritten by an earlier analyze() call
                if node.code in let_bindings:
                    let_bindings[node.code] = True
            else:
                for body in child_bodies(node):
                    self._rewrite_let_references(body)

    # Imports

    def _add_missing_imports(self, file: File) -> None:
        ctx = self.context
        required = []
        if ctx.uses_element:
            required.append(self.config.element_import)
        if ctx.uses_layout:
            required.append(self.config.layout_import)
        if ctx.uses_tui:
            required.append(self.config.tui_import)

        for path in required:
            if not file.has_import(path):
                logger.debug("Adding import %s", path)
                file.imports.append(Import(path=path))
