"""
Per-call analysis state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import AnalyzerConfig
from ..errors import DiagnosticList


@dataclass
class AnalysisContext:
    """Tables shared by the analysis passes, rebuilt on every analyze() call."""

    config: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    diagnostics: DiagnosticList = field(default_factory=DiagnosticList)

    # let name -> referenced by a bare identifier expression
    let_bindings: dict[str, bool] = field(default_factory=dict)

    # component name -> accepts children
    component_defs: dict[str, bool] = field(default_factory=dict)

    uses_element: bool = False
    uses_layout: bool = False
    uses_tui: bool = False

    def note_go_code(self, code: str) -> None:
        """Record package usage from a fragment of Go code."""
        if "layout." in code:
            self.uses_layout = True
        if "tui." in code:
            self.uses_tui = True
