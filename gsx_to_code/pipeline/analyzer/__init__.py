"""
Analyzer - validates the GSX AST and derives per-component tables.
"""

from .analyzer import GsxAnalyzer
from .context import AnalysisContext
from .ir_nodes import (
    AnalysisResult,
    ComponentAnalysis,
    ElementName,
    NamedRef,
    RefKind,
    StateBinding,
    StateVar,
)
from .naming import assign_element_names
from .state import detect_get_calls, infer_type

__all__ = [
    "AnalysisContext",
    "AnalysisResult",
    "ComponentAnalysis",
    "ElementName",
    "GsxAnalyzer",
    "NamedRef",
    "RefKind",
    "StateBinding",
    "StateVar",
    "assign_element_names",
    "detect_get_calls",
    "infer_type",
]
