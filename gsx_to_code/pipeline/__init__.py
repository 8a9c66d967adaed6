"""
Pipeline - front end of the GSX component language compiler.

GSX source goes through three phases:

1. Phase 1 (Lexer): Turn source text into positioned tokens
2. Phase 2 (Parser): Build the GSX AST, recovering from syntax errors
3. Phase 3 (Analyzer): Validate the AST, rewrite it in place and
   collect named refs, state variables and state bindings

Every phase reports problems as diagnostics instead of raising.
"""

from __future__ import annotations

from .analyzer import AnalysisResult, ComponentAnalysis, GsxAnalyzer, assign_element_names
from .config import AnalyzerConfig
from .errors import Diagnostic, DiagnosticList, GsxCompileError, GsxError, LexError, Severity
from .frontend import analyze_file, analyze_source, parse_source

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "ComponentAnalysis",
    "Diagnostic",
    "DiagnosticList",
    "GsxAnalyzer",
    "GsxCompileError",
    "GsxError",
    "LexError",
    "Severity",
    "analyze_file",
    "analyze_source",
    "assign_element_names",
    "parse_source",
]
