"""GSX to Code

A Python front end for the GSX component language: a templ-like markup
language for go-tui terminal user interfaces. Lexes, parses and
semantically analyzes .gsx files, reporting diagnostics and the tables
a Go code emitter needs.
"""

__version__ = "0.1.0"

from .pipeline import (
    AnalysisResult,
    AnalyzerConfig,
    Diagnostic,
    GsxAnalyzer,
    GsxCompileError,
    GsxError,
    analyze_file,
    analyze_source,
    parse_source,
)

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "Diagnostic",
    "GsxAnalyzer",
    "GsxCompileError",
    "GsxError",
    "analyze_file",
    "analyze_source",
    "parse_source",
]
