"""
Front-end driver: lexer -> parser -> analyzer for one source.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .analyzer import AnalysisResult, GsxAnalyzer
from .config import AnalyzerConfig
from .errors import DiagnosticList, GsxCompileError
from .gsx_ast.nodes import File
from .lexer.lexer import Lexer
from .parser.parser import Parser

logger = logging.getLogger(__name__)


def parse_source(source: str, filename: str = "") -> tuple[File | None, DiagnosticList]:
    """
    Parse GSX source text.

    Args:
        source: The .gsx source
        filename: Name used in diagnostic positions

    Returns:
        The File (None when the package declaration is missing) and every
        lexer and parser diagnostic
    """
    parser = Parser(Lexer(filename, source))
    file = parser.parse_file()
    return file, parser.diagnostics


def analyze_source(source: str, filename: str = "", config: AnalyzerConfig | None = None) -> AnalysisResult:
    """
    Parse and analyze GSX source text.

    Parse and analysis diagnostics are merged into the result, parse
    diagnostics first.

    Raises:
        GsxCompileError: If the source has no package declaration
    """
    file, parse_diagnostics = parse_source(source, filename)
    if file is None:
        raise GsxCompileError(parse_diagnostics.errors)

    result = GsxAnalyzer(config).analyze(file)
    diagnostics = DiagnosticList(parse_diagnostics)
    diagnostics.extend(result.diagnostics)
    result.diagnostics = diagnostics
    return result


def analyze_file(path: str | Path, config: AnalyzerConfig | None = None) -> AnalysisResult:
    """Read a .gsx file and analyze it."""
    path = Path(path)
    logger.debug("Analyzing %s", path)
    source = path.read_text(encoding="utf-8")
    return analyze_source(source, str(path), config)
