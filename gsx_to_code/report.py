"""
Diagnostics reports for the check command.
"""

import json
from pathlib import Path

import jinja2

from .pipeline import AnalysisResult, Diagnostic

CURRENT_DIR = Path(__file__).parent.resolve().absolute()


class ReportRenderer:
    """Renders the diagnostics of checked files as text or JSON."""

    def __init__(self):
        self.jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True)
        self.template = self.jinja_env.from_string(open(CURRENT_DIR / "templates/report.txt.jinja2").read())

    def render_text(self, reports: list[tuple[str, list[Diagnostic]]], verbose: bool = False) -> str:
        """
        Render a human readable report.

        Args:
            reports: (file name, diagnostics) pairs, in check order
            verbose: Also list files without findings

        Returns:
            The report text
        """
        files = []
        error_count = 0
        warning_count = 0
        for name, diagnostics in reports:
            errors = sum(1 for d in diagnostics if d.is_error)
            error_count += errors
            warning_count += len(diagnostics) - errors
            if diagnostics or verbose:
                files.append({"name": name, "diagnostics": [str(d) for d in diagnostics]})

        return self.template.render(
            files=files,
            file_count=len(reports),
            error_count=error_count,
            warning_count=warning_count,
        )

    def render_json(self, reports: list[tuple[str, list[Diagnostic]]]) -> str:
        out = [{"file": name, "diagnostics": [d.to_dict() for d in diagnostics]} for name, diagnostics in reports]
        return json.dumps(out, indent=2)


def render_analysis(result: AnalysisResult) -> str:
    """Render the analysis tables of one file as JSON."""
    return json.dumps(result.to_dict(), indent=2)
