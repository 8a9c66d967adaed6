"""
Diagnostics and exceptions shared by every pipeline phase.

Phases never stop at the first problem: findings are appended to a
DiagnosticList and the caller decides whether to go on. The aggregate is
turned into a GsxCompileError only when someone asks for it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from .lexer.tokens import Position


class Severity(Enum):
    """Severity of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class Diagnostic:
    """A compilation finding with source location and optional hint."""

    position: Position = field(default_factory=Position)
    message: str = ""
    hint: str = ""

    # Only set for range-highlightable findings (e.g. a bad utility class)
    end_position: Position | None = None

    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict:
        """Convert the diagnostic to a JSON friendly dictionary."""
        d = {
            "file": self.position.file,
            "line": self.position.line,
            "column": self.position.column,
            "severity": self.severity.value,
            "message": self.message,
        }
        if self.hint:
            d["hint"] = self.hint
        if self.end_position is not None:
            d["end_line"] = self.end_position.line
            d["end_column"] = self.end_position.column
        return d

    def __str__(self) -> str:
        text = f"{self.position}: {self.severity.value}: {self.message}"
        if self.hint:
            text += f" ({self.hint})"
        return text


class GsxError(Exception):
    """Base class for errors raised by the GSX front end."""

    pass


class LexError(GsxError):
    """Raised by the lexer's out-of-band scanning helpers."""

    def __init__(self, position: Position, message: str):
        super().__init__(message)
        self.position = position
        self.message = message


class GsxCompileError(GsxError):
    """Aggregate of every error found while compiling one source."""

    def __init__(self, diagnostics: Iterable[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__(str(self))

    def __str__(self) -> str:
        return "\n".join(str(d) for d in self.diagnostics)


class DiagnosticList:
    """Growable, ordered collection of diagnostics."""

    def __init__(self, diagnostics: Iterable[Diagnostic] | None = None):
        self._items: list[Diagnostic] = list(diagnostics or [])

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def add_error(self, position: Position, message: str, hint: str = "") -> None:
        self._items.append(Diagnostic(position=position, message=message, hint=hint))

    def add_warning(self, position: Position, message: str, hint: str = "") -> None:
        self._items.append(Diagnostic(position=position, message=message, hint=hint, severity=Severity.WARNING))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if not d.is_error]

    def has_errors(self) -> bool:
        return any(d.is_error for d in self._items)

    def err(self) -> GsxCompileError | None:
        """Return the errors as a single exception value, or None if there are none."""
        errors = self.errors
        if not errors:
            return None
        return GsxCompileError(errors)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __str__(self) -> str:
        return "\n".join(str(d) for d in self._items)
