"""
Data model shared by the fixer, the diagnostics sources and the CLI.

Positions are 0-based (line and character), matching what editors and
language servers report. Prompt text converts to 1-based line numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Position:
    line: int
    character: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        return cls(
            line=int(data.get("line", 0)),
            character=int(data.get("character", data.get("column", 0))),
        )


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Range":
        start = Position.from_dict(data.get("start") or {})
        end_data = data.get("end")
        end = Position.from_dict(end_data) if end_data else start
        return cls(start=start, end=end)


@dataclass(frozen=True)
class Diagnostic:
    """A single compiler/linter finding for one file."""

    message: str
    range: Range
    severity: str = "error"
    source: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Diagnostic":
        """Build from the editor/LSP export shape: {message, range, severity?, source?, code?}."""
        code = data.get("code")
        return cls(
            message=str(data["message"]),
            range=Range.from_dict(data.get("range") or {}),
            severity=str(data.get("severity") or "error"),
            source=data.get("source"),
            code=str(code) if code is not None else None,
        )

    @property
    def line_number(self) -> int:
        """1-based line of the start position."""
        return self.range.start.line + 1


@dataclass(frozen=True)
class FixRequest:
    file_path: str
    source_text: str
    diagnostics: Tuple[Diagnostic, ...]

    @classmethod
    def create(cls, file_path: str, source_text: str, diagnostics: Sequence[Diagnostic]) -> "FixRequest":
        return cls(file_path=file_path, source_text=source_text, diagnostics=tuple(diagnostics))


@dataclass
class BatchResult:
    """Outcome of a fix-all run."""

    fixed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def fixed_count(self) -> int:
        return len(self.fixed)
