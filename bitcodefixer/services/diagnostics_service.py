"""
Diagnostics Service

Sources of compiler/linter diagnostics for a single file.

- StaticDiagnostics: a JSON export from an editor or language server
- ESLintDiagnostics: ``eslint --format json``
- TypeScriptDiagnostics: ``tsc --noEmit``
- CompositeDiagnostics: several of the above, concatenated in order

All sources return 0-based ranges.
"""

import asyncio
import json
import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from bitcodefixer.core.errors import DiagnosticsError
from bitcodefixer.core.models import Diagnostic, Position, Range

logger = logging.getLogger("BitCodeFixer.DiagnosticsService")

ESLINT_CMD = ("npx", "--no-install", "eslint", "--format", "json")
TSC_CMD = ("npx", "--no-install", "tsc", "--noEmit", "--pretty", "false")

_ESLINT_SEVERITY = {1: "warning", 2: "error"}

TSC_LINE_RE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<col>\d+)\): "
    r"(?P<severity>error|warning|message) (?P<code>TS\d+): (?P<message>.*)$"
)


class DiagnosticsSource(Protocol):
    async def get_diagnostics(self, path: Path) -> List[Diagnostic]:
        ...


def _same_file(a: Path, b: Path) -> bool:
    return Path(a).resolve() == Path(b).resolve()


class StaticDiagnostics:
    """
    Diagnostics loaded from a JSON file.

    Accepted shapes::

        {"src/a.ts": [{"message": "...", "range": {"start": {"line": 4, "character": 0}, ...}}]}
        [{"file": "src/a.ts", "diagnostics": [...]}]

    Relative paths are resolved against ``base_dir``.
    """

    def __init__(self, entries: Dict[Path, List[Diagnostic]]):
        self._entries = {Path(p).resolve(): list(d) for p, d in entries.items()}

    @classmethod
    def from_file(cls, path: Path, base_dir: Optional[Path] = None) -> "StaticDiagnostics":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise DiagnosticsError(f"Cannot load diagnostics from {path}: {e}") from e
        return cls.from_data(data, base_dir=base_dir)

    @classmethod
    def from_data(cls, data: Any, base_dir: Optional[Path] = None) -> "StaticDiagnostics":
        root = Path(base_dir) if base_dir else Path.cwd()
        if isinstance(data, dict):
            items = list(data.items())
        elif isinstance(data, list):
            items = [(item.get("file"), item.get("diagnostics") or []) for item in data if isinstance(item, dict)]
        else:
            raise DiagnosticsError("Diagnostics JSON must be an object or a list")

        entries: Dict[Path, List[Diagnostic]] = {}
        for file_name, raw in items:
            if not file_name:
                continue
            file_path = Path(file_name)
            if not file_path.is_absolute():
                file_path = root / file_path
            try:
                entries[file_path] = [Diagnostic.from_dict(d) for d in raw]
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise DiagnosticsError(f"Malformed diagnostic for {file_name}: {e}") from e
        return cls(entries)

    async def get_diagnostics(self, path: Path) -> List[Diagnostic]:
        return list(self._entries.get(Path(path).resolve(), []))


class _CommandDiagnostics:
    """Shared subprocess plumbing for linter-backed sources."""

    name = "command"

    def __init__(self, base_dir: Optional[Path] = None, command: Sequence[str] = (), timeout: int = 120):
        self.base_dir = Path(base_dir).resolve() if base_dir else Path.cwd()
        self.command = tuple(command)
        self.timeout = timeout

    def _run(self, args: Sequence[str]) -> Optional[Tuple[int, str, str]]:
        cmd = [*self.command, *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.base_dir),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"{self.name} unavailable ({' '.join(cmd)}): {e}")
            return None
        return result.returncode, result.stdout, result.stderr

    async def _run_async(self, args: Sequence[str]) -> Optional[Tuple[int, str, str]]:
        return await asyncio.to_thread(self._run, args)


class ESLintDiagnostics(_CommandDiagnostics):
    """Runs ESLint on one file and converts its JSON report."""

    name = "eslint"

    def __init__(self, base_dir: Optional[Path] = None, command: Sequence[str] = ESLINT_CMD, timeout: int = 120):
        super().__init__(base_dir, command, timeout)

    async def get_diagnostics(self, path: Path) -> List[Diagnostic]:
        result = await self._run_async([str(path)])
        if result is None:
            return []
        returncode, stdout, stderr = result
        # eslint exits 1 when it found problems; 2 means it could not run
        if returncode not in (0, 1):
            logger.warning(f"eslint failed on {path} (exit {returncode}): {stderr.strip()}")
            return []
        return self.parse(stdout, path)

    @staticmethod
    def parse(report: str, path: Path) -> List[Diagnostic]:
        try:
            data = json.loads(report or "[]")
        except json.JSONDecodeError:
            logger.warning(f"eslint produced non-JSON output for {path}")
            return []

        diagnostics: List[Diagnostic] = []
        for file_result in data:
            file_path = file_result.get("filePath")
            if file_path and not _same_file(Path(file_path), Path(path)):
                continue
            for msg in file_result.get("messages", []):
                line = max(int(msg.get("line") or 1) - 1, 0)
                col = max(int(msg.get("column") or 1) - 1, 0)
                end_line = max(int(msg.get("endLine") or line + 1) - 1, 0)
                end_col = max(int(msg.get("endColumn") or col + 1) - 1, 0)
                diagnostics.append(Diagnostic(
                    message=msg.get("message", ""),
                    range=Range(Position(line, col), Position(end_line, end_col)),
                    severity=_ESLINT_SEVERITY.get(msg.get("severity"), "info"),
                    source="eslint",
                    code=msg.get("ruleId"),
                ))
        return diagnostics


class TypeScriptDiagnostics(_CommandDiagnostics):
    """
    Type-checks the project with tsc and keeps the errors for one file.

    tsc always checks the whole project, so its output is taken once per
    instance and reused for every file asked about afterwards. A batch
    therefore sees the project as it was before any fix was applied; call
    ``invalidate`` to force a fresh run.
    """

    name = "tsc"

    def __init__(self, base_dir: Optional[Path] = None, command: Sequence[str] = TSC_CMD, timeout: int = 300):
        super().__init__(base_dir, command, timeout)
        self._output: Optional[str] = None

    def invalidate(self) -> None:
        self._output = None

    async def get_diagnostics(self, path: Path) -> List[Diagnostic]:
        if self._output is None:
            result = await self._run_async([])
            if result is None:
                return []
            _, stdout, _ = result
            self._output = stdout or ""
        return self.parse(self._output, path, self.base_dir)

    @staticmethod
    def parse(output: str, path: Path, base_dir: Path) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for raw_line in (output or "").splitlines():
            match = TSC_LINE_RE.match(raw_line.strip())
            if not match:
                continue
            file_path = Path(match.group("file"))
            if not file_path.is_absolute():
                file_path = Path(base_dir) / file_path
            if not _same_file(file_path, Path(path)):
                continue
            start = Position(int(match.group("line")) - 1, int(match.group("col")) - 1)
            diagnostics.append(Diagnostic(
                message=match.group("message"),
                range=Range(start, start),
                severity=match.group("severity"),
                source="ts",
                code=match.group("code"),
            ))
        return diagnostics


class CompositeDiagnostics:
    """Concatenates several sources, preserving each source's order."""

    def __init__(self, sources: Sequence[DiagnosticsSource]):
        self.sources = list(sources)

    async def get_diagnostics(self, path: Path) -> List[Diagnostic]:
        combined: List[Diagnostic] = []
        for source in self.sources:
            combined.extend(await source.get_diagnostics(path))
        return combined
