import asyncio
import json
import subprocess
from pathlib import Path

import pytest

from bitcodefixer.core.errors import DiagnosticsError
from bitcodefixer.core.models import Diagnostic, Position, Range
from bitcodefixer.services.diagnostics_service import (
    CompositeDiagnostics,
    ESLintDiagnostics,
    StaticDiagnostics,
    TypeScriptDiagnostics,
)


def run_async(coro):
    return asyncio.run(coro)


def test_static_diagnostics_from_mapping(tmp_path):
    export = tmp_path / "diagnostics.json"
    export.write_text(json.dumps({
        "src/a.ts": [
            {"message": "Unexpected any", "range": {"start": {"line": 4, "character": 7}, "end": {"line": 4, "character": 10}}},
            {"message": "Missing return type", "range": {"start": {"line": 0}}, "severity": "warning", "code": 7010},
        ],
    }), encoding="utf-8")

    source = StaticDiagnostics.from_file(export, base_dir=tmp_path)
    diagnostics = run_async(source.get_diagnostics(tmp_path / "src" / "a.ts"))

    assert [d.message for d in diagnostics] == ["Unexpected any", "Missing return type"]
    assert diagnostics[0].range == Range(Position(4, 7), Position(4, 10))
    assert diagnostics[0].line_number == 5
    assert diagnostics[1].severity == "warning"
    assert diagnostics[1].code == "7010"
    assert diagnostics[1].range.end == diagnostics[1].range.start


def test_static_diagnostics_list_shape_and_unknown_file(tmp_path):
    source = StaticDiagnostics.from_data(
        [{"file": "b.js", "diagnostics": [{"message": "x", "range": {"start": {"line": 1}}}]}],
        base_dir=tmp_path,
    )
    assert len(run_async(source.get_diagnostics(tmp_path / "b.js"))) == 1
    assert run_async(source.get_diagnostics(tmp_path / "other.js")) == []


def test_static_diagnostics_bad_file(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(DiagnosticsError):
        StaticDiagnostics.from_file(bad)


def test_static_diagnostics_malformed_entry(tmp_path):
    with pytest.raises(DiagnosticsError):
        StaticDiagnostics.from_data({"a.ts": [{"range": {}}]}, base_dir=tmp_path)


def test_eslint_parse_converts_to_zero_based(tmp_path):
    target = tmp_path / "a.ts"
    report = json.dumps([{
        "filePath": str(target),
        "messages": [
            {"ruleId": "no-explicit-any", "severity": 2, "message": "Unexpected any.", "line": 5, "column": 8, "endLine": 5, "endColumn": 11},
            {"ruleId": None, "severity": 1, "message": "Parsing warning", "line": 1, "column": 1},
        ],
    }])

    diagnostics = ESLintDiagnostics.parse(report, target)

    assert diagnostics[0] == Diagnostic(
        message="Unexpected any.",
        range=Range(Position(4, 7), Position(4, 10)),
        severity="error",
        source="eslint",
        code="no-explicit-any",
    )
    assert diagnostics[1].severity == "warning"
    assert diagnostics[1].range.start == Position(0, 0)


def test_eslint_parse_ignores_garbage():
    assert ESLintDiagnostics.parse("Oops, not json", Path("a.ts")) == []


def test_eslint_runs_command_on_file(tmp_path, monkeypatch):
    target = tmp_path / "a.js"
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        out = json.dumps([{"filePath": str(target), "messages": [{"severity": 2, "message": "m", "line": 3, "column": 1}]}])
        return subprocess.CompletedProcess(cmd, 1, stdout=out, stderr="")

    monkeypatch.setattr("bitcodefixer.services.diagnostics_service.subprocess.run", fake_run)

    diagnostics = run_async(ESLintDiagnostics(tmp_path).get_diagnostics(target))

    assert calls[0][-1] == str(target)
    assert calls[0][:3] == ["npx", "--no-install", "eslint"]
    assert [d.line_number for d in diagnostics] == [3]


def test_eslint_fatal_exit_or_missing_tool_yields_nothing(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "bitcodefixer.services.diagnostics_service.subprocess.run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 2, stdout="", stderr="config error"),
    )
    assert run_async(ESLintDiagnostics(tmp_path).get_diagnostics(tmp_path / "a.js")) == []

    def missing(cmd, **kw):
        raise FileNotFoundError("npx")

    monkeypatch.setattr("bitcodefixer.services.diagnostics_service.subprocess.run", missing)
    assert run_async(ESLintDiagnostics(tmp_path).get_diagnostics(tmp_path / "a.js")) == []


def test_tsc_parse_filters_to_file(tmp_path):
    output = "\n".join([
        "src/a.ts(5,12): error TS2322: Type 'string' is not assignable to type 'number'.",
        "src/b.ts(1,1): error TS1005: ';' expected.",
        "src/a.ts(9,3): error TS7006: Parameter 'x' implicitly has an 'any' type.",
        "Found 3 errors.",
    ])

    diagnostics = TypeScriptDiagnostics.parse(output, tmp_path / "src" / "a.ts", tmp_path)

    assert [d.code for d in diagnostics] == ["TS2322", "TS7006"]
    assert diagnostics[0].range.start == Position(4, 11)
    assert diagnostics[0].message == "Type 'string' is not assignable to type 'number'."
    assert diagnostics[1].line_number == 9


def test_tsc_runs_once_for_many_files(tmp_path, monkeypatch):
    calls = []
    output = "\n".join([
        "src/a.ts(2,1): error TS2304: Cannot find name 'foo'.",
        "src/b.ts(7,5): error TS1005: ';' expected.",
    ])

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 2, stdout=output, stderr="")

    monkeypatch.setattr("bitcodefixer.services.diagnostics_service.subprocess.run", fake_run)
    source = TypeScriptDiagnostics(tmp_path)

    a = run_async(source.get_diagnostics(tmp_path / "src" / "a.ts"))
    b = run_async(source.get_diagnostics(tmp_path / "src" / "b.ts"))
    c = run_async(source.get_diagnostics(tmp_path / "src" / "c.ts"))

    assert len(calls) == 1
    assert calls[0][:3] == ["npx", "--no-install", "tsc"]
    assert [d.code for d in a] == ["TS2304"]
    assert [d.line_number for d in b] == [7]
    assert c == []

    source.invalidate()
    run_async(source.get_diagnostics(tmp_path / "src" / "a.ts"))
    assert len(calls) == 2


def test_tsc_missing_tool_is_retried(tmp_path, monkeypatch):
    def missing(cmd, **kw):
        raise FileNotFoundError("npx")

    monkeypatch.setattr("bitcodefixer.services.diagnostics_service.subprocess.run", missing)
    source = TypeScriptDiagnostics(tmp_path)
    assert run_async(source.get_diagnostics(tmp_path / "a.ts")) == []

    monkeypatch.setattr(
        "bitcodefixer.services.diagnostics_service.subprocess.run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 2, stdout="a.ts(1,1): error TS1005: ';' expected.", stderr=""),
    )
    assert [d.code for d in run_async(source.get_diagnostics(tmp_path / "a.ts"))] == ["TS1005"]


def test_composite_preserves_source_order():
    class Fixed:
        def __init__(self, *messages):
            self.messages = messages

        async def get_diagnostics(self, path):
            return [Diagnostic(m, Range(Position(0), Position(0))) for m in self.messages]

    composite = CompositeDiagnostics([Fixed("a", "b"), Fixed(), Fixed("c")])
    assert [d.message for d in run_async(composite.get_diagnostics(Path("x.ts")))] == ["a", "b", "c"]
