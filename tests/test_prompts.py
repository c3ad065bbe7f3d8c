from bitcodefixer.core.models import Diagnostic, Position, Range
from bitcodefixer.core.prompts import build_commit_prompt, build_fix_prompt


def diag(message: str, line: int, character: int = 0) -> Diagnostic:
    start = Position(line, character)
    return Diagnostic(message=message, range=Range(start, start))


def test_build_fix_prompt_snapshot():
    prompt = build_fix_prompt(
        "let x: any = 1;",
        [diag("Unexpected any", 4), diag("Missing semicolon", 0)],
        "/work/src/app.ts",
    )
    expected = (
        "Fix any issues in the following code from file path /work/src/app.ts:\n"
        "\n"
        "Error: Unexpected any at line 5\n"
        "Error: Missing semicolon at line 1\n"
        "\n"
        "```typescript\n"
        "let x: any = 1;\n"
        "```\n"
        "\n"
        "\n"
        "Return the fixed code wrapped in a code block with the language specified "
        "(typescript or javascript)."
    )
    assert prompt == expected


def test_build_fix_prompt_one_error_line_per_diagnostic_in_input_order():
    diagnostics = [diag("b", 9), diag("a", 2), diag("a", 2), diag("c", 0)]
    prompt = build_fix_prompt("code", diagnostics, "x.ts")

    error_lines = [line for line in prompt.splitlines() if line.startswith("Error: ")]
    assert error_lines == [
        "Error: b at line 10",
        "Error: a at line 3",
        "Error: a at line 3",
        "Error: c at line 1",
    ]


def test_build_fix_prompt_is_deterministic():
    diagnostics = [diag("Unexpected any", 4)]
    assert build_fix_prompt("src", diagnostics, "a.ts") == build_fix_prompt("src", diagnostics, "a.ts")


def test_build_fix_prompt_embeds_full_source():
    source = "const a = 1;\nconst b = 2;\n"
    prompt = build_fix_prompt(source, [diag("x", 1)], "a.ts")
    assert f"```typescript\n{source}\n```" in prompt


def test_build_commit_prompt():
    assert build_commit_prompt("diff") == "Generate a commit message for these changes:\n\ndiff"
