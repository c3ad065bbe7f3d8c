"""
Prompt templates for the fixer and the commit assistant.
"""

from typing import Sequence

from bitcodefixer.core.models import Diagnostic


FIX_SYSTEM_PROMPT = (
    "You are a TypeScript/JavaScript expert. Fix the code according to the errors. "
    "Return only the fixed code wrapped in a code block."
)

COMMIT_SYSTEM_PROMPT = (
    "You are a git commit message expert. Generate a concise and descriptive commit "
    "message based on the changes. Follow conventional commit format."
)

FIX_INSTRUCTION = (
    "Return the fixed code wrapped in a code block with the language specified "
    "(typescript or javascript)."
)


def format_diagnostic(diagnostic: Diagnostic) -> str:
    return f"Error: {diagnostic.message} at line {diagnostic.line_number}"


def build_fix_prompt(source_text: str, diagnostics: Sequence[Diagnostic], file_path: str) -> str:
    """
    Build the user turn for a fix request.

    One ``Error:`` line per diagnostic, kept in the order given (no sorting,
    no de-duplication), followed by the whole file in a typescript fence.
    """
    error_lines = "\n".join(format_diagnostic(d) for d in diagnostics)

    return f"""Fix any issues in the following code from file path {file_path}:

{error_lines}

```typescript
{source_text}
```


{FIX_INSTRUCTION}"""


def build_commit_prompt(changes: str) -> str:
    return f"Generate a commit message for these changes:\n\n{changes}"
