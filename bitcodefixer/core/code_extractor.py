"""
Code extraction from model responses.

Models are asked for a single fenced block, but often wrap it in prose.
We take the first fenced block (optionally tagged typescript, javascript,
ts or js) and fall back to the whole response when there is none.
"""

import re
from typing import Optional

CODE_BLOCK_RE = re.compile(r"```(?:typescript|javascript|ts|js)?\n(.*?)```", re.DOTALL)


def find_code_block(response: str) -> Optional[str]:
    """Interior of the first fenced block, or None if the response has none."""
    if not response:
        return None
    match = CODE_BLOCK_RE.search(response)
    if match:
        # An empty fence is an empty fix, not a reason to apply the raw text.
        return match.group(1)
    return None


def extract_fix(response: str) -> str:
    """
    Return the replacement source text carried by ``response``.

    Never raises. Applying it to fence-free text returns that text trimmed.
    """
    block = find_code_block(response)
    if block is not None:
        return block.strip()
    return (response or "").strip()
