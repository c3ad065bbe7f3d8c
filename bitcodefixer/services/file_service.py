"""
File Service

Document access for the fixer: workspace enumeration, reading a file,
and replacing its whole content.
"""

import fnmatch
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger("BitCodeFixer.FileService")

DEFAULT_INCLUDE = "**/*.{ts,tsx,js,jsx}"
DEFAULT_EXCLUDE = "**/node_modules/**"

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` groups: ``*.{ts,js}`` -> ``['*.ts', '*.js']``."""
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[:match.start()], pattern[match.end():]
    expanded: List[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def glob_match(rel_path: str, pattern: str) -> bool:
    """
    Match a workspace-relative posix path against a glob.

    Paths are anchored with a leading slash so ``**/`` also matches at the
    workspace root (``**/node_modules/**`` excludes ``node_modules/x.js``).
    """
    anchored = "/" + rel_path.lstrip("/")
    for pat in expand_braces(pattern):
        if not pat.startswith(("/", "*")):
            pat = "/" + pat
        if fnmatch.fnmatchcase(anchored, pat):
            return True
    return False


class FileService:
    """
    Service class for file operations.

    Provides:
    - Workspace file discovery with include/exclude globs
    - Whole-document reads
    - Atomic whole-document replacement
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize file service.

        Args:
            base_dir: Workspace root (defaults to the current directory)
        """
        self.base_dir = Path(base_dir).resolve() if base_dir else Path.cwd().resolve()
        logger.info(f"FileService initialized (base_dir: {self.base_dir})")

    def find_files(self, include: str = DEFAULT_INCLUDE, exclude: Optional[str] = DEFAULT_EXCLUDE) -> List[Path]:
        """
        List workspace files matching ``include`` and not ``exclude``.

        Excluded directories are not descended into. Results are sorted.
        """
        found: List[Path] = []
        for root, dirs, files in os.walk(self.base_dir):
            rel_root = Path(root).relative_to(self.base_dir).as_posix()
            rel_root = "" if rel_root == "." else rel_root

            if exclude:
                dirs[:] = [
                    d for d in dirs
                    if not glob_match(f"{rel_root}/{d}/".lstrip("/"), exclude)
                ]

            for name in files:
                rel = f"{rel_root}/{name}".lstrip("/")
                if exclude and glob_match(rel, exclude):
                    continue
                if glob_match(rel, include):
                    found.append(self.base_dir / rel)

        found.sort()
        logger.debug(f"find_files({include!r}, {exclude!r}) -> {len(found)} files")
        return found

    def open_document(self, path: str, encoding: str = "utf-8") -> str:
        """
        Read file content.

        Raises:
            OSError: If the file cannot be read
        """
        return self._resolve_path(path).read_text(encoding=encoding)

    def replace_full_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Replace the whole file with ``content``.

        Written to a sibling temp file first and moved into place, so a
        failed write leaves the original untouched.
        """
        target = self._resolve_path(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
                f.write(content)
            if target.exists():
                os.chmod(tmp_name, target.stat().st_mode & 0o7777)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Replaced contents of {target}")

    def relative(self, path: Path) -> str:
        """Path relative to the workspace when possible, for display."""
        try:
            return Path(path).resolve().relative_to(self.base_dir).as_posix()
        except ValueError:
            return str(path)

    def _resolve_path(self, path: str) -> Path:
        """
        Resolve path relative to base_dir.

        Args:
            path: Path to resolve

        Returns:
            Resolved Path object
        """
        p = Path(path)
        if not p.is_absolute():
            return (self.base_dir / p).resolve()
        return p.resolve()
