"""
Git Service

Thin wrapper around the git binary for the commit assistant.
"""

import subprocess
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

from bitcodefixer.core.errors import GitCommandError

logger = logging.getLogger("BitCodeFixer.GitService")


class GitService:
    """
    Service class for Git operations.

    Provides:
    - Repository detection
    - Staged change queries
    - Committing from a message file
    """

    def __init__(self, base_dir: Optional[Path] = None, timeout: int = 30):
        """
        Initialize Git service.

        Args:
            base_dir: Working directory for git commands
            timeout: Timeout for non-interactive commands
        """
        self.base_dir = Path(base_dir).resolve() if base_dir else Path.cwd()
        self.timeout = timeout
        logger.info(f"GitService initialized (base_dir: {self.base_dir})")

    def run(self, *args: str) -> str:
        """
        Run a git command and return its stdout.

        Raises:
            GitCommandError: If git exits non-zero or cannot be started
        """
        cmd = ["git", *args]
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
            logger.error(f"Git command error ({' '.join(cmd)}): {e}")
            raise GitCommandError(args, -1, str(e)) from e

        if result.returncode != 0:
            logger.debug(f"Git command failed ({' '.join(cmd)}): {result.stderr.strip()}")
            raise GitCommandError(args, result.returncode, result.stderr)
        return result.stdout

    def is_repo(self) -> bool:
        try:
            self.run("rev-parse", "--git-dir")
            return True
        except GitCommandError:
            return False

    def status_porcelain(self) -> str:
        return self.run("status", "--porcelain")

    def staged_file_names(self) -> str:
        return self.run("diff", "--cached", "--name-only")

    def staged_diff(self) -> str:
        return self.run("diff", "--cached")

    def new_files(self) -> str:
        return self.run("ls-files", "--stage", "--others", "--exclude-standard")

    def commit_from_file(
        self, message_file: Path, edit: bool = True, extra_args: Sequence[str] = ()
    ) -> Tuple[int, str]:
        """
        Run ``git commit -F <file>``.

        With ``edit`` the user's editor opens on the message, so stdin and
        stdout stay on the terminal; only stderr is captured.

        Returns:
            (exit status, stderr text)
        """
        cmd = ["git", "commit", "-F", str(message_file)]
        if edit:
            cmd.append("--edit")
        cmd.extend(extra_args)
        logger.info(f"Running {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.base_dir),
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error(f"Git command error ({' '.join(cmd)}): {e}")
            return -1, str(e)
        return result.returncode, (result.stderr or "").strip()

    @staticmethod
    def git_installed() -> bool:
        """
        Check if Git is installed.

        Returns:
            True if Git is available
        """
        try:
            return subprocess.run(
                ["git", "--version"], capture_output=True, text=True, timeout=3
            ).returncode == 0
        except (OSError, subprocess.TimeoutExpired):
            return False
