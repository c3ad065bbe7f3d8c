"""
Error types for BitCodeFixer.

Every failure the fixer or the commit assistant reports to the user is a
subclass of BitCodeFixerError, so the CLI can print it and exit non-zero.
"""

from typing import Optional


class BitCodeFixerError(Exception):
    """Base class for all project errors."""


class ConfigLoadError(BitCodeFixerError):
    """Config file could not be read or parsed. Never fatal."""


class UpstreamError(BitCodeFixerError):
    """The completion endpoint call failed."""


class EmptyFixError(BitCodeFixerError):
    """The model response contained no usable code."""


class EmptyMessageError(BitCodeFixerError):
    """The model returned an empty commit message."""


class DiagnosticsError(BitCodeFixerError):
    """Diagnostics could not be loaded from the given source."""


class GitCommandError(BitCodeFixerError):
    """A git invocation exited with a non-zero status."""

    def __init__(self, args, returncode: int, stderr: str = ""):
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"git {' '.join(self.command)} exited with {returncode}{detail}")


class NotARepoError(BitCodeFixerError):
    """Working directory is not inside a git repository."""


class NoStagedChangesError(BitCodeFixerError):
    """Nothing is staged for commit."""


class CommitExecError(BitCodeFixerError):
    """`git commit` returned a non-zero status."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
