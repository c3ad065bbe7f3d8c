"""
Commit Assistant.

Collects staged changes, asks the model for a conventional-commit message,
and runs ``git commit -F`` with it. Each step either succeeds or ends the
run; there are no retries.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional

from bitcodefixer.core.ai.base import BaseAIProvider, build_messages
from bitcodefixer.core.errors import (
    CommitExecError,
    EmptyMessageError,
    GitCommandError,
    NoStagedChangesError,
    NotARepoError,
    UpstreamError,
)
from bitcodefixer.core.prompts import COMMIT_SYSTEM_PROMPT, build_commit_prompt
from bitcodefixer.services.git_service import GitService

logger = logging.getLogger(__name__)

COMMIT_TEMPERATURE = 0.2
NEW_FILES_HEADER = "New files:\n"


class CommitAssistant:
    """
    AI-generated commit messages for the staged changes of one repository.

    Args:
        git: Git service bound to the repository
        provider: Completion provider
        model: Model override; provider default when None
    """

    def __init__(self, git: GitService, provider: BaseAIProvider, model: Optional[str] = None):
        self.git = git
        self.provider = provider
        self.model = model

    def collect_changes(self) -> str:
        """
        Return the staged diff, or the new-file listing when the diff is empty.

        Raises:
            NotARepoError: Not inside a git repository
            NoStagedChangesError: Nothing is staged
        """
        if not self.git.is_repo():
            raise NotARepoError(f"Not a git repository: {self.git.base_dir}")

        try:
            if not self.git.status_porcelain().strip():
                raise NoStagedChangesError("No changes to commit")
            if not self.git.staged_file_names().strip():
                raise NoStagedChangesError("No staged files")

            diff = self.git.staged_diff()
            if diff.strip():
                return diff

            # Newly added empty files produce no diff body.
            new_files = self.git.new_files()
        except GitCommandError as e:
            raise NoStagedChangesError(f"Failed to read staged changes: {e}") from e

        if new_files.strip():
            return NEW_FILES_HEADER + new_files
        raise NoStagedChangesError("Unable to read the staged changes")

    async def generate_message(self, changes: str) -> str:
        """
        Ask the model for a commit message describing ``changes``.

        Raises:
            UpstreamError: The completion call failed
            EmptyMessageError: The model returned nothing
        """
        logger.debug(f"Generating commit message for {len(changes)} characters of changes")
        messages = build_messages(COMMIT_SYSTEM_PROMPT, build_commit_prompt(changes))
        try:
            response = await self.provider.complete(
                messages, model=self.model, temperature=COMMIT_TEMPERATURE
            )
        except Exception as e:
            logger.error(f"Error generating commit message: {e}")
            raise UpstreamError(f"Failed to generate commit message: {e}") from e

        message = (response.content or "").strip()
        if not message:
            raise EmptyMessageError("AI returned an empty commit message")

        logger.info(f"Generated commit message: {message.splitlines()[0]}")
        return message

    def commit(self, message: str, edit: bool = True) -> None:
        """
        Commit the staged changes with ``message``.

        The message goes through a temporary file that is removed whatever
        the outcome of ``git commit``.

        Raises:
            CommitExecError: git commit exited non-zero
        """
        fd, tmp_name = tempfile.mkstemp(prefix="commit-message-", suffix=".txt")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(message)
            returncode, stderr = self.git.commit_from_file(Path(tmp_name), edit=edit)
        finally:
            try:
                os.unlink(tmp_name)
            except OSError as e:
                logger.warning(f"Could not remove {tmp_name}: {e}")

        if returncode != 0:
            detail = f": {stderr}" if stderr else ""
            raise CommitExecError(
                f"Failed to execute git commit (exit {returncode}){detail}", returncode, stderr
            )

    async def run(
        self,
        on_progress: Optional[Callable[[int], None]] = None,
        edit: bool = True,
    ) -> str:
        """Collect, generate and commit. Returns the commit message used."""
        if on_progress:
            on_progress(0)
        changes = self.collect_changes()
        message = await self.generate_message(changes)
        if on_progress:
            on_progress(100)
        self.commit(message, edit=edit)
        return message
