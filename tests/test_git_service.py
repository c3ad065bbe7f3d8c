import subprocess
from pathlib import Path

import pytest

from bitcodefixer.core.errors import GitCommandError
from bitcodefixer.services.git_service import GitService


class FakeRun:
    """Records subprocess.run calls and answers from a table keyed by git args."""

    def __init__(self, answers=None):
        self.answers = answers or {}
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        returncode, stdout, stderr = self.answers.get(tuple(cmd[1:]), (0, "", ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_run(monkeypatch):
    runner = FakeRun()
    monkeypatch.setattr("bitcodefixer.services.git_service.subprocess.run", runner)
    return runner


def test_queries_use_expected_git_arguments(tmp_path, fake_run):
    git = GitService(tmp_path)
    git.status_porcelain()
    git.staged_file_names()
    git.staged_diff()
    git.new_files()

    assert [cmd for cmd, _ in fake_run.calls] == [
        ["git", "status", "--porcelain"],
        ["git", "diff", "--cached", "--name-only"],
        ["git", "diff", "--cached"],
        ["git", "ls-files", "--stage", "--others", "--exclude-standard"],
    ]
    assert all(kwargs["cwd"] == str(tmp_path.resolve()) for _, kwargs in fake_run.calls)


def test_run_raises_on_non_zero_exit(tmp_path, fake_run):
    fake_run.answers[("rev-parse", "--git-dir")] = (128, "", "fatal: not a git repository\n")
    git = GitService(tmp_path)

    with pytest.raises(GitCommandError) as excinfo:
        git.run("rev-parse", "--git-dir")
    assert excinfo.value.returncode == 128
    assert excinfo.value.stderr == "fatal: not a git repository"
    assert git.is_repo() is False


def test_is_repo(tmp_path, fake_run):
    fake_run.answers[("rev-parse", "--git-dir")] = (0, ".git\n", "")
    assert GitService(tmp_path).is_repo() is True


def test_run_reports_missing_git(tmp_path, monkeypatch):
    def missing(cmd, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr("bitcodefixer.services.git_service.subprocess.run", missing)
    with pytest.raises(GitCommandError):
        GitService(tmp_path).staged_diff()
    assert GitService.git_installed() is False


@pytest.mark.parametrize("edit,expected_tail", [(True, ["--edit"]), (False, [])])
def test_commit_from_file(tmp_path, fake_run, edit, expected_tail):
    message_file = tmp_path / "msg.txt"
    rc, err = GitService(tmp_path).commit_from_file(message_file, edit=edit)

    cmd, kwargs = fake_run.calls[-1]
    assert (rc, err) == (0, "")
    assert cmd == ["git", "commit", "-F", str(message_file), *expected_tail]
    # the editor needs the terminal; only stderr is captured
    assert "capture_output" not in kwargs
    assert "stdout" not in kwargs
    assert kwargs["stderr"] == subprocess.PIPE


def test_commit_from_file_returns_exit_status(tmp_path, fake_run):
    message_file = Path(tmp_path / "msg.txt")
    fake_run.answers[("commit", "-F", str(message_file), "--edit")] = (1, "", "nothing added to commit\n")
    assert GitService(tmp_path).commit_from_file(message_file) == (1, "nothing added to commit")
