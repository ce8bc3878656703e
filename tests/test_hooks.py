"""Unit tests for PrecommitHookInstaller.

git itself is never run; run_command is patched to answer
``git rev-parse --git-path hooks``.
"""

import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from envguard.errors import HookInstallError
from envguard.hooks import PrecommitHookInstaller
from envguard.vcs import CommandResult


def git_path(stdout: str, returncode: int = 0) -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=returncode)


@pytest.fixture
def repo(tmp_path: Path):
    """A repository whose hooks live in the usual place."""
    (tmp_path / ".git").mkdir()
    with patch("envguard.hooks.run_command", return_value=git_path(".git/hooks\n")) as mock_run:
        yield tmp_path, mock_run


class TestPrecommitHookInstaller:
    def test_not_a_repository(self, tmp_path: Path) -> None:
        answer = CommandResult(stdout="", stderr="fatal: not a git repository", returncode=128)

        with patch("envguard.hooks.run_command", return_value=answer):
            with pytest.raises(HookInstallError, match="not a git repository"):
                PrecommitHookInstaller(tmp_path).run()

    @pytest.mark.parametrize(
        "error",
        [FileNotFoundError("git"), subprocess.TimeoutExpired(cmd="git", timeout=60)],
    )
    def test_git_cannot_run(self, tmp_path: Path, error: Exception) -> None:
        with patch("envguard.hooks.run_command", side_effect=error):
            with pytest.raises(HookInstallError, match="git could not be run"):
                PrecommitHookInstaller(tmp_path).run()

    def test_asks_git_for_hooks_directory(self, repo) -> None:
        path, mock_run = repo

        PrecommitHookInstaller(path).run()

        mock_run.assert_called_once_with(["git", "rev-parse", "--git-path", "hooks"], cwd=str(path))

    def test_installs_new_hook(self, repo) -> None:
        path, _ = repo

        result = PrecommitHookInstaller(path).run()

        hook = path / ".git" / "hooks" / "pre-commit"
        assert result.success_message == "envguard precommit installed [.git/hooks/pre-commit]"
        assert hook.read_text(encoding="utf-8").startswith("#!/bin/sh\n")
        assert "\nenvguard precommit\n" in hook.read_text(encoding="utf-8")
        assert os.access(hook, os.X_OK)

    def test_existing_hook_with_command_is_untouched(self, repo) -> None:
        path, _ = repo
        hook = path / ".git" / "hooks" / "pre-commit"
        hook.parent.mkdir()
        hook.write_text("#!/bin/sh\nenvguard precommit\n", encoding="utf-8")

        result = PrecommitHookInstaller(path).run()

        assert result.success_message == "envguard precommit already installed [.git/hooks/pre-commit]"
        assert hook.read_text(encoding="utf-8") == "#!/bin/sh\nenvguard precommit\n"

    def test_appends_to_foreign_hook(self, repo) -> None:
        path, _ = repo
        hook = path / ".git" / "hooks" / "pre-commit"
        hook.parent.mkdir()
        hook.write_text("#!/bin/sh\nmake lint\n", encoding="utf-8")

        result = PrecommitHookInstaller(path).run()

        assert result.success_message == "envguard precommit appended [.git/hooks/pre-commit]"
        assert hook.read_text(encoding="utf-8") == "#!/bin/sh\nmake lint\n\nenvguard precommit\n"

    def test_custom_command(self, repo) -> None:
        path, _ = repo
        installer = PrecommitHookInstaller(path, command="python -m envguard precommit")

        installer.run()

        content = (path / ".git" / "hooks" / "pre-commit").read_text(encoding="utf-8")
        assert "command -v python " in content
        assert content.rstrip().endswith("python -m envguard precommit")


class TestHooksLocation:
    def test_subdirectory_of_repository(self, tmp_path: Path) -> None:
        subdir = tmp_path / "apps" / "api"
        subdir.mkdir(parents=True)
        (tmp_path / ".git").mkdir()

        with patch("envguard.hooks.run_command", return_value=git_path("../../.git/hooks\n")):
            result = PrecommitHookInstaller(subdir).run()

        assert (tmp_path / ".git" / "hooks" / "pre-commit").is_file()
        assert result.success_message == "envguard precommit installed [../../.git/hooks/pre-commit]"

    def test_linked_worktree(self, tmp_path: Path) -> None:
        """In a worktree .git is a file; hooks live in the main repository."""
        worktree = tmp_path / "feature"
        worktree.mkdir()
        (worktree / ".git").write_text("gitdir: ../main/.git/worktrees/feature\n", encoding="utf-8")
        hooks = tmp_path / "main" / ".git" / "hooks"

        with patch("envguard.hooks.run_command", return_value=git_path(f"{hooks.as_posix()}\n")):
            result = PrecommitHookInstaller(worktree).run()

        assert (hooks / "pre-commit").is_file()
        assert not (worktree / ".git" / "hooks").exists()
        assert result.success_message.endswith(f"installed [{hooks.as_posix()}/pre-commit]")
