"""Git pre-commit hook installation."""

from __future__ import annotations

import os
import stat
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .config import PRECOMMIT_HOOK_COMMAND, TOOL_NAME
from .errors import HookInstallError
from .vcs import run_command


@dataclass(frozen=True)
class HookInstallResult:
    success_message: str


class PrecommitHookInstaller:
    """Make ``git commit`` run the guard first."""

    def __init__(self, directory: str | Path = ".", command: str = PRECOMMIT_HOOK_COMMAND):
        self.directory = Path(directory)
        self.command = command

    def run(self) -> HookInstallResult:
        hooks_path = self._hooks_path()
        pre_commit_path = self._resolve(f"{hooks_path}/pre-commit")

        try:
            if pre_commit_path.exists():
                if self.command in pre_commit_path.read_text(encoding="utf-8"):
                    return self._result("already installed", hooks_path)
                self._append_hook(pre_commit_path)
                return self._result("appended", hooks_path)

            self._create_hook(pre_commit_path)
            return self._result("installed", hooks_path)
        except OSError as e:
            raise HookInstallError(f"failed to modify pre-commit hook: {e}") from e

    def hook_script(self) -> str:
        executable = self.command.split()[0]
        return f"""#!/bin/sh
if ! command -v {executable} >/dev/null 2>&1
then
  echo "[{TOOL_NAME}][precommit] '{executable}' command not found"
  echo "[{TOOL_NAME}][precommit] -> install it with [pip install {TOOL_NAME}]"
  echo "[{TOOL_NAME}][precommit] -> or disable this hook with [git commit --no-verify]"
  exit 1
fi

{self.command}
"""

    def _hooks_path(self) -> str:
        """
        Ask git where hooks live.

        Honours subdirectories, linked worktrees (``.git`` is a file there)
        and ``core.hooksPath``.
        """

        try:
            result = run_command(["git", "rev-parse", "--git-path", "hooks"], cwd=str(self.directory))
        except (OSError, subprocess.TimeoutExpired) as e:
            raise HookInstallError(
                f"failed to modify pre-commit hook: git could not be run ({e})",
                help="install git, or check that the directory exists",
            ) from e

        if not result.success:
            raise HookInstallError(
                f"failed to modify pre-commit hook: {self.directory} is not a git repository",
                help="run [git init] first",
            )

        return Path(result.stdout.strip()).as_posix()

    def _resolve(self, path: str) -> Path:
        # git answers relative to the directory it ran in
        resolved = Path(path)
        return resolved if resolved.is_absolute() else self.directory / resolved

    def _result(self, action: str, hooks_path: str) -> HookInstallResult:
        return HookInstallResult(
            success_message=f"{self.command} {action} [{hooks_path}/pre-commit]"
        )

    def _create_hook(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.hook_script(), encoding="utf-8")
        os.chmod(
            path,
            stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH,
        )

    def _append_hook(self, path: Path) -> None:
        existing = path.read_text(encoding="utf-8")
        path.write_text(
            existing.rstrip("\n") + "\n\n" + self.command + "\n",
            encoding="utf-8",
        )
