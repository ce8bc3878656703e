"""
Version-control queries.

The guard only ever asks git two questions: "is this directory a work
tree?" and "which paths would the next commit touch?". Both live behind
the CommitScopeProvider protocol so tests can answer them without git.
"""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

from .config import GIT_TIMEOUT_SECONDS
from .errors import GitCommandError, GitOutputError


@dataclass(frozen=True)
class CommandResult:
    """Result of a subprocess execution."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_command(
    args: List[str],
    *,
    cwd: Optional[str] = None,
    timeout: Optional[float] = GIT_TIMEOUT_SECONDS,
) -> CommandResult:
    """
    Execute a command and capture its output.

    Raises:
        FileNotFoundError: if the executable is not found
        subprocess.TimeoutExpired: if the command exceeds the timeout
    """

    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


_PORCELAIN_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"|\S+')
_C_ESCAPE = re.compile(rb"\\([0-7]{3}|.)")
_C_ESCAPES = {
    b"a": b"\a",
    b"b": b"\b",
    b"f": b"\f",
    b"n": b"\n",
    b"r": b"\r",
    b"t": b"\t",
    b"v": b"\v",
    b'"': b'"',
    b"\\": b"\\",
}


def unquote_path(token: str) -> str:
    """
    Undo git's C-style path quoting (``"caf\\303\\251/.env"`` -> ``café/.env``).

    Unquoted tokens are returned as they are.

    Raises:
        GitOutputError: for an unterminated quote or an unknown escape
    """

    if not token.startswith('"'):
        return token

    if len(token) < 2 or not token.endswith('"'):
        raise GitOutputError(f"Unterminated quoted path in git output: {token}")

    def _unescape(match: re.Match) -> bytes:
        code = match.group(1)
        if len(code) == 3:
            return bytes([int(code, 8) & 0xFF])
        if code not in _C_ESCAPES:
            raise GitOutputError(f"Unknown escape in quoted path: {token}")
        return _C_ESCAPES[code]

    raw = _C_ESCAPE.sub(_unescape, token[1:-1].encode("utf-8"))
    return raw.decode("utf-8", errors="surrogateescape")


def parse_porcelain_line(line: str) -> str:
    """
    Return the path a ``git commit --porcelain`` status line refers to.

    ``XY path`` yields ``path``; renames and copies (``XY old -> new``)
    yield the destination. A quoted path counts as a single token.

    Raises:
        GitOutputError: for any other shape
    """

    parts = _PORCELAIN_TOKEN.findall(line.strip())

    if len(parts) == 2:
        return unquote_path(parts[1])

    if len(parts) == 4:
        return unquote_path(parts[3])

    raise GitOutputError(f"Unexpected format in git commit porcelain output: {line}")


@runtime_checkable
class CommitScopeProvider(Protocol):
    def is_inside_work_tree(self) -> bool: ...

    def committed_files(self) -> List[str]: ...


class GitClient:
    def __init__(self, cwd: str | Path = "."):
        self.cwd = Path(cwd)

    def is_inside_work_tree(self) -> bool:
        """Any failure, including a missing git binary, means "no"."""

        try:
            result = self._git("rev-parse", "--is-inside-work-tree")
        except GitCommandError:
            return False

        return result.success and result.stdout.strip() == "true"

    def committed_files(self) -> List[str]:
        """
        Paths the next ``git commit -a`` would include.

        Paths are relative to this client's directory; anything outside it
        is left out.

        Raises:
            GitCommandError: if git fails
            GitOutputError: if a status line cannot be parsed
        """

        # exit status 1 only means "nothing to commit"
        result = self._git("-c", "core.quotePath=false", "commit", "-a", "--dry-run", "--porcelain")
        if result.returncode not in (0, 1):
            raise GitCommandError(
                f"git commit --dry-run failed ({result.returncode}): {result.stderr.strip()}"
            )

        paths = [
            parse_porcelain_line(line)
            for line in result.stdout.splitlines()
            if line.strip()
        ]

        prefix = self._show_prefix()
        return [path[len(prefix):] for path in paths if path.startswith(prefix)]

    def _show_prefix(self) -> str:
        result = self._git("rev-parse", "--show-prefix")
        if not result.success:
            raise GitCommandError(f"git rev-parse --show-prefix failed: {result.stderr.strip()}")
        return result.stdout.strip()

    def _git(self, *args: str) -> CommandResult:
        try:
            return run_command(["git", *args], cwd=str(self.cwd))
        except FileNotFoundError as e:
            raise GitCommandError("git executable not found") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(f"git {' '.join(args)} timed out") from e
        except OSError as e:
            raise GitCommandError(f"git {' '.join(args)} could not be run: {e}") from e
