"""
Pre-commit protection check.

This module orchestrates one guard run:
- load the project's ignore rules
- list candidate env files
- narrow them to what the next commit would touch
- classify every remaining file, failing on the first unprotected one

This module does NOT:
- encrypt, decrypt, or modify any file
- parse ignore-file grammar
- run git itself
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, List, Optional, Union

from .config import (
    EXEMPT_FILENAMES,
    IGNORE_FILENAME,
    PRECOMMIT_EXCLUDED,
    SECRETS_INDEX_FILENAME,
    message_prefix,
)
from .detector import is_fully_encrypted
from .errors import GitCommandError, GitError, ProtectionError
from .hooks import PrecommitHookInstaller
from .lister import EnvFileLister
from .rules import IgnoreRules, Verdict, normalize_path
from .vcs import CommitScopeProvider, GitClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardWarning:
    message: str
    help: Optional[str] = None


@dataclass(frozen=True)
class RunResult:
    success_message: str
    protected_count: int
    warnings: List[GuardWarning] = field(default_factory=list)


class Precommit:
    def __init__(
        self,
        directory: str | Path = ".",
        install: bool = False,
        env_file: Optional[Union[str, List[str]]] = None,
        exclude: Optional[Iterable[str]] = None,
        ignore_file: str = IGNORE_FILENAME,
        git: Optional[CommitScopeProvider] = None,
        installer: Optional[PrecommitHookInstaller] = None,
        detector: Callable[[str], bool] = is_fully_encrypted,
        prefix: Optional[str] = None,
    ):
        self.directory = Path(directory)
        self.install = install
        self.env_file = env_file
        self.exclude_env_file = [*PRECOMMIT_EXCLUDED, *(exclude or [])]
        self.ignore_file = ignore_file
        self.git = git if git is not None else GitClient(self.directory)
        self.installer = installer if installer is not None else PrecommitHookInstaller(self.directory)
        self.detector = detector
        self.prefix = prefix if prefix is not None else message_prefix("precommit")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> RunResult:
        """
        Check every candidate env file.

        Raises:
            ProtectionError: on the first file that is neither encrypted
                nor ignored; later files are not looked at

        Returns:
            RunResult
        """

        if self.install:
            result = self.installer.run()
            return RunResult(success_message=result.success_message, protected_count=0)

        warnings: List[GuardWarning] = []
        rules = self._load_ignore_rules(warnings)
        files = self._candidate_files()

        count = 0
        for rel_path in files:
            verdict = self._evaluate(rel_path, rules)
            logger.debug("%s: %s", rel_path, verdict.value)

            if verdict is Verdict.UNPROTECTED:
                raise self._protection_error(rel_path, warnings)

            if verdict is Verdict.IGNORED_SHOULD_NOT_BE:
                warnings.append(self._should_not_be_ignored(rel_path))

            if verdict.counts_as_protected:
                count += 1

        return RunResult(
            success_message=self._success_message(len(files), count, warnings),
            protected_count=count,
            warnings=warnings,
        )

    def explain(self, path: str | Path) -> Verdict:
        """
        Classify a single path, relative to the directory, without raising.

        Paths the run would never look at (excluded, outside the commit,
        or not env files at all) are SKIPPED_EXCLUDED.
        """

        rel_path = normalize_path(path)
        if rel_path not in self._candidate_files():
            return Verdict.SKIPPED_EXCLUDED

        return self._evaluate(rel_path, self._load_ignore_rules([]))

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _load_ignore_rules(self, warnings: List[GuardWarning]) -> IgnoreRules:
        path = self.directory / self.ignore_file
        if not path.is_file():
            warnings.append(GuardWarning(f"{self.prefix} {self.ignore_file} missing"))
            return IgnoreRules.default()

        return IgnoreRules.from_file(path)

    def _candidate_files(self) -> List[str]:
        files = self._directory_files()

        scope = self._commit_scope()
        if scope is None:
            return files

        in_scope = set(scope)
        return [f for f in files if f in in_scope]

    def _directory_files(self) -> List[str]:
        lister = EnvFileLister(self.directory, self.env_file, self.exclude_env_file)
        return lister.run()

    def _commit_scope(self) -> Optional[List[str]]:
        """None means every listed file is in scope."""

        if not self.git.is_inside_work_tree():
            return None

        try:
            return self.git.committed_files()
        except GitCommandError as e:
            logger.info("git unavailable, checking every env file: %s", e.message)
        except GitError as e:
            logger.warning("Unreadable git status, checking every env file: %s", e.message)
        return None

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _evaluate(self, rel_path: str, rules: IgnoreRules) -> Verdict:
        name = PurePosixPath(rel_path).name

        if rules.matches(rel_path):
            if name in EXEMPT_FILENAMES:
                return Verdict.IGNORED_SHOULD_NOT_BE
            return Verdict.IGNORED

        if name in EXEMPT_FILENAMES:
            return Verdict.EXEMPT

        src = (self.directory / rel_path).read_text(encoding="utf-8", errors="replace")
        if self.detector(src):
            return Verdict.ENCRYPTED

        return Verdict.UNPROTECTED

    def _display_path(self, rel_path: str) -> str:
        return normalize_path(self.directory / rel_path)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def _should_not_be_ignored(self, rel_path: str) -> GuardWarning:
        file = self._display_path(rel_path)
        return GuardWarning(
            message=f"{self.prefix} {file} (currently ignored but should not be)",
            help=f"{self.prefix} ⮕  add [!{rel_path}] to {self.ignore_file}",
        )

    def _protection_error(self, rel_path: str, warnings: List[GuardWarning]) -> ProtectionError:
        file = self._display_path(rel_path)
        if SECRETS_INDEX_FILENAME in PurePosixPath(rel_path).name:
            return ProtectionError(
                f"{self.prefix} {file} not protected (gitignored)",
                help=f"{self.prefix} ⮕  add [{rel_path}] to {self.ignore_file}",
                warnings=warnings,
            )

        return ProtectionError(
            f"{self.prefix} {file} not protected (encrypted or gitignored)",
            help=f"{self.prefix} ⮕  run [dotenvx encrypt -f {file}] or add [{rel_path}] to {self.ignore_file}",
            warnings=warnings,
        )

    def _success_message(self, total: int, count: int, warnings: List[GuardWarning]) -> str:
        if total == 0:
            message = f"{self.prefix} zero .env files"
        else:
            message = f"{self.prefix} .env files ({count}) protected (encrypted or gitignored)"

        if warnings:
            message += f" with warnings ({len(warnings)})"
        return message
