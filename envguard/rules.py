"""
Ignore-rule matching and per-file verdicts.

Given the text of an ignore file, this module answers a single question:
"is this path ignored?". Pattern grammar is entirely delegated to pathspec.

Rules DO NOT perform actions. They only return decisions.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePath
from typing import Iterable

import pathspec

from .config import SECRETS_INDEX_FILENAME


class Verdict(Enum):
    SKIPPED_EXCLUDED = "skipped-excluded"
    IGNORED = "ignored"
    IGNORED_SHOULD_NOT_BE = "ignored-but-should-not-be"
    EXEMPT = "exempt"
    ENCRYPTED = "encrypted"
    UNPROTECTED = "unprotected"

    @property
    def counts_as_protected(self) -> bool:
        """Ignored and encrypted files are both safe to commit around."""
        return self in (Verdict.IGNORED, Verdict.IGNORED_SHOULD_NOT_BE, Verdict.ENCRYPTED)


def normalize_path(path: str | PurePath) -> str:
    """Return a POSIX path without a leading ``./``."""

    path_str = PurePath(path).as_posix()
    while path_str.startswith("./"):
        path_str = path_str[2:]
    return path_str


class IgnoreRules:
    def __init__(self, lines: Iterable[str]):
        self.lines = list(lines)
        self._spec = pathspec.GitIgnoreSpec.from_lines(self.lines)

    @classmethod
    def from_text(cls, text: str) -> "IgnoreRules":
        return cls(text.splitlines())

    @classmethod
    def from_file(cls, path: str | Path) -> "IgnoreRules":
        return cls.from_text(Path(path).read_text(encoding="utf-8", errors="replace"))

    @classmethod
    def default(cls) -> "IgnoreRules":
        """
        Rules used when a project has no ignore file.

        Only the secrets index is ignored; every other env file may be
        committed as long as it is encrypted.
        """

        return cls([SECRETS_INDEX_FILENAME])

    def matches(self, path: str | PurePath) -> bool:
        return self._spec.match_file(normalize_path(path))
