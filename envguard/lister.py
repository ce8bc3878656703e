"""
Env file discovery.

This module is responsible for:
- resolving env file patterns into recursive globs
- walking the project tree below a directory
- removing excluded paths
- ordering results, most recently modified first

This module does NOT:
- read file contents
- consult .gitignore or git
- decide whether a file is protected
"""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import pathspec

from .config import ALWAYS_EXCLUDED, ENV_FILE_PREFIX

logger = logging.getLogger(__name__)

RECURSIVE_PREFIX = "**/"


def _recursive(pattern: str) -> str:
    if pattern.startswith(RECURSIVE_PREFIX):
        return pattern
    return RECURSIVE_PREFIX + pattern


class EnvFileLister:
    def __init__(
        self,
        directory: str | Path = ".",
        env_file: Optional[Union[str, List[str]]] = None,
        exclude: Optional[Iterable[str]] = None,
    ):
        self.directory = Path(directory)
        self.env_file = env_file
        self.exclude = list(exclude or [])
        self._excluded = pathspec.GitIgnoreSpec.from_lines(
            _recursive(pattern) for pattern in (*ALWAYS_EXCLUDED, *self.exclude)
        )

    def run(self) -> List[str]:
        """
        List env files below the directory.

        Returns:
            POSIX paths relative to the directory, newest first
        """

        return self._filepaths()

    def _patterns(self) -> Union[str, List[str]]:
        """
        Resolve the env file setting into glob pattern(s).

        A string stays a string and a list stays a list; both are made
        recursive so that nested projects are found.
        """

        if self.env_file is None:
            return f"{RECURSIVE_PREFIX}{ENV_FILE_PREFIX}*"

        if isinstance(self.env_file, str):
            return _recursive(self.env_file)

        return [_recursive(part) for part in self.env_file]

    def _filepaths(self) -> List[str]:
        # resolve() makes "./apps/", "apps/" and "apps" equivalent
        root = self.directory.resolve()
        if not root.is_dir():
            logger.debug("Not a directory, nothing to list: %s", root)
            return []

        patterns = self._patterns()
        if isinstance(patterns, str):
            patterns = [patterns]

        found = set()
        for pattern in patterns:
            for match in glob.glob(pattern, root_dir=root, recursive=True, include_hidden=True):
                rel_path = Path(match).as_posix()

                if self._is_excluded(rel_path):
                    continue

                if not (root / rel_path).is_file():
                    continue

                found.add(rel_path)

        logger.debug("Listed %d env file(s) below %s", len(found), root)
        return self._newest_first(root, found)

    def _is_excluded(self, rel_path: str) -> bool:
        """Exclusions match at any depth, like the include patterns."""
        return self._excluded.match_file(rel_path)

    @staticmethod
    def _newest_first(root: Path, paths: Iterable[str]) -> List[str]:
        stamped: List[Tuple[int, str]] = []
        for rel_path in paths:
            try:
                mtime = (root / rel_path).stat().st_mtime_ns
            except OSError:
                # removed while we were walking
                continue
            stamped.append((mtime, rel_path))

        stamped.sort(key=lambda item: (-item[0], item[1]))
        return [rel_path for _, rel_path in stamped]
