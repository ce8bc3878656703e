"""
Manifest loading, validation, and normalization.

This module answers one question:
    "How does this project want the guard to look for env files?"

Responsibilities:
- Load the optional .envguard.yml file
- Validate structure and version
- Normalize defaults
- Expose a clean Python representation

This module does NOT:
- Match files
- Walk the filesystem
- Talk to git
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .config import IGNORE_FILENAME, MANIFEST_FILENAME, SUPPORTED_MANIFEST_VERSION
from .errors import ManifestError


@dataclass
class GuardManifest:
    version: int = SUPPORTED_MANIFEST_VERSION
    env_file: Optional[Union[str, List[str]]] = None
    exclude: List[str] = field(default_factory=list)
    ignore_file: str = IGNORE_FILENAME

    # ------------------------------------------------------------------
    # Loading API
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> "GuardManifest":
        """
        Load and validate a manifest file.

        Args:
            path: Path to the manifest YAML file

        Raises:
            ManifestError: if the file is missing or invalid

        Returns:
            GuardManifest
        """

        path = Path(path)
        if not path.exists():
            raise ManifestError(f"Manifest file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise ManifestError(f"Manifest {path} is not valid YAML: {e}") from e

        if not isinstance(raw, dict):
            raise ManifestError(f"Manifest {path} must be a mapping")

        return cls._from_dict(raw)

    @classmethod
    def discover(cls, directory: str | Path = ".", path: Optional[str | Path] = None) -> "GuardManifest":
        """
        Load an explicit manifest, or the one at the directory root when present.

        A project without a manifest gets the defaults.
        """

        if path is not None:
            return cls.load(path)

        candidate = Path(directory) / MANIFEST_FILENAME
        if candidate.is_file():
            return cls.load(candidate)

        return cls()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "GuardManifest":
        version = data.get("version", SUPPORTED_MANIFEST_VERSION)
        if version != SUPPORTED_MANIFEST_VERSION:
            raise ManifestError(f"Unsupported manifest version: {version}")

        return cls(
            version=version,
            env_file=cls._parse_env_file(data.get("env_file")),
            exclude=cls._parse_string_list(data.get("exclude"), "exclude"),
            ignore_file=cls._parse_ignore_file(data.get("ignore_file")),
        )

    @staticmethod
    def _parse_env_file(value: Any) -> Optional[Union[str, List[str]]]:
        if value is None or isinstance(value, str):
            return value

        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return list(value)

        raise ManifestError("'env_file' must be a string or a list of strings")

    @staticmethod
    def _parse_string_list(value: Any, key: str) -> List[str]:
        if value is None:
            return []

        if isinstance(value, str):
            return [value]

        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return list(value)

        raise ManifestError(f"'{key}' must be a list of glob patterns")

    @staticmethod
    def _parse_ignore_file(value: Any) -> str:
        if value is None:
            return IGNORE_FILENAME

        if not isinstance(value, str) or not value.strip():
            raise ManifestError("'ignore_file' must be a non-empty string")

        return value
