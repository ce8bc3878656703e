"""
Exception hierarchy.

Every error the tool raises on purpose derives from EnvGuardError and
carries a human-readable message plus an optional remediation hint.
"""

from __future__ import annotations

from typing import Any, List, Optional


class EnvGuardError(Exception):
    def __init__(self, message: str, help: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.help = help


class ProtectionError(EnvGuardError):
    """An env file would be committed without being encrypted or ignored."""

    def __init__(self, message: str, help: Optional[str] = None, warnings: Optional[List[Any]] = None):
        super().__init__(message, help)
        # warnings collected before the failure
        self.warnings = list(warnings or [])


class ManifestError(EnvGuardError):
    """The project manifest is missing required keys or malformed."""


class GitError(EnvGuardError):
    pass


class GitCommandError(GitError):
    """git could not be run, or did not finish in time."""


class GitOutputError(GitError):
    """git produced output in a format we do not understand."""


class HookInstallError(EnvGuardError):
    pass
