"""
Global configuration and environment handling.

This module is responsible for:
- Defining global constants and defaults
- Naming the conventional env files the guard cares about
- Reading the few environment variables the tool honours

Nothing in this file should depend on:
- the filesystem
- the manifest structure
- git
- CLI arguments

If something here changes, the *entire tool* behavior changes.
"""

from __future__ import annotations

import os
from typing import Final, Optional, Tuple

# ---------------------------------------------------------------------------
# Tool / format versioning
# ---------------------------------------------------------------------------

SUPPORTED_MANIFEST_VERSION: Final[int] = 1
TOOL_VERSION: Final[str] = "0.1.0"
TOOL_NAME: Final[str] = "envguard"

# ---------------------------------------------------------------------------
# Conventional file names
# ---------------------------------------------------------------------------

ENV_FILE_PREFIX: Final[str] = ".env"

# Holds decryption keys; must never be committed, not even encrypted.
SECRETS_INDEX_FILENAME: Final[str] = ".env.keys"

# Expected to be tracked and visible; never inspected for content.
EXEMPT_FILENAMES: Final[Tuple[str, ...]] = (".env.example", ".env.vault")

IGNORE_FILENAME: Final[str] = ".gitignore"
MANIFEST_FILENAME: Final[str] = ".envguard.yml"

ENCRYPTED_VALUE_PREFIX: Final[str] = "encrypted:"
PUBLIC_KEY_PREFIX: Final[str] = "DOTENV_PUBLIC_KEY"

# ---------------------------------------------------------------------------
# Default behavior
# ---------------------------------------------------------------------------

# Never walked into by the lister.
ALWAYS_EXCLUDED: Final[Tuple[str, ...]] = ("node_modules/**", ".git/**")

# Test fixtures routinely carry plaintext env files.
PRECOMMIT_EXCLUDED: Final[Tuple[str, ...]] = (
    "test/**",
    "tests/**",
    "spec/**",
    "specs/**",
    "pytest/**",
    "test_suite/**",
)

PRECOMMIT_HOOK_COMMAND: Final[str] = f"{TOOL_NAME} precommit"
GIT_TIMEOUT_SECONDS: Final[float] = 60.0

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_CONFIG_PATH: Final[str] = "ENVGUARD_CONFIG"
ENV_LOG_LEVEL: Final[str] = "ENVGUARD_LOG_LEVEL"

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def message_prefix(command: str = "precommit") -> str:
    """Return the cosmetic ``[envguard@x.y.z][command]`` message prefix."""
    return f"[{TOOL_NAME}@{TOOL_VERSION}][{command}]"


def get_config_path() -> Optional[str]:
    """
    Return the manifest path set through the environment, if any.

    Returns:
        str or None: value of ENVGUARD_CONFIG
    """

    return os.getenv(ENV_CONFIG_PATH) or None


def get_log_level() -> str:
    """
    Return the default log level name.

    The CLI ``--verbose`` flag always wins over this value.
    """

    return os.getenv(ENV_LOG_LEVEL, "WARNING").upper()
