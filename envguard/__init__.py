"""
envguard

A pre-commit check that keeps plaintext .env files out of git: every
env file about to be committed must be encrypted or gitignored.
"""

__version__ = "0.1.0"

from .errors import EnvGuardError, ProtectionError
from .detector import is_fully_encrypted
from .lister import EnvFileLister
from .precommit import GuardWarning, Precommit, RunResult
from .rules import IgnoreRules, Verdict

__all__ = [
    "EnvGuardError",
    "ProtectionError",
    "is_fully_encrypted",
    "EnvFileLister",
    "GuardWarning",
    "Precommit",
    "RunResult",
    "IgnoreRules",
    "Verdict",
]
