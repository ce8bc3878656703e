"""
Encryption detection for env file contents.

A file is "fully encrypted" when every secret-bearing value it assigns is
ciphertext. Public keys are the one kind of value allowed in plaintext.
"""

from __future__ import annotations

import io

from dotenv import dotenv_values

from .config import ENCRYPTED_VALUE_PREFIX, PUBLIC_KEY_PREFIX


def is_encrypted(value: str) -> bool:
    return value.startswith(ENCRYPTED_VALUE_PREFIX)


def is_fully_encrypted(src: str) -> bool:
    """
    Return True if every assigned value in ``src`` is encrypted.

    Bare keys without a value carry no secret and are skipped. Content
    without any assignment is trivially fully encrypted.
    """

    parsed = dotenv_values(stream=io.StringIO(src), interpolate=False)

    for key, value in parsed.items():
        if value is None:
            continue
        if key.startswith(PUBLIC_KEY_PREFIX):
            continue
        if not is_encrypted(value):
            return False

    return True
