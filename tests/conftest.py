"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from envguard.hooks import HookInstallResult

ENCRYPTED_ENV = (
    '#/-------------------[DOTENV_PUBLIC_KEY]--------------------/\n'
    'DOTENV_PUBLIC_KEY="034af93e93708b994c10f236c96ef88e47291066946cce2e8d98c9e02c741ced45"\n'
    '\n'
    'HELLO="encrypted:BDb7t/QCPzqKB8o7fQvQ0BFDzJ5EOu0i4ZFyfPpWk1hpfe2LNKRMvEJzXvdXRIGtiDkdGfpcBFEfVgp6TCp8CHNW"\n'
)

PLAINTEXT_ENV = "HELLO=world\n"


class FakeGit:
    """Deterministic stand-in for GitClient."""

    def __init__(
        self,
        inside: bool = True,
        files: Optional[List[str]] = None,
        error: Optional[Exception] = None,
    ):
        self.inside = inside
        self.files = files or []
        self.error = error
        self.calls = 0

    def is_inside_work_tree(self) -> bool:
        return self.inside

    def committed_files(self) -> List[str]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.files)


class FakeInstaller:
    def __init__(self, message: str = "envguard precommit installed [.git/hooks/pre-commit]"):
        self.message = message
        self.calls = 0

    def run(self) -> HookInstallResult:
        self.calls += 1
        return HookInstallResult(success_message=self.message)


class RecordingDetector:
    """Encryption detector that remembers what it was asked about."""

    def __init__(self, result: bool = False):
        self.result = result
        self.sources: List[str] = []

    def __call__(self, src: str) -> bool:
        self.sources.append(src)
        return self.result


@pytest.fixture
def no_git() -> FakeGit:
    """A directory that is not under version control."""
    return FakeGit(inside=False)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[..., Path]:
    """Write a file below tmp_path, optionally pinning its mtime."""

    def _write(rel_path: str, content: str = "", mtime: Optional[int] = None) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def monorepo(write_file: Callable[..., Path], tmp_path: Path) -> Path:
    """A small project tree with env files at several depths."""
    write_file(".env", PLAINTEXT_ENV, mtime=5000)
    write_file(".env.local", PLAINTEXT_ENV, mtime=4000)
    write_file("apps/app1/.env", PLAINTEXT_ENV, mtime=1000)
    write_file("apps/app2/.env", PLAINTEXT_ENV, mtime=2000)
    write_file("README.md", "# project\n", mtime=9000)
    write_file("node_modules/pkg/.env", PLAINTEXT_ENV, mtime=9000)
    return tmp_path


@pytest.fixture
def make_git() -> Callable[..., FakeGit]:
    """Factory for FakeGit instances."""
    return FakeGit


@pytest.fixture
def fake_installer() -> FakeInstaller:
    return FakeInstaller()


@pytest.fixture
def make_detector() -> Callable[..., RecordingDetector]:
    """Factory for RecordingDetector instances."""
    return RecordingDetector


@pytest.fixture
def encrypted_env() -> str:
    """Env file contents produced by an encrypting tool."""
    return ENCRYPTED_ENV


@pytest.fixture
def plaintext_env() -> str:
    return PLAINTEXT_ENV
