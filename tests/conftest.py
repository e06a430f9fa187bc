"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A low-cost scrypt hasher (n=1024) so tests stay fast
- A file-backed credential store rooted in tmp_path
"""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.adapters.hashing.scrypt import ScryptPasswordHasher
from src.adapters.repository.json_file import JsonFileCredentialStore

FAST_SCRYPT_N = 2**10


@pytest.fixture
def hasher() -> Generator[ScryptPasswordHasher, None, None]:
    """Scrypt hasher with test-sized cost parameters."""
    hasher = ScryptPasswordHasher(n=FAST_SCRYPT_N, timeout_seconds=10.0)
    yield hasher
    hasher.close()


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    """Credentials file location whose parent directory does not exist yet."""
    return tmp_path / "data" / "users.json"


@pytest.fixture
def store(credentials_path: Path) -> JsonFileCredentialStore:
    """Empty file-backed credential store."""
    return JsonFileCredentialStore(credentials_path)
