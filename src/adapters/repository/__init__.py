"""Repository adapters - Credential store implementations."""

from .json_file import JsonFileCredentialStore
from .postgres import PostgresCredentialStore, run_migrations

__all__ = ["JsonFileCredentialStore", "PostgresCredentialStore", "run_migrations"]
