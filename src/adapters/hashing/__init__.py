"""Password hashing adapters - Key-derivation implementations."""

from .scrypt import DIGEST_LENGTH, SALT_LENGTH, ScryptPasswordHasher

__all__ = ["DIGEST_LENGTH", "SALT_LENGTH", "ScryptPasswordHasher"]
