"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, and the Credential record that flows through them.
Adapters implement these protocols.
"""

from collections.abc import Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class Credential:
    """
    One registered identity.

    Immutable once persisted. salt and digest are kept out of repr
    so a credential can be logged without leaking key material.
    """

    username: str
    salt: bytes = field(repr=False)
    digest: bytes = field(repr=False)


class CredentialStore(Protocol):
    """Port interface for durable credential persistence."""

    def load_all(self) -> list[Credential]:
        """
        Load every persisted credential.

        Returns:
            Credentials in insertion order; an empty list if nothing
            has been persisted yet.

        Raises:
            StoreUnavailable: Store exists but cannot be read
            StoreCorrupted: Store exists but cannot be parsed
        """
        ...

    def commit_all(self, credentials: Sequence[Credential]) -> None:
        """
        Replace the persisted collection with `credentials`.

        Atomic with respect to readers and other commits: nobody observes
        a partially written collection.

        Raises:
            StoreUnavailable: Collection could not be written
        """
        ...

    def exclusive(self) -> AbstractContextManager[None]:
        """
        Acquire the store-wide write lock.

        Held across a load -> check -> commit sequence so that concurrent
        writers cannot interleave and lose each other's updates.
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for salted password key derivation."""

    def generate_salt(self) -> bytes:
        """Return a fresh, cryptographically random salt."""
        ...

    def derive(self, password: str, salt: bytes) -> bytes:
        """
        Derive the fixed-length digest for (password, salt).

        Deterministic for a given pair.

        Raises:
            PasswordHashingFailed: KDF primitive errored
            PasswordHashingTimeout: KDF exceeded its time bound
        """
        ...

    def verify(self, password: str, salt: bytes, digest: bytes) -> bool:
        """Recompute the digest and compare it in constant time."""
        ...
