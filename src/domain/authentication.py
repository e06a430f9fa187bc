"""
Authentication domain service - password verification for sign-in.

Read-only: never mutates the store and never takes its exclusive lock.
Commit atomicity is enough for readers to see a consistent collection.

Username enumeration is resisted in two ways:
- Unknown usernames and wrong passwords raise the same InvalidCredentials.
- Unknown usernames still pay for a full key derivation against a
  throw-away salt, so response time does not reveal account existence.
"""

import logging
from dataclasses import dataclass

from .exceptions import InvalidCredentials
from .ports import CredentialStore, PasswordHasher
from .validation import is_utf8_encodable, normalize_username

logger = logging.getLogger(__name__)


@dataclass
class AuthenticationService:
    """Domain service for credential verification."""

    store: CredentialStore
    hasher: PasswordHasher

    def authenticate(self, username: str, password: str) -> str:
        """
        Verify a username/password pair against the stored credential.

        Args:
            username: Raw username (will be trimmed)
            password: Plaintext password

        Returns:
            The authenticated username

        Raises:
            InvalidCredentials: Unknown username or wrong password,
                or a password that cannot be encoded
            InternalError: Store or key derivation failure
        """
        normalized = normalize_username(username)
        if not is_utf8_encodable(password):
            # No stored digest can match a password UTF-8 cannot encode
            logger.info("Authentication failed for %r", normalized)
            raise InvalidCredentials()

        credential = next(
            (c for c in self.store.load_all() if c.username == normalized),
            None,
        )

        if credential is None:
            # Burn the same KDF cost as a real verification
            self.hasher.verify(password, self.hasher.generate_salt(), b"")
            logger.info("Authentication failed for %s", normalized)
            raise InvalidCredentials()

        if not self.hasher.verify(password, credential.salt, credential.digest):
            logger.info("Authentication failed for %s", normalized)
            raise InvalidCredentials()

        return credential.username
