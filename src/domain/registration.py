"""
Registration domain service - check-then-insert under a store lock.

This module contains the core business logic for credential registration.

Registration Flow
=================

1. Validate username/password format (no store access on failure)
2. Acquire the store's exclusive lock
3. Load the current credential collection
4. Reject the username if any stored credential already uses it
5. Generate a fresh salt and derive the digest
6. Append the new credential and commit the whole collection
7. Release the lock

Steps 3-6 form a check-then-act sequence. Holding the store lock across
all of them guarantees that two concurrent registrations for the same
new username cannot both pass step 4, and that one commit never drops
another writer's credential.
"""

import logging
from dataclasses import dataclass

from .exceptions import UsernameTaken
from .ports import Credential, CredentialStore, PasswordHasher
from .validation import validate_credentials

logger = logging.getLogger(__name__)


@dataclass
class RegistrationService:
    """
    Domain service for credential registration.

    Orchestrates validation, the uniqueness check, key derivation
    and persistence.
    """

    store: CredentialStore
    hasher: PasswordHasher

    def register(self, username: str, password: str) -> str:
        """
        Register a new credential.

        Args:
            username: Raw username (will be trimmed)
            password: Plaintext password (never stored)

        Returns:
            The username as stored

        Raises:
            InvalidUsername: Username fails the format policy
            InvalidPassword: Password fails the format policy
            UsernameTaken: Username is already registered
            InternalError: Store or key derivation failure
        """
        validated = validate_credentials(username, password)

        with self.store.exclusive():
            credentials = self.store.load_all()
            if any(c.username == validated.username for c in credentials):
                logger.info("Registration rejected, username taken: %s", validated.username)
                raise UsernameTaken(validated.username)

            salt = self.hasher.generate_salt()
            digest = self.hasher.derive(validated.password, salt)

            credentials.append(Credential(username=validated.username, salt=salt, digest=digest))
            self.store.commit_all(credentials)

        logger.info("Registered credential for %s", validated.username)
        return validated.username
