"""
Domain exceptions - Semantic error types for credentials.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.

Taxonomy:
- ValidationError: client-caused format violation, safe to report verbatim
- ConflictError: client-caused uniqueness violation, safe to report verbatim
- AuthenticationError: deliberately generic (no unknown-user vs wrong-password split)
- InternalError: storage or key-derivation failure, never exposed to callers
"""


class CredentialError(Exception):
    """Base class for credential domain errors."""

    pass


class ValidationError(CredentialError):
    """Username or password violates the format policy."""

    @property
    def message(self) -> str:
        return str(self)


class InvalidUsername(ValidationError):
    """Username is empty or too short after trimming."""

    pass


class InvalidPassword(ValidationError):
    """Password is empty or too short."""

    pass


class ConflictError(CredentialError):
    """Operation conflicts with the current store state."""

    pass


class UsernameTaken(ConflictError):
    """A credential with this username is already registered."""

    pass


class AuthenticationError(CredentialError):
    """Authentication did not succeed."""

    pass


class InvalidCredentials(AuthenticationError):
    """Unknown username or wrong password (indistinguishable on purpose)."""

    pass


class InternalError(CredentialError):
    """The system could not process otherwise acceptable input."""

    pass


class StoreUnavailable(InternalError):
    """Credential store could not be read or written."""

    pass


class StoreCorrupted(InternalError):
    """Credential store exists but its contents cannot be parsed."""

    pass


class PasswordHashingFailed(InternalError):
    """Key-derivation primitive raised an error."""

    pass


class PasswordHashingTimeout(InternalError):
    """Key derivation exceeded the configured time bound."""

    pass
