"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for credential registration
and authentication. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .authentication import AuthenticationService
from .exceptions import (
    AuthenticationError,
    ConflictError,
    CredentialError,
    InternalError,
    InvalidCredentials,
    InvalidPassword,
    InvalidUsername,
    PasswordHashingFailed,
    PasswordHashingTimeout,
    StoreCorrupted,
    StoreUnavailable,
    UsernameTaken,
    ValidationError,
)
from .ports import Credential, CredentialStore, PasswordHasher
from .registration import RegistrationService
from .validation import ValidatedCredentials, validate_credentials

__all__ = [
    "AuthenticationError",
    "AuthenticationService",
    "ConflictError",
    "Credential",
    "CredentialError",
    "CredentialStore",
    "InternalError",
    "InvalidCredentials",
    "InvalidPassword",
    "InvalidUsername",
    "PasswordHasher",
    "PasswordHashingFailed",
    "PasswordHashingTimeout",
    "RegistrationService",
    "StoreCorrupted",
    "StoreUnavailable",
    "UsernameTaken",
    "ValidatedCredentials",
    "ValidationError",
    "validate_credentials",
]
