"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request

from src.domain.authentication import AuthenticationService
from src.domain.ports import CredentialStore, PasswordHasher
from src.domain.registration import RegistrationService


def get_credential_store(request: Request) -> CredentialStore:
    """
    Get credential store from app state.

    The store is created during app lifespan startup and stored in app.state.
    One instance per app, so every request shares its exclusive() lock.
    """
    return request.app.state.credential_store


def get_password_hasher(request: Request) -> PasswordHasher:
    """Get password hasher from app state."""
    return request.app.state.password_hasher


def get_registration_service(request: Request) -> RegistrationService:
    """Create registration service wired to the shared store and hasher."""
    return RegistrationService(
        store=get_credential_store(request),
        hasher=get_password_hasher(request),
    )


def get_authentication_service(request: Request) -> AuthenticationService:
    """Create authentication service wired to the shared store and hasher."""
    return AuthenticationService(
        store=get_credential_store(request),
        hasher=get_password_hasher(request),
    )
