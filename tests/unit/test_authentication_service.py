"""
Unit tests for AuthenticationService domain logic.

Tests verification behavior:
- Correct password succeeds, wrong password and unknown user fail identically
- Unknown users still pay for a key derivation
- Authentication never writes to the store
"""

from unittest.mock import Mock

import pytest

from src.adapters.hashing.scrypt import ScryptPasswordHasher
from src.adapters.repository.json_file import JsonFileCredentialStore
from src.domain.authentication import AuthenticationService
from src.domain.exceptions import InvalidCredentials, StoreUnavailable
from src.domain.ports import Credential
from src.domain.registration import RegistrationService


@pytest.fixture
def registered_store(
    store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
) -> JsonFileCredentialStore:
    """File store holding a single credential alice/secret1."""
    RegistrationService(store=store, hasher=hasher).register("alice", "secret1")
    return store


class TestAuthenticate:
    """Tests for authenticate() with real adapters."""

    def test_correct_password_succeeds(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """The registered pair authenticates."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        assert service.authenticate("alice", "secret1") == "alice"

    def test_username_is_trimmed(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """Surrounding whitespace in the username is ignored."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        assert service.authenticate("  alice ", "secret1") == "alice"

    def test_password_is_not_trimmed(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """Whitespace around the password makes it a different password."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        with pytest.raises(InvalidCredentials):
            service.authenticate("alice", " secret1")

    def test_wrong_password_fails(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """A wrong password raises InvalidCredentials."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        with pytest.raises(InvalidCredentials):
            service.authenticate("alice", "wrong")

    def test_unknown_user_fails(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """An unknown username raises the same InvalidCredentials."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        with pytest.raises(InvalidCredentials):
            service.authenticate("mallory", "secret1")

    def test_username_is_case_sensitive(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """'ALICE' is not 'alice'."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        with pytest.raises(InvalidCredentials):
            service.authenticate("ALICE", "secret1")

    def test_empty_store_fails(
        self, store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """Authentication against a store with no file fails cleanly."""
        service = AuthenticationService(store=store, hasher=hasher)
        with pytest.raises(InvalidCredentials):
            service.authenticate("alice", "secret1")

    def test_failure_messages_identical(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """Unknown user and wrong password are indistinguishable."""
        service = AuthenticationService(store=registered_store, hasher=hasher)

        with pytest.raises(InvalidCredentials) as unknown:
            service.authenticate("mallory", "secret1")
        with pytest.raises(InvalidCredentials) as wrong:
            service.authenticate("alice", "wrong1")

        assert type(unknown.value) is type(wrong.value)
        assert str(unknown.value) == str(wrong.value)


class TestWithMockedPorts:
    """Tests for port usage."""

    def test_unknown_user_still_runs_verification(self) -> None:
        """A throw-away verification runs when the username is unknown."""
        store = Mock()
        store.load_all.return_value = []
        hasher = Mock()
        hasher.generate_salt.return_value = b"x" * 16
        hasher.verify.return_value = False
        service = AuthenticationService(store=store, hasher=hasher)

        with pytest.raises(InvalidCredentials):
            service.authenticate("mallory", "secret1")

        hasher.verify.assert_called_once_with("secret1", b"x" * 16, b"")

    def test_verify_called_with_stored_salt_and_digest(self) -> None:
        """Known users are verified against their own salt and digest."""
        credential = Credential(username="alice", salt=b"s" * 16, digest=b"d" * 64)
        store = Mock()
        store.load_all.return_value = [credential]
        hasher = Mock()
        hasher.verify.return_value = True
        service = AuthenticationService(store=store, hasher=hasher)

        assert service.authenticate("alice", "secret1") == "alice"
        hasher.verify.assert_called_once_with("secret1", b"s" * 16, b"d" * 64)

    def test_never_writes_or_locks(self) -> None:
        """Authentication is read-only and lock-free."""
        store = Mock()
        store.load_all.return_value = [Credential(username="alice", salt=b"", digest=b"")]
        hasher = Mock()
        hasher.verify.return_value = False
        service = AuthenticationService(store=store, hasher=hasher)

        with pytest.raises(InvalidCredentials):
            service.authenticate("alice", "secret1")

        store.commit_all.assert_not_called()
        store.exclusive.assert_not_called()

    def test_store_failure_propagates(self) -> None:
        """Store errors are internal errors, not authentication failures."""
        store = Mock()
        store.load_all.side_effect = StoreUnavailable("boom")
        service = AuthenticationService(store=store, hasher=Mock())

        with pytest.raises(StoreUnavailable):
            service.authenticate("alice", "secret1")


class TestUnencodablePassword:
    """Passwords UTF-8 cannot encode."""

    def test_lone_surrogate_password_is_invalid_credentials(self) -> None:
        """Such a password can never match, so it fails like a wrong password."""
        store = Mock()
        hasher = Mock()
        service = AuthenticationService(store=store, hasher=hasher)

        with pytest.raises(InvalidCredentials):
            service.authenticate("alice", "secret\ud800")

        hasher.verify.assert_not_called()

    def test_lone_surrogate_password_with_real_hasher(
        self, registered_store: JsonFileCredentialStore, hasher: ScryptPasswordHasher
    ) -> None:
        """No internal error reaches the caller."""
        service = AuthenticationService(store=registered_store, hasher=hasher)
        with pytest.raises(InvalidCredentials):
            service.authenticate("alice", "secret\ud800")
