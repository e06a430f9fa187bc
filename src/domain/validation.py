"""
Credential format policy.

Pure checks applied before any store access. The username is trimmed;
the password is returned untouched because whitespace in a password
is significant.

Lengths are counted in Unicode code points and trimming uses str.strip().
Both differ from JavaScript at the edges: an astral character such as an
emoji counts once here but twice as UTF-16 code units, and str.strip()
treats U+001C..U+001F as whitespace while U+FEFF is not stripped. Stored
credentials are unaffected; only the acceptance boundary moves.

Text must also be storable and hashable: it has to encode as UTF-8 (no
lone surrogates, which JSON escapes like "\\ud800" can produce), and
usernames may not contain NUL, which text columns reject.
"""

from typing import NamedTuple

from .exceptions import InvalidPassword, InvalidUsername

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class ValidatedCredentials(NamedTuple):
    """Username/password pair that passed the format policy."""

    username: str
    password: str


def normalize_username(username: str) -> str:
    """Strip leading/trailing whitespace before any comparison or storage."""
    return username.strip()


def is_utf8_encodable(text: str) -> bool:
    """False if `text` holds lone surrogates that UTF-8 cannot represent."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_credentials(username: str, password: str) -> ValidatedCredentials:
    """
    Check a candidate pair against the format policy.

    Args:
        username: Raw username as submitted
        password: Raw password as submitted

    Returns:
        ValidatedCredentials with the trimmed username

    Raises:
        InvalidUsername: Username shorter than 3 characters after trimming,
            not UTF-8 encodable, or containing NUL
        InvalidPassword: Password shorter than 6 characters or not UTF-8 encodable
    """
    normalized = normalize_username(username)
    if len(normalized) < MIN_USERNAME_LENGTH:
        raise InvalidUsername(f"username must be at least {MIN_USERNAME_LENGTH} characters")
    if "\x00" in normalized or not is_utf8_encodable(normalized):
        raise InvalidUsername("username contains invalid characters")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidPassword(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not is_utf8_encodable(password):
        raise InvalidPassword("password contains invalid characters")
    return ValidatedCredentials(username=normalized, password=password)
