"""
JSON file repository adapter - Implements CredentialStore protocol.

This module persists credentials as a JSON array in a single file, in the
same layout the earlier Node.js service wrote:

    [
      {"username": "alice", "hash": "<hex digest>", "salt": "<hex salt>"}
    ]

Consistency Design:
------------------
1. **Absent vs unreadable**: A missing file is the normal "nothing registered
   yet" state and loads as an empty list. A file that exists but cannot be
   read raises StoreUnavailable; one that cannot be parsed raises
   StoreCorrupted. Neither is ever treated as empty.

2. **Atomic replace**: commit_all() writes a temporary file next to the
   target, fsyncs it and os.replace()s it over the target. Readers observe
   the previous collection or the new one, never a partial write.

3. **Two locks**: _commit_lock serialises the replace itself. _exclusive_lock
   is the store-wide lock handed out by exclusive() for load-check-commit
   sequences. Both are in-process only; run a single writer process per file.
"""

import logging
import os
import tempfile
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from src.domain.exceptions import StoreCorrupted, StoreUnavailable
from src.domain.ports import Credential

logger = logging.getLogger(__name__)

_HEX_PATTERN = r"^(?:[0-9a-fA-F]{2})*$"


class CredentialRecord(BaseModel):
    """On-disk shape of one credential."""

    username: str
    hash: str = Field(pattern=_HEX_PATTERN)
    salt: str = Field(pattern=_HEX_PATTERN)

    @classmethod
    def from_credential(cls, credential: Credential) -> "CredentialRecord":
        return cls(
            username=credential.username,
            hash=credential.digest.hex(),
            salt=credential.salt.hex(),
        )

    def to_credential(self) -> Credential:
        return Credential(
            username=self.username,
            salt=bytes.fromhex(self.salt),
            digest=bytes.fromhex(self.hash),
        )


_RECORDS = TypeAdapter(list[CredentialRecord])


class JsonFileCredentialStore:
    """
    Implements CredentialStore protocol via a JSON file.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The parent directory is created on first commit.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize store for the given file path.

        Args:
            path: Location of the credentials file (need not exist yet)
        """
        self.path = Path(path)
        self._exclusive_lock = threading.RLock()
        self._commit_lock = threading.Lock()

    def load_all(self) -> list[Credential]:
        """
        Load every credential in file order.

        Returns:
            Credentials in insertion order, empty if the file does not exist

        Raises:
            StoreUnavailable: File exists but could not be read
            StoreCorrupted: File contents are not a valid credential array
        """
        raw = self._read()
        if raw is None:
            return []

        try:
            records = _RECORDS.validate_json(raw)
        except PydanticValidationError as e:
            logger.error("Credential file %s is malformed: %d error(s)", self.path, e.error_count())
            raise StoreCorrupted(f"credential file is malformed: {self.path}") from e

        return [record.to_credential() for record in records]

    def commit_all(self, credentials: Sequence[Credential]) -> None:
        """
        Atomically replace the file with `credentials`.

        Raises:
            StoreUnavailable: Directory or file could not be written
            StoreCorrupted: A credential cannot be serialised to JSON
        """
        try:
            payload = _RECORDS.dump_json(
                [CredentialRecord.from_credential(c) for c in credentials],
                indent=2,
            )
        except (PydanticSerializationError, UnicodeEncodeError) as e:
            logger.error("Failed to serialise credentials for %s: %s", self.path, e)
            raise StoreCorrupted("credentials cannot be serialised") from e

        with self._commit_lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._replace(payload)
            except OSError as e:
                logger.error("Failed to write credential file %s: %s", self.path, e)
                raise StoreUnavailable(f"cannot write credential file: {self.path}") from e

        logger.debug("Committed %d credential(s) to %s", len(credentials), self.path)

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the store-wide write lock for the duration of the block."""
        with self._exclusive_lock:
            yield

    def _read(self) -> bytes | None:
        """Return the raw file contents, or None if no file exists yet."""
        if not self.path.exists():
            return None
        try:
            return self.path.read_bytes()
        except OSError as e:
            logger.error("Failed to read credential file %s: %s", self.path, e)
            raise StoreUnavailable(f"cannot read credential file: {self.path}") from e

    def _replace(self, payload: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=self.path.parent,
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
