"""
scrypt password hasher - Implements PasswordHasher protocol.

This module derives password digests with scrypt, a memory-hard and
CPU-hard key-derivation function, via the `cryptography` package.

Security Design:
---------------
1. **Fixed lengths**: 16-byte salts and 64-byte digests. Changing either
   invalidates every stored credential, so they are constants, not settings.

2. **Salt material**: The KDF is fed the lowercase hex encoding of the salt,
   not the raw bytes. Credential files written by the earlier Node.js
   service were derived that way, and keeping it lets those files verify.

3. **Constant-time comparison**: verify() recomputes the digest and compares
   with secrets.compare_digest(), never with ==.

4. **Bounded derivation**: Each derivation runs on a worker thread owned by
   the hasher and is awaited with a timeout, so a misconfigured cost
   parameter surfaces as PasswordHashingTimeout instead of hanging the
   request. The worker thread itself cannot be interrupted and finishes in
   the background.
"""

import logging
import secrets
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from src.domain.exceptions import PasswordHashingFailed, PasswordHashingTimeout

logger = logging.getLogger(__name__)

SALT_LENGTH = 16
DIGEST_LENGTH = 64

# Parameters of Node.js crypto.scrypt() defaults, used by the original service
DEFAULT_N = 2**14
DEFAULT_R = 8
DEFAULT_P = 1


class ScryptPasswordHasher:
    """
    Implements PasswordHasher protocol via scrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Instances own a thread pool; call close() on shutdown.
    """

    def __init__(
        self,
        n: int = DEFAULT_N,
        r: int = DEFAULT_R,
        p: int = DEFAULT_P,
        timeout_seconds: float | None = 10.0,
        max_workers: int | None = None,
    ) -> None:
        """
        Initialize hasher with scrypt cost parameters.

        Args:
            n: CPU/memory cost, power of two greater than 1
            r: Block size
            p: Parallelization
            timeout_seconds: Upper bound for one derivation, None to wait forever
            max_workers: Size of the derivation thread pool
        """
        self.n = n
        self.r = r
        self.p = p
        self.timeout_seconds = timeout_seconds
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="scrypt")

    def generate_salt(self) -> bytes:
        """Generate SALT_LENGTH bytes from the OS CSPRNG."""
        return secrets.token_bytes(SALT_LENGTH)

    def derive(self, password: str, salt: bytes) -> bytes:
        """
        Derive the DIGEST_LENGTH-byte scrypt digest for (password, salt).

        Raises:
            PasswordHashingFailed: scrypt rejected its inputs or ran out of memory
            PasswordHashingTimeout: Derivation exceeded timeout_seconds
        """
        future = self._executor.submit(self._derive, password, salt)
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            logger.error("scrypt derivation exceeded %ss (n=%d r=%d p=%d)", self.timeout_seconds, self.n, self.r, self.p)
            raise PasswordHashingTimeout(f"key derivation exceeded {self.timeout_seconds}s") from None
        except (ValueError, MemoryError, UnsupportedAlgorithm) as e:
            raise PasswordHashingFailed("key derivation failed") from e

    def verify(self, password: str, salt: bytes, digest: bytes) -> bool:
        """Recompute the digest and compare it in constant time."""
        candidate = self.derive(password, salt)
        return secrets.compare_digest(candidate, digest)

    def close(self) -> None:
        """Shut down the derivation thread pool."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _derive(self, password: str, salt: bytes) -> bytes:
        kdf = Scrypt(salt=salt.hex().encode(), length=DIGEST_LENGTH, n=self.n, r=self.r, p=self.p)
        return kdf.derive(password.encode())
