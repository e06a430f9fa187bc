"""
PostgreSQL repository adapter - Implements CredentialStore protocol.

This module provides the PostgreSQL implementation of the domain's
credential store port using psycopg3 with raw SQL.

Concurrency Design:
------------------
1. **commit_all()**: One transaction takes LOCK TABLE ... IN EXCLUSIVE MODE,
   deletes every row and re-inserts the collection. EXCLUSIVE still admits
   plain SELECTs, and MVCC gives those readers the previous committed state
   until the rewrite commits. Nobody sees a half-written collection.

2. **exclusive()**: A session-level pg_advisory_lock held on a dedicated
   pooled connection. This serialises load-check-commit sequences across
   every process sharing the database, not just threads in this one.

3. **In-process gate**: exclusive() first takes a threading lock so that at
   most one thread per process holds a connection while waiting for the
   advisory lock. Without it, waiters could drain the pool and starve the
   lock holder of the connection it needs to commit.

The UNIQUE constraint on username backs the domain's uniqueness check.
"""

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool

from src.domain.exceptions import StoreUnavailable
from src.domain.ports import Credential

logger = logging.getLogger(__name__)

# Advisory lock key reserved for credential registration ("mapk")
REGISTRATION_LOCK_KEY = 0x6D61706B

# src/adapters/repository/postgres.py -> <project root>/migrations
MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


class PostgresCredentialStore:
    """
    Implements CredentialStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, lock_key: int = REGISTRATION_LOCK_KEY) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            lock_key: Advisory lock key guarding exclusive()
        """
        self._pool = pool
        self._lock_key = lock_key
        self._gate = threading.Lock()

    def load_all(self) -> list[Credential]:
        """
        Load every credential ordered by insertion position.

        Raises:
            StoreUnavailable: Query failed
        """
        sql = "SELECT username, salt, digest FROM credentials ORDER BY position"

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql)
                rows = cursor.fetchall()
        except psycopg.Error as e:
            logger.error("Failed to load credentials: %s", e)
            raise StoreUnavailable("cannot read credentials table") from e

        return [Credential(username=row[0], salt=bytes(row[1]), digest=bytes(row[2])) for row in rows]

    def commit_all(self, credentials: Sequence[Credential]) -> None:
        """
        Replace the table contents with `credentials` in one transaction.

        Raises:
            StoreUnavailable: Transaction failed and was rolled back
        """
        insert_sql = """
            INSERT INTO credentials (position, username, salt, digest)
            VALUES (%s, %s, %s, %s)
        """
        rows = [(i, c.username, c.salt, c.digest) for i, c in enumerate(credentials)]

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("LOCK TABLE credentials IN EXCLUSIVE MODE")
                cursor.execute("DELETE FROM credentials")
                if rows:
                    cursor.executemany(insert_sql, rows)
                conn.commit()
        except psycopg.Error as e:
            logger.error("Failed to commit credentials: %s", e)
            raise StoreUnavailable("cannot write credentials table") from e

        logger.debug("Committed %d credential(s)", len(rows))

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the cross-process registration lock for the duration of the block."""
        with self._gate, self._pool.connection() as conn:
            try:
                conn.execute("SELECT pg_advisory_lock(%s)", (self._lock_key,))
            except psycopg.Error as e:
                logger.error("Failed to acquire registration lock: %s", e)
                raise StoreUnavailable("cannot acquire registration lock") from e
            try:
                yield
            finally:
                self._release(conn)

    def _release(self, conn: psycopg.Connection) -> None:
        """
        Drop the advisory lock without masking the caller's exception.

        If the unlock fails the session may still hold the lock, so the
        connection is closed; the server releases session locks on
        disconnect and the pool discards closed connections.
        """
        try:
            conn.execute("SELECT pg_advisory_unlock(%s)", (self._lock_key,))
            conn.commit()
        except psycopg.Error as e:
            logger.error("Failed to release registration lock, closing connection: %s", e)
            conn.close()


def run_migrations(pool: ConnectionPool, migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """
    Apply every `*.sql` file in `migrations_dir`, in filename order.

    Files must be idempotent (CREATE ... IF NOT EXISTS); they run on
    every startup.

    Raises:
        RuntimeError: A migration file failed to execute
    """
    scripts = sorted(migrations_dir.glob("*.sql")) if migrations_dir.is_dir() else []
    if not scripts:
        logger.warning("No migrations found in %s", migrations_dir)
        return

    for script in scripts:
        try:
            with pool.connection() as conn:
                conn.execute(script.read_text())
        except psycopg.Error as e:
            logger.error("Migration %s failed: %s", script.name, e)
            raise RuntimeError(f"Database migration failed: {script.name}") from e
        logger.info("Applied migration %s", script.name)
