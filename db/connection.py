"""
db/connection.py
----------------
Owns the PostgreSQL connection pool.

Uses psycopg2's ThreadedConnectionPool so concurrent requests can each check
out their own connection. One ``Database`` is opened at process start, handed
to every repository, and closed at shutdown.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
import psycopg2.errors
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN, DB_STATEMENT_TIMEOUT_MS
from exceptions import (
    ConstraintViolation,
    DuplicateKey,
    MissingReference,
    RepositoryError,
    StoreError,
    Timeout,
)
from utils.logger import get_logger

logger = get_logger(__name__)


def translate_error(exc: psycopg2.Error, entity: Optional[str] = None) -> RepositoryError:
    """
    Map a psycopg2 exception onto the layer's error taxonomy.

    Args:
        exc: The exception raised by the driver.
        entity: Optional entity name to prefix the message with.

    Returns:
        A RepositoryError subclass; the caller raises it ``from exc``.
    """
    message = (getattr(exc, "pgerror", None) or str(exc) or type(exc).__name__).strip()
    if isinstance(exc, psycopg2.errors.UniqueViolation):
        return DuplicateKey(message, entity)
    if isinstance(exc, psycopg2.errors.ForeignKeyViolation):
        return MissingReference(message, entity)
    if isinstance(exc, psycopg2.IntegrityError):
        return ConstraintViolation(message, entity)
    if isinstance(exc, psycopg2.errors.QueryCanceled):
        return Timeout(message, entity)
    return StoreError(message, entity)


class Database:
    """
    Handle on the relational store.

    Args:
        dsn: libpq connection string.
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.
        statement_timeout_ms: Default deadline per transaction (0 = none).
        connection_pool: An already built pool; mostly for tests.
    """

    def __init__(
        self,
        dsn: str = DATABASE_URL,
        min_conn: int = DB_POOL_MIN,
        max_conn: int = DB_POOL_MAX,
        statement_timeout_ms: int = DB_STATEMENT_TIMEOUT_MS,
        connection_pool=None,
    ):
        self.dsn = dsn
        self.min_conn = min_conn
        self.max_conn = max_conn
        self.statement_timeout_ms = statement_timeout_ms
        self._pool = connection_pool

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> "Database":
        """
        Initialize the connection pool. Calling it twice is harmless.

        Raises:
            StoreError: If the database is unreachable.
        """
        if self._pool is not None:
            return self
        try:
            self._pool = pool.ThreadedConnectionPool(self.min_conn, self.max_conn, self.dsn)
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.Error as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise StoreError(f"Failed to connect to the database: {e}") from e
        return self

    def close(self) -> None:
        """Close all connections in the pool."""
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database connection pool closed.")

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def connection(self, entity: Optional[str] = None):
        """
        Borrow a connection from the pool and always give it back.

        Raises:
            RuntimeError: If the pool has not been opened.
            StoreError: If the pool is exhausted or a new connection
                cannot be opened.
        """
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call open() first.")
        try:
            conn = self._pool.getconn()
        except pool.PoolError as e:
            raise StoreError(f"No database connection available: {e}", entity) from e
        except psycopg2.Error as e:
            # the pool opens connections lazily beyond min_conn
            logger.error(f"Failed to open a database connection: {e}")
            raise translate_error(e, entity) from e
        try:
            yield conn
        finally:
            self._pool.putconn(conn)

    @contextmanager
    def transaction(self, timeout: Optional[float] = None, entity: Optional[str] = None) -> Iterator:
        """
        Run a block as one transaction and yield its cursor.

        Commits when the block finishes, rolls back on any exception.
        Driver exceptions are re-raised as RepositoryError subclasses.

        Args:
            timeout: Deadline in seconds for each statement of the
                transaction, so a block running two statements may take up
                to twice as long. Falls back to ``statement_timeout_ms``
                when omitted.
            entity: Name used to label translated errors.

        Raises:
            Timeout: If ``timeout`` is already expired (<= 0) or the store
                cancels a statement because of it.
        """
        timeout_ms = self._deadline_ms(timeout, entity)
        with self.connection(entity) as conn:
            try:
                with conn.cursor() as cur:
                    if timeout_ms:
                        cur.execute("SET LOCAL statement_timeout = %s;", (timeout_ms,))
                    yield cur
                conn.commit()
            except psycopg2.Error as e:
                self._rollback(conn)
                raise translate_error(e, entity) from e
            except Exception:
                self._rollback(conn)
                raise

    @staticmethod
    def _rollback(conn) -> None:
        """Roll back, keeping the original error if the connection is already gone."""
        try:
            conn.rollback()
        except psycopg2.Error as e:
            logger.error(f"Rollback failed: {e}")

    def _deadline_ms(self, timeout: Optional[float], entity: Optional[str]) -> int:
        if timeout is None:
            return self.statement_timeout_ms
        if timeout <= 0:
            raise Timeout("Deadline expired before the query was sent", entity)
        # statement_timeout is whole milliseconds; never round down to "no limit"
        return max(1, int(timeout * 1000))
