from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from document_downloader.database.models import ConnectionSettings
from document_downloader.logging.logger import Log

_pool: ConnectionPool | None = None


def init_pool(connection: ConnectionSettings, max_size: int = 4) -> None:
    """Initialize the global connection pool and wait for the first connection.

    Raises:
        psycopg_pool.PoolTimeout: if the source cannot be reached.
    """
    global _pool  # noqa: PLW0603
    close_pool()
    pool = ConnectionPool(
        connection.conninfo,
        min_size=1,
        max_size=max_size,
        open=True,
    )
    try:
        pool.wait(timeout=connection.connect_timeout_seconds)
    except Exception:
        pool.close()
        raise
    _pool = pool
    Log.debug(f"Connection pool opened for {connection.server}/{connection.database}")


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a connection from the pool. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn


def check_connection(connection: ConnectionSettings) -> tuple[bool, str]:
    """Open a single direct connection and run a trivial query.

    Never raises; usable without an initialized pool.
    """
    try:
        with psycopg.connect(connection.conninfo) as conn:
            conn.execute("SELECT 1")
        return True, "Connection successful!"
    except psycopg.Error as exc:
        return False, f"Database error: {exc}"
    except Exception as exc:
        return False, f"Error: {exc}"
