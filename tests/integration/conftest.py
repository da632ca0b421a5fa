import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from document_downloader.config.settings import Settings
from document_downloader.database.connection import close_pool, get_connection, init_pool
from document_downloader.database.models import ConnectionSettings


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "documents_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def connection_settings(test_settings: Settings) -> ConnectionSettings:
    return test_settings.connection_settings()


@pytest.fixture(scope="session")
def integration_pool(connection_settings: ConnectionSettings) -> Generator[None, None, None]:
    try:
        init_pool(connection_settings, max_size=4)
    except Exception as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env vars.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def action_document_table(db_conn: psycopg.Connection[Any]) -> Generator[str, None, None]:
    """Create the Action category table for the test and drop it afterwards."""
    with db_conn.cursor() as cur:
        cur.execute("SELECT to_regclass('action_document')")
        row = cur.fetchone()
    if row is not None and row[0] is not None:
        pytest.skip("action_document already exists in the test database")
    db_conn.execute(
        """
        CREATE TABLE action_document (
            actiondetailid integer NOT NULL,
            title text,
            filename text,
            filedata bytea
        )
        """
    )
    db_conn.commit()
    try:
        yield "action_document"
    finally:
        db_conn.execute("DROP TABLE IF EXISTS action_document")
        db_conn.commit()
