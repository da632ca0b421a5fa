from unittest.mock import MagicMock, patch

import psycopg
import pytest

from document_downloader.database import connection as db
from document_downloader.database.models import ConnectionSettings


def _settings() -> ConnectionSettings:
    return ConnectionSettings(
        server="db", database="documents", user="reader", password="secret", output_folder="/out"
    )


class TestCheckConnection:
    def test_success(self) -> None:
        with patch.object(db.psycopg, "connect") as mock_connect:
            assert db.check_connection(_settings()) == (True, "Connection successful!")

        mock_connect.return_value.__enter__.return_value.execute.assert_called_once_with(
            "SELECT 1"
        )

    def test_database_error(self) -> None:
        with patch.object(db.psycopg, "connect", side_effect=psycopg.OperationalError("refused")):
            ok, message = db.check_connection(_settings())

        assert ok is False
        assert message == "Database error: refused"

    def test_other_error(self) -> None:
        with patch.object(db.psycopg, "connect", side_effect=ValueError("bad conninfo")):
            assert db.check_connection(_settings()) == (False, "Error: bad conninfo")


class TestPool:
    def test_get_connection_requires_pool(self) -> None:
        db.close_pool()
        with pytest.raises(RuntimeError, match="not initialized"):
            with db.get_connection():
                pass

    def test_init_and_close(self) -> None:
        pool = MagicMock()
        with patch.object(db, "ConnectionPool", return_value=pool) as mock_pool:
            db.init_pool(_settings(), max_size=6)
            assert mock_pool.call_args.kwargs["max_size"] == 6
            pool.wait.assert_called_once_with(timeout=15)
            db.close_pool()

        pool.close.assert_called_once()

    def test_failed_wait_closes_pool(self) -> None:
        pool = MagicMock()
        pool.wait.side_effect = TimeoutError("pool timeout")
        with patch.object(db, "ConnectionPool", return_value=pool):
            with pytest.raises(TimeoutError):
                db.init_pool(_settings())

        pool.close.assert_called_once()
        with pytest.raises(RuntimeError):
            with db.get_connection():
                pass
