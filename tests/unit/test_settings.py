import pytest
from pydantic import ValidationError

from document_downloader.config.settings import Settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("DB_HOST", "DB_PORT", "DB_USERNAME", "DB_PASSWORD", "OUTPUT_FOLDER",
                 "QUERY_TIMEOUT_SECONDS", "PARALLEL_CATEGORIES"):
        monkeypatch.delenv(name, raising=False)


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert Settings().app_env == "dev"

    def test_default_db_port(self) -> None:
        assert Settings().db_port == 5432

    def test_default_query_timeout(self) -> None:
        assert Settings().query_timeout_seconds == 300

    def test_sequential_by_default(self) -> None:
        s = Settings()
        assert s.parallel_categories is False
        assert s.max_category_workers == 4


class TestSettingsFromEnv:
    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        assert Settings().db_host == "db.example.com"

    def test_loads_output_folder(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OUTPUT_FOLDER", "/srv/export")
        assert Settings().output_folder == "/srv/export"

    def test_loads_parallel_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PARALLEL_CATEGORIES", "true")
        assert Settings().parallel_categories is True

    def test_reads_dotenv_file(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("DB_USERNAME=reader\n")
        assert Settings().db_username == "reader"


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QUERY_TIMEOUT_SECONDS", "abc")
        with pytest.raises(ValidationError):
            Settings()


class TestConnectionSettings:
    def test_snapshot_carries_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db")
        monkeypatch.setenv("DB_USERNAME", "reader")
        monkeypatch.setenv("DB_PASSWORD", "secret")
        monkeypatch.setenv("OUTPUT_FOLDER", "/srv/export")

        connection = Settings().connection_settings()

        assert connection.is_valid
        assert "host=db" in connection.conninfo
        assert "user=reader" in connection.conninfo
        assert connection.output_folder == "/srv/export"

    def test_blank_credentials_are_invalid(self) -> None:
        assert Settings().connection_settings().is_valid is False
