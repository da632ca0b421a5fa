from pydantic_settings import BaseSettings, SettingsConfigDict

from document_downloader.database.models import ConnectionSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "documents"
    db_username: str = ""
    db_password: str = ""
    connect_timeout_seconds: int = 15
    pool_max_size: int = 4

    output_folder: str = ""

    query_timeout_seconds: int = 300
    fetch_batch_size: int = 50

    parallel_categories: bool = False
    max_category_workers: int = 4

    def connection_settings(self) -> ConnectionSettings:
        """Snapshot the connection parameters used for one run."""
        return ConnectionSettings(
            server=self.db_host,
            port=self.db_port,
            database=self.db_database,
            user=self.db_username,
            password=self.db_password,
            output_folder=self.output_folder,
            connect_timeout_seconds=self.connect_timeout_seconds,
        )
