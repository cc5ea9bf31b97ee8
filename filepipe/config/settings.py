from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    storage_backend: str = "local"
    storage_root: str = "/app/files"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "filepipe"
    db_username: str = "filepipe"
    db_password: str = "secret"

    raw_prefix: str = "uploads"
    results_prefix: str = "results"

    signing_secret: str = "change-me"
    public_base_url: str = "http://localhost:8000"
    upload_url_ttl_seconds: int = 300
    max_object_bytes: int = 10 * 1024 * 1024

    csv_delimiter: str = ","

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    poll_interval_seconds: float = 5.0
    poll_max_attempts: int = 60
    client_timeout_seconds: int = 30
