from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BILLTRACK_", extra="ignore")

    db_url: str = "sqlite:///billtrack.db"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-haiku-4-5"
    extraction_max_tokens: int = 1024
    extraction_timeout: float = 60.0  # seconds

    max_upload_size: int = 10 * 1024 * 1024  # 10 MB

    timezone: str = "UTC"

    log_level: str = "INFO"
    log_json: bool = False

    host: str = "127.0.0.1"
    port: int = 8000


settings = Settings()
